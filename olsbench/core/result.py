"""
Result envelope shared by fit() and the coefficient methods.

Whatever produced the numbers, the report and the CLI find the
method-specific payload on `params` and the bookkeeping (timing,
which backend ran, warnings) in the same place.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen output of one computation.

    Attributes:
        params: Payload, e.g. LinearParams or CoefficientParams
        info: Free-form metadata such as method, rank, pivot
        timing: Timer.result() output; None when nothing was timed
        backend_name: Short id of the code path, e.g. 'cpu_qr', 'crossprod'
        warnings: Conditions worth reporting that did not stop the computation

    Example:
        >>> Result(
        ...     params=CoefficientParams(coefficients=beta),
        ...     info={'method': 'crossprod'},
        ...     timing=None,
        ...     backend_name='crossprod',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in w for w in self.warnings)

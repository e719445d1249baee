"""
Single-shot coefficient computation.

This module provides coefficients() (public API): validate once, run one
method, wrap the answer in the shared Result envelope. Benchmarks bypass
it and time Method.prepare() callables directly, so none of the
validation below is inside a timed region.
"""

import warnings
from numpy.typing import ArrayLike

from olsbench.core.compute.linalg import condition_number
from olsbench.core.compute.timing import Timer
from olsbench.core.compute.tolerances import NORMAL_EQUATIONS_CONDITION_THRESHOLD
from olsbench.core.result import Result
from olsbench.methods.registry import Method, get_method
from olsbench.methods.solution import CoefficientParams
from olsbench.regression.design import Design


def coefficients(
    X_or_design: ArrayLike | Design,
    y: ArrayLike | None = None,
    *,
    method: str | Method = 'crossprod',
    check_condition: bool = True,
) -> Result[CoefficientParams]:
    """
    Compute OLS coefficients with one of the registered methods.

    Args:
        X_or_design: Design matrix (n x p) or a prebuilt Design
        y: Response vector (n,). Required when X is an array.
        method: Method name or Method instance (see available_methods())
        check_condition: If True and the method forms X'X, compute cond(X)
            and warn when it exceeds NORMAL_EQUATIONS_CONDITION_THRESHOLD

    Returns:
        Result[CoefficientParams] with timing sections 'prepare' and 'compute'

    Raises:
        ValidationError: If inputs are invalid
        ValueError: If y is missing or the method is unknown
        SingularMatrixError: If X'X (or X) is singular for this method
        NotPositiveDefiniteError: If the Cholesky factorization fails
    """
    impl = get_method(method)

    if isinstance(X_or_design, Design):
        design = X_or_design
    else:
        if y is None:
            raise ValueError("y required when passing arrays")
        design = Design.from_arrays(X_or_design, y)

    timer = Timer()
    timer.start()

    notes: list[str] = []
    cond = None
    if check_condition and impl.normal_equations:
        with timer.section('condition_check'):
            cond = condition_number(design.X)
        if cond > NORMAL_EQUATIONS_CONDITION_THRESHOLD:
            message = (
                f"Design matrix is ill-conditioned (condition number {cond:.2e}); "
                f"method {impl.name!r} forms X'X and squares it. "
                f"Consider method='lm' (QR)."
            )
            warnings.warn(message, RuntimeWarning, stacklevel=2)
            notes.append(message)

    with timer.section('prepare'):
        run = impl.prepare(design.X, design.y)

    with timer.section('compute'):
        beta = run()

    timer.stop()

    return Result(
        params=CoefficientParams(coefficients=beta, condition_number=cond),
        info={'method': impl.name, 'step': impl.step, 'expression': impl.expression},
        timing=timer.result(),
        backend_name=impl.name,
        warnings=tuple(notes),
    )

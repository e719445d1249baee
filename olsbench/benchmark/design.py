"""
Benchmark Design.

A BenchmarkDesign is the validated description of one microbenchmark
run: which expressions, under which names, how often and in what order.
It holds no timings; the evaluation schedule it produces is consumed by
the runner in solvers.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal
import numpy as np
from numpy.typing import NDArray

from olsbench.core.exceptions import ValidationError
from olsbench.core.validation import check_callable, check_positive_int

Control = Literal['random', 'inorder', 'block']
CONTROLS = ('random', 'inorder', 'block')


@dataclass(frozen=True)
class BenchmarkDesign:
    """
    What to run and how. Immutable after construction.

    Attributes:
        names: Expression labels, unique
        exprs: Zero-argument callables, same order as names
        times: Recorded evaluations per expression
        warmup: Unrecorded evaluations per expression, run first
        control: Evaluation order ('random', 'inorder' or 'block')
        setup: Called before every evaluation, untimed
        seed: Seed for the 'random' schedule
    """
    names: tuple[str, ...]
    exprs: tuple[Callable[[], Any], ...]
    times: int
    warmup: int
    control: Control
    setup: Callable[[], Any] | None
    seed: int | None

    @classmethod
    def build(
        cls,
        exprs: dict[str, Callable[[], Any]],
        *,
        times: int,
        warmup: int,
        control: str,
        setup: Callable[[], Any] | None = None,
        seed: int | None = None,
    ) -> BenchmarkDesign:
        """
        Validate and build a design.

        Raises:
            ValidationError: If there are no expressions, a non-callable
                expression, times < 1 or warmup < 0
            ValueError: If control is unknown
        """
        if not exprs:
            raise ValidationError("microbenchmark: no expressions given")
        for name, expr in exprs.items():
            check_callable(expr, f"expression {name!r}")
        if setup is not None:
            check_callable(setup, "setup")

        times = check_positive_int(times, 'times', minimum=1)
        warmup = check_positive_int(warmup, 'warmup', minimum=0)
        if control not in CONTROLS:
            raise ValueError(
                f"Unknown control: {control!r}. Use one of {', '.join(CONTROLS)}"
            )

        return cls(
            names=tuple(exprs),
            exprs=tuple(exprs.values()),
            times=times,
            warmup=warmup,
            control=control,
            setup=setup,
            seed=seed,
        )

    @property
    def n_exprs(self) -> int:
        return len(self.names)

    def schedule(self) -> NDArray[np.intp]:
        """
        Order in which expressions are evaluated, as indices into exprs.

        Each index appears exactly `times` times:
            'inorder'  0, 1, ..., k-1, 0, 1, ..., k-1, ...
            'block'    0, 0, ..., 1, 1, ..., k-1, k-1, ...
            'random'   a seeded shuffle of the above
        """
        k, times = self.n_exprs, self.times
        if self.control == 'block':
            return np.repeat(np.arange(k), times)
        order = np.tile(np.arange(k), times)
        if self.control == 'random':
            np.random.default_rng(self.seed).shuffle(order)
        return order

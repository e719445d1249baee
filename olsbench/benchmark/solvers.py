"""
Microbenchmark runner.

This module provides microbenchmark() (public API): build the design,
run the warmup and the evaluation schedule, then check and wrap.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable
import numpy as np

from olsbench.benchmark.design import BenchmarkDesign
from olsbench.benchmark.solution import BenchmarkParams, BenchmarkSolution
from olsbench.core.compute.timing import clock_ns, clock_resolution_ns
from olsbench.core.compute.tolerances import select_tolerance
from olsbench.core.exceptions import BenchmarkCheckError, ValidationError
from olsbench.methods.registry import Method

Check = str | Callable[[list[Any]], bool] | None


def microbenchmark(
    *exprs: Callable[[], Any] | Method,
    times: int = 100,
    control: str = 'random',
    warmup: int = 2,
    check: Check = None,
    setup: Callable[[], Any] | None = None,
    names: list[str] | None = None,
    data: Any = None,
    seed: int | None = None,
    **named_exprs: Callable[[], Any] | Method,
) -> BenchmarkSolution:
    """
    Time expressions by repeated evaluation.

    Expressions are zero-argument callables. A Method is also accepted;
    it is prepared against `data` first, outside the timed region.

    Args:
        *exprs: Expressions to time, named by `names`, by Method.name, or
            by the callable's __name__
        times: Recorded evaluations per expression
        control: 'random' (seeded shuffle), 'inorder' or 'block'
        warmup: Unrecorded evaluations per expression, run before timing
        check: None, 'equal', or a callable taking the list of first
            results and returning True when they agree
        setup: Called before every evaluation, untimed
        names: Labels for the positional expressions
        data: (X, y) pair or an object with X and y attributes, required
            when Methods are passed
        seed: Seed for the 'random' schedule
        **named_exprs: Expressions labelled by keyword

    Returns:
        BenchmarkSolution

    Raises:
        ValidationError: Bad counts, duplicate names, non-callables, or a
            Method without data
        ValueError: Unknown control or check
        BenchmarkCheckError: If check fails
    """
    if check is not None and not callable(check) and check != 'equal':
        raise ValueError(f"Unknown check: {check!r}. Use 'equal' or a callable")

    labelled, tiers = _label_expressions(exprs, names, named_exprs, data)
    design = BenchmarkDesign.build(
        labelled, times=times, warmup=warmup, control=control, setup=setup, seed=seed,
    )

    # Warmup
    for _ in range(design.warmup):
        for expr in design.exprs:
            if design.setup is not None:
                design.setup()
            expr()

    order = design.schedule()
    elapsed = np.empty(order.shape[0], dtype=np.int64)
    first_values: list[Any] = [None] * design.n_exprs
    seen = [False] * design.n_exprs
    exprs_ = design.exprs
    do_setup = design.setup

    for slot, idx in enumerate(order):
        if do_setup is not None:
            do_setup()
        expr = exprs_[idx]
        start = clock_ns()
        value = expr()
        elapsed[slot] = clock_ns() - start
        if not seen[idx]:
            first_values[idx] = value
            seen[idx] = True

    if check is not None:
        _run_check(check, design.names, first_values, tiers)

    notes = _resolution_warnings(design.names, order, elapsed)

    return BenchmarkSolution(
        _params=BenchmarkParams(
            order=order,
            time_ns=elapsed,
            first_values=tuple(first_values),
        ),
        _design=design,
        _warnings=notes,
    )


def _label_expressions(
    exprs: tuple[Callable[[], Any] | Method, ...],
    names: list[str] | None,
    named_exprs: dict[str, Callable[[], Any] | Method],
    data: Any,
) -> tuple[dict[str, Callable[[], Any]], dict[str, str]]:
    """
    Resolve names and prepare Methods; names must be unique.

    Also returns, per label, the name tolerance tiers are looked up by:
    Method.name for a Method, the label itself for a plain callable.
    """
    if names is not None and len(names) != len(exprs):
        raise ValidationError(
            f"names: got {len(names)} names for {len(exprs)} expressions"
        )

    items: list[tuple[str, Callable[[], Any] | Method]] = []
    for i, expr in enumerate(exprs):
        if names is not None:
            label = names[i]
        elif isinstance(expr, Method):
            label = expr.name
        else:
            label = getattr(expr, '__name__', f"expr{i + 1}")
        items.append((label, expr))
    items.extend(named_exprs.items())

    labelled: dict[str, Callable[[], Any]] = {}
    tiers: dict[str, str] = {}
    for label, expr in items:
        if label in labelled:
            raise ValidationError(f"Duplicate expression name: {label!r}")
        if isinstance(expr, Method):
            if data is None:
                raise ValidationError(
                    f"Method {expr.name!r} needs data=(X, y) to be prepared"
                )
            X, y = _unpack_data(data)
            tiers[label] = expr.name
            expr = expr.prepare(X, y)
        else:
            tiers[label] = label
        labelled[label] = expr
    return labelled, tiers


def _unpack_data(data: Any) -> tuple[Any, Any]:
    if hasattr(data, 'X') and hasattr(data, 'y'):
        return data.X, data.y
    X, y = data
    return X, y


def _run_check(
    check: Check,
    names: tuple[str, ...],
    values: list[Any],
    tiers: dict[str, str],
) -> None:
    if callable(check):
        if not check(values):
            raise BenchmarkCheckError(
                f"Check function returned False for expressions: {', '.join(names)}",
                mismatched=names,
            )
        return

    reference = np.asarray(values[0], dtype=np.float64)
    ref_tier = select_tolerance(tiers[names[0]])
    mismatched: list[str] = []
    max_diff = 0.0
    for name, value in zip(names[1:], values[1:]):
        arr = np.asarray(value, dtype=np.float64)
        if arr.shape != reference.shape:
            mismatched.append(name)
            continue
        tier = select_tolerance(tiers[name])
        rtol = max(tier.rtol, ref_tier.rtol)
        atol = max(tier.atol, ref_tier.atol)
        max_diff = max(max_diff, float(np.max(np.abs(arr - reference), initial=0.0)))
        if not np.allclose(arr, reference, rtol=rtol, atol=atol):
            mismatched.append(name)

    if mismatched:
        raise BenchmarkCheckError(
            f"Expressions disagree with {names[0]!r}: {', '.join(mismatched)} "
            f"(max abs diff {max_diff:.3e})",
            mismatched=tuple(mismatched),
            max_abs_diff=max_diff,
        )


def _resolution_warnings(names: tuple[str, ...], order: np.ndarray, elapsed: np.ndarray) -> tuple[str, ...]:
    resolution = clock_resolution_ns()
    notes = []
    for idx, name in enumerate(names):
        median = float(np.median(elapsed[order == idx]))
        if median <= resolution:
            message = (
                f"Expression {name!r}: median time {median:.0f} ns is at or below "
                f"the clock resolution ({resolution:.0f} ns); timings are not meaningful"
            )
            warnings.warn(message, UserWarning, stacklevel=3)
            notes.append(message)
    return tuple(notes)

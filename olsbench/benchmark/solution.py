"""
Benchmark solution types.

BenchmarkSolution keeps every recorded evaluation (in nanoseconds, in
the order they ran) and derives the summary tables, speedups and the
long-format frame the plots are drawn from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
import pandas as pd
from numpy.typing import NDArray

if TYPE_CHECKING:
    from olsbench.benchmark.design import BenchmarkDesign


UNIT_SCALE = {'ns': 1.0, 'us': 1e3, 'ms': 1e6, 's': 1e9}
UNIT_NAMES = {'ns': 'nanoseconds', 'us': 'microseconds', 'ms': 'milliseconds', 's': 'seconds'}
SUMMARY_COLUMNS = ['expr', 'min', 'lq', 'mean', 'median', 'uq', 'max', 'neval']


def select_unit(median_ns: float) -> str:
    """Largest unit in which median_ns is at least 1."""
    for unit in ('s', 'ms', 'us'):
        if median_ns >= UNIT_SCALE[unit]:
            return unit
    return 'ns'


@dataclass(frozen=True)
class BenchmarkParams:
    """
    Raw benchmark payload.

    Attributes:
        order: Expression index of each recorded evaluation
        time_ns: Elapsed nanoseconds of each recorded evaluation
        first_values: First return value of each expression (for checks)
    """
    order: NDArray[np.intp]
    time_ns: NDArray[np.int64]
    first_values: tuple[Any, ...]


@dataclass
class BenchmarkSolution:
    """
    User-facing microbenchmark results.

    Example:
        >>> res = microbenchmark(a=f, b=g, times=50)
        >>> res.summary(unit='ms')
        >>> res.speedup('a')
    """
    _params: BenchmarkParams
    _design: 'BenchmarkDesign'
    _warnings: tuple[str, ...] = ()

    # Cached computations
    _timings: pd.DataFrame | None = None

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def times(self) -> int:
        return self._design.times

    @property
    def control(self) -> str:
        return self._design.control

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._warnings

    @property
    def first_values(self) -> dict[str, Any]:
        return dict(zip(self.names, self._params.first_values))

    @property
    def timings(self) -> pd.DataFrame:
        """
        Long-format timings: one row per evaluation, in execution order.

        Columns:
            expr: categorical expression name (categories in given order)
            time_ns: elapsed nanoseconds
        """
        if self._timings is None:
            labels = np.asarray(self.names, dtype=object)[self._params.order]
            self._timings = pd.DataFrame({
                'expr': pd.Categorical(labels, categories=list(self.names), ordered=True),
                'time_ns': self._params.time_ns,
            })
        return self._timings

    def _stats_ns(self) -> pd.DataFrame:
        grouped = self.timings.groupby('expr', observed=False)['time_ns']
        stats = pd.DataFrame({
            'min': grouped.min(),
            'lq': grouped.quantile(0.25),
            'mean': grouped.mean(),
            'median': grouped.median(),
            'uq': grouped.quantile(0.75),
            'max': grouped.max(),
            'neval': grouped.size(),
        }).astype({'min': float, 'max': float})
        return stats.reindex(list(self.names))

    def summary(self, unit: str | None = None, relative: bool = False) -> pd.DataFrame:
        """
        Per-expression summary statistics.

        Args:
            unit: 'ns', 'us', 'ms' or 's'. None picks the unit of the
                fastest median.
            relative: Divide each statistic by its smallest value across
                expressions (the fastest expression reads 1.0). Ignores unit.

        Returns:
            DataFrame with columns expr, min, lq, mean, median, uq, max, neval.
            The chosen unit is stored in DataFrame.attrs['unit'].

        Raises:
            ValueError: If unit is unknown
        """
        stats = self._stats_ns()
        value_cols = SUMMARY_COLUMNS[1:-1]

        if relative:
            stats[value_cols] = stats[value_cols] / stats[value_cols].min()
            unit_name = 'relative'
        else:
            if unit is None:
                unit = select_unit(float(stats['median'].min()))
            if unit not in UNIT_SCALE:
                raise ValueError(
                    f"Unknown unit: {unit!r}. Use one of {', '.join(UNIT_SCALE)}"
                )
            stats[value_cols] = stats[value_cols] / UNIT_SCALE[unit]
            unit_name = unit

        out = stats.reset_index().rename(columns={'index': 'expr'})
        out = out[SUMMARY_COLUMNS]
        out['neval'] = out['neval'].astype(int)
        out.attrs['unit'] = unit_name
        return out

    def medians_ns(self) -> pd.Series:
        """Median nanoseconds per expression."""
        return self._stats_ns()['median']

    def fastest(self) -> str:
        """Name of the expression with the smallest median."""
        return str(self.medians_ns().idxmin())

    def speedup(self, baseline: str) -> pd.Series:
        """
        Median speedup of every expression over `baseline`.

        Values above 1 mean faster than the baseline.

        Raises:
            KeyError: If baseline is not one of the expressions
        """
        medians = self.medians_ns()
        if baseline not in medians.index:
            raise KeyError(
                f"No expression named {baseline!r}. Available: {', '.join(self.names)}"
            )
        return (medians[baseline] / medians).rename('speedup')

    def table(self, unit: str | None = None, relative: bool = False, digits: int = 4) -> str:
        """Text rendering of summary(), headed by the unit."""
        frame = self.summary(unit=unit, relative=relative)
        unit_name = frame.attrs['unit']
        header = f"Unit: {UNIT_NAMES.get(unit_name, unit_name)}"
        body = frame.to_string(index=False, float_format=lambda v: f"{v:.{digits}g}")
        return f"{header}\n{body}"

    def __repr__(self) -> str:
        return (
            f"BenchmarkSolution(exprs={len(self.names)}, times={self.times}, "
            f"control={self.control!r}, fastest={self.fastest()!r})"
        )

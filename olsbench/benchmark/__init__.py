"""
Microbenchmark harness.

Public API:
    microbenchmark(*exprs, times=100, control='random', ...) -> BenchmarkSolution

Example:
    >>> from olsbench.benchmark import microbenchmark
    >>> res = microbenchmark(
    ...     inverse=lambda: np.linalg.inv(X.T @ X) @ (X.T @ y),
    ...     solve=lambda: np.linalg.solve(X.T @ X, X.T @ y),
    ...     times=20,
    ... )
    >>> print(res.table())
"""

from olsbench.benchmark.design import BenchmarkDesign, CONTROLS
from olsbench.benchmark.solution import BenchmarkParams, BenchmarkSolution, select_unit
from olsbench.benchmark.solvers import microbenchmark

__all__ = [
    "microbenchmark",
    "BenchmarkDesign",
    "BenchmarkParams",
    "BenchmarkSolution",
    "CONTROLS",
    "select_unit",
]

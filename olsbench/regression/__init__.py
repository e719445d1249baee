"""
Full linear model fit.

Public API:
    fit(X, y, ...) -> LinearSolution

Example:
    >>> from olsbench.regression import fit
    >>> result = fit(X, y)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from olsbench.regression.design import Design
from olsbench.regression.solution import LinearSolution, LinearParams
from olsbench.regression.solvers import fit

__all__ = [
    "fit",
    "Design",
    "LinearSolution",
    "LinearParams",
]

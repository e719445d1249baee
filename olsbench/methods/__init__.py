"""
Competing ways of computing OLS coefficients.

Public API:
    coefficients(X, y, method='crossprod') -> Result[CoefficientParams]
    get_method(name) -> Method
    available_methods(step=None) -> tuple[Method, ...]

Example:
    >>> from olsbench.methods import coefficients, available_methods
    >>> for m in available_methods():
    ...     print(m.name, coefficients(X, y, method=m).params.coefficients)
"""

from olsbench.methods.registry import (
    Method,
    STEP_TITLES,
    available_methods,
    get_method,
    register,
)
from olsbench.methods.solution import CoefficientParams
from olsbench.methods.solvers import coefficients

__all__ = [
    "Method",
    "STEP_TITLES",
    "available_methods",
    "get_method",
    "register",
    "CoefficientParams",
    "coefficients",
]

"""
Dense numpy coefficient methods.

Each function maps (X, y) to the coefficient vector and differs only in
how the normal equations are grouped and solved:

    lm                 full QR fit, keep the coefficients
    normal_inverse     inv(X'X) @ X' @ y       evaluated left to right
    normal_regrouped   inv(X'X) @ (X'y)        X'y collapses to a vector first
    normal_solve       solve(X'X, X'y)         LU, no explicit inverse
    crossprod          solve(crossprod(X), crossprod(X, y))
    cholesky           cho_solve(cho_factor(crossprod(X)), crossprod(X, y))

normal_inverse is deliberately written the way it reads on paper: the
(p x p) inverse times the (p x n) transpose materializes a p x n
intermediate before y ever enters, which is what makes it slow.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from olsbench.core.compute.linalg import (
    cholesky_solve,
    crossprod,
    invert_normal,
    solve_normal,
)
from olsbench.regression.solvers import fit


def lm_coefficients(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return fit(X, y).coefficients


def normal_inverse(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return invert_normal(X.T @ X) @ X.T @ y


def normal_regrouped(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return invert_normal(X.T @ X) @ (X.T @ y)


def normal_solve(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return solve_normal(X.T @ X, X.T @ y)


def crossprod_solve(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return solve_normal(crossprod(X), crossprod(X, y))


def cholesky_coefficients(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return cholesky_solve(crossprod(X), crossprod(X, y))

"""
Just-in-time compiled coefficient closure.

make_normal_equations(p) returns a numba-compiled function closed over
the number of columns p. It walks the rows of X once, accumulating the
upper triangle of X'X and all of X'y, then solves the p x p system.
Compared to the BLAS paths it trades vectorized kernels for a single
pass over memory with no temporaries.

Compilation is lazy: the first call with a given argument type compiles,
later calls reuse the machine code. Method.prepare() makes that first
call before timing starts.
"""

from functools import lru_cache
from typing import Any, Callable
import numpy as np
from numpy.typing import NDArray
from numba import njit

from olsbench.core.exceptions import SingularMatrixError


@lru_cache(maxsize=None)
def make_normal_equations(p: int) -> Callable[[NDArray, NDArray], NDArray]:
    """Compile the single-pass normal-equations solver for p columns."""

    @njit(cache=False)
    def normal_equations(X, y):
        n = X.shape[0]
        XtX = np.zeros((p, p))
        Xty = np.zeros(p)
        for i in range(n):
            yi = y[i]
            for j in range(p):
                xij = X[i, j]
                Xty[j] += xij * yi
                for k in range(j, p):
                    XtX[j, k] += xij * X[i, k]
        for j in range(p):
            for k in range(j):
                XtX[j, k] = XtX[k, j]
        return np.linalg.solve(XtX, Xty)

    return normal_equations


def jit_coefficients(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    solver = make_normal_equations(X.shape[1])
    try:
        return solver(X, y)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"X'X is singular: {e}",
            matrix_name="X'X",
            expected_rank=X.shape[1],
        ) from e


def compile_for(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> tuple[NDArray, NDArray]:
    """
    Compile for C-contiguous (X, y) of this dtype and return them in that layout.

    Compiles against an identity system of the same types so the first
    timed call runs machine code.
    """
    X = np.ascontiguousarray(X)
    y = np.ascontiguousarray(y)
    p = X.shape[1]
    make_normal_equations(p)(np.eye(p, dtype=X.dtype), np.ones(p, dtype=y.dtype))
    return X, y

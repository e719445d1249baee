"""
Coefficient methods on alternate matrix classes.

The same normal equations, but with X held in a different storage
class than numpy's default C-ordered ndarray:

    matrix_dense    column-major (Fortran) ndarray, BLAS cross-products
                    and a symmetric (Bunch-Kaufman) solve via SciPy
    matrix_sparse   scipy.sparse CSC matrix, sparse products and spsolve

Conversion to the alternate class happens once, outside the timed
expression. The design matrix here is dense (a column of ones and a
column of normal draws), so the sparse class pays its indexing overhead
without any zeros to skip.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import sparse
from scipy.sparse.linalg import spsolve

from olsbench.core.compute.linalg import crossprod, solve_symmetric
from olsbench.core.exceptions import SingularMatrixError


def to_column_major(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> tuple[NDArray, NDArray]:
    return np.asfortranarray(X), np.ascontiguousarray(y)


def to_sparse(X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> tuple[sparse.csc_matrix, NDArray]:
    return sparse.csc_matrix(X), np.ascontiguousarray(y)


def dense_coefficients(Xf: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    return solve_symmetric(crossprod(Xf), crossprod(Xf, y))


def sparse_coefficients(Xs: sparse.csc_matrix, y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    XtX = (Xs.T @ Xs).tocsc()
    Xty = Xs.T @ y
    # spsolve warns and returns NaN on a singular system
    beta = spsolve(XtX, Xty)
    if not np.all(np.isfinite(beta)):
        raise SingularMatrixError(
            "X'X is singular: sparse solve produced non-finite coefficients",
            matrix_name="X'X",
            expected_rank=XtX.shape[0],
        )
    return np.asarray(beta, dtype=np.float64)

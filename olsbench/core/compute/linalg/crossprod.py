"""
Cross-products via BLAS.

crossprod(X) computes X'X with a single symmetric rank-k update (syrk)
instead of materializing X.T and running a general matrix multiply.
crossprod(X, y) computes X'y with gemv (or gemm for a matrix y).

Memory layout matters: BLAS wants column-major storage. A C-contiguous
n x p array is the column-major storage of its p x n transpose, so for
C-ordered X we hand BLAS X.T with the opposite `trans` flag. No copy is
made in either layout.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg.blas import get_blas_funcs


def _blas_operand(X: NDArray[np.floating[Any]]) -> tuple[NDArray[np.floating[Any]], bool]:
    """
    Return (A, transposed) such that A is Fortran-contiguous and
    A == X.T when transposed is True, A == X otherwise.
    """
    if X.flags.f_contiguous:
        return X, False
    if X.flags.c_contiguous:
        return X.T, True
    return np.asfortranarray(X), False


def crossprod(
    X: NDArray[np.floating[Any]],
    Y: NDArray[np.floating[Any]] | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Cross-product X'Y, or X'X when Y is None.

    Args:
        X: Matrix (n x p)
        Y: Vector (n,) or matrix (n x k), or None

    Returns:
        X'X as a full symmetric (p x p) matrix, X'y as a (p,) vector,
        or X'Y as a (p x k) matrix
    """
    A, transposed = _blas_operand(X)

    if Y is None:
        syrk, = get_blas_funcs(('syrk',), (A,))
        # transposed: A = X.T, so A @ A.T = X'X (trans=0)
        C = syrk(1.0, A, trans=0 if transposed else 1, lower=0)
        # syrk fills the upper triangle only
        return np.triu(C) + np.triu(C, 1).T

    if Y.ndim == 1:
        gemv, = get_blas_funcs(('gemv',), (A, Y))
        return gemv(1.0, A, Y, trans=0 if transposed else 1)

    B = np.asfortranarray(Y)
    gemm, = get_blas_funcs(('gemm',), (A, B))
    return gemm(1.0, A, B, trans_a=0 if transposed else 1)

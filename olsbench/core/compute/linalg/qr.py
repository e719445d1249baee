"""
Least squares through a pivoted QR factorization of X.

This is the path the full model fit takes: factor X itself rather than
forming X'X, so the condition number is not squared. Column pivoting
lets rank-deficient designs through; aliased coefficients come back
as NaN.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr as scipy_qr, solve_triangular


@dataclass(frozen=True)
class QRResult:
    """
    X[:, pivot] = Q @ R, economy sized.

    Attributes:
        Q: n x k with orthonormal columns, k = min(n, p)
        R: k x p upper triangular, |diag(R)| non-increasing
        pivot: Column order chosen by the factorization
        rank: Leading diagonal entries of R above the rank tolerance
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int

    @property
    def active(self) -> NDArray[np.intp]:
        """Original indices of the estimable columns."""
        return self.pivot[:self.rank]


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Pivoted economy QR (LAPACK geqp3 through SciPy).

    A column counts towards the rank when |R[j, j]| exceeds
    max(n, p) * eps * |R[0, 0]|.
    """
    Q, R, pivot = scipy_qr(X, mode='economic', pivoting=True)

    leading = np.abs(np.diag(R))
    if leading.size == 0 or leading[0] == 0:
        return QRResult(Q=Q, R=R, pivot=pivot, rank=0)
    cutoff = max(X.shape) * np.finfo(X.dtype).eps * leading[0]
    return QRResult(Q=Q, R=R, pivot=pivot, rank=int(np.count_nonzero(leading > cutoff)))


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    qr_result: QRResult | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Least-squares coefficients from the QR factors.

    Back-substitutes R[:r, :r] β = (Q'y)[:r] over the first r = rank
    pivoted columns; the other coefficients are NaN.

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        qr_result: Factorization of X, if already computed

    Returns:
        Coefficients (p,) in the original column order
    """
    qr = qr_cpu(X) if qr_result is None else qr_result
    r = qr.rank

    beta = np.full(X.shape[1], np.nan)
    if r:
        beta[qr.active] = solve_triangular(qr.R[:r, :r], qr.Q[:, :r].T @ y)
    return beta


def qr_unscaled_covariance(qr_result: QRResult, p: int) -> NDArray[np.floating[Any]]:
    """
    (X'X)⁻¹ restricted to the estimable columns, from R alone.

    With X_active = Q R_r, (X'X)⁻¹ = R_r⁻¹ R_r⁻ᵀ. Rows and columns of
    aliased coefficients are NaN.
    """
    r = qr_result.rank
    cov = np.full((p, p), np.nan)
    if r:
        R_inv = solve_triangular(qr_result.R[:r, :r], np.eye(r))
        idx = qr_result.active
        cov[np.ix_(idx, idx)] = R_inv @ R_inv.T
    return cov

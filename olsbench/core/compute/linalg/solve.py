"""
Solvers for the normal equations (X'X) β = X'y.

These wrap the library solves so that a singular or non-positive-definite
cross-product surfaces as an olsbench exception with diagnostics instead
of a bare LinAlgError. The solve itself is always the library's.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cho_factor, cho_solve, solve as scipy_solve, LinAlgError as ScipyLinAlgError

from olsbench.core.exceptions import SingularMatrixError, NotPositiveDefiniteError


def _singular(matrix_name: str, A: NDArray[np.floating[Any]], err: Exception) -> SingularMatrixError:
    rank = int(np.linalg.matrix_rank(A))
    return SingularMatrixError(
        f"{matrix_name} is singular: rank={rank}, expected={A.shape[0]} ({err})",
        matrix_name=matrix_name,
        rank=rank,
        expected_rank=A.shape[0],
    )


def invert_normal(XtX: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Explicit inverse of X'X (LU via LAPACK gesv against the identity).

    Raises:
        SingularMatrixError: If X'X is exactly singular
    """
    try:
        return np.linalg.inv(XtX)
    except np.linalg.LinAlgError as e:
        raise _singular("X'X", XtX, e) from e


def solve_normal(
    XtX: NDArray[np.floating[Any]],
    Xty: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve (X'X) β = X'y by LU factorization, without forming an inverse.

    Raises:
        SingularMatrixError: If X'X is exactly singular
    """
    try:
        return np.linalg.solve(XtX, Xty)
    except np.linalg.LinAlgError as e:
        raise _singular("X'X", XtX, e) from e


def cholesky_solve(
    XtX: NDArray[np.floating[Any]],
    Xty: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve (X'X) β = X'y via Cholesky: X'X = R'R, then two triangular solves.

    Raises:
        NotPositiveDefiniteError: If the factorization fails
    """
    try:
        factor = cho_factor(XtX, lower=False, check_finite=False)
    except ScipyLinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(XtX)[0])
        raise NotPositiveDefiniteError(
            f"X'X is not positive definite (min eigenvalue {min_eig:.3e}): {e}",
            matrix_name="X'X",
            min_eigenvalue=min_eig,
        ) from e
    return cho_solve(factor, Xty, check_finite=False)


def condition_number(A: NDArray[np.floating[Any]]) -> float:
    """
    Condition number of A from its singular values.

    Returns inf if A is singular.
    """
    s = np.linalg.svd(A, compute_uv=False)
    if s[-1] == 0:
        return np.inf
    return float(s[0] / s[-1])


def solve_symmetric(
    XtX: NDArray[np.floating[Any]],
    Xty: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve (X'X) β = X'y through SciPy's symmetric-indefinite path
    (LAPACK sysv, Bunch-Kaufman), reading only one triangle of X'X.

    Raises:
        SingularMatrixError: If X'X is exactly singular
    """
    try:
        return scipy_solve(XtX, Xty, assume_a='sym', check_finite=False)
    except ScipyLinAlgError as e:
        raise _singular("X'X", XtX, e) from e

"""
Linear algebra kernels for olsbench.

All functions follow these conventions:
    - Computation is delegated to NumPy/SciPy (LAPACK/BLAS under the hood)
    - Library errors are raised as olsbench exceptions with diagnostics

Submodules:
    qr: Pivoted QR decomposition and QR least squares
    crossprod: BLAS cross-products X'X and X'y
    solve: LU, inverse and Cholesky solves of the normal equations
"""

from olsbench.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
)
from olsbench.core.compute.linalg.crossprod import crossprod
from olsbench.core.compute.linalg.solve import (
    cholesky_solve,
    condition_number,
    invert_normal,
    solve_normal,
    solve_symmetric,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
    "qr_unscaled_covariance",
    "crossprod",
    "cholesky_solve",
    "condition_number",
    "invert_normal",
    "solve_normal",
    "solve_symmetric",
]

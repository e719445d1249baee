"""
Tolerance tiers for comparing coefficient methods.

Every method estimates the same two coefficients, but they get there by
different floating-point routes: QR on X, LU or Cholesky on X'X, an
explicit inverse, a sparse solve, or a compiled loop that sums ten
million products. The tiers below bound how far those routes may drift
from the QR reference.

Used by the test suite, microbenchmark(check='equal') and `olsbench check`.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Absolute and relative tolerance for comparing two coefficient vectors."""
    rtol: float
    atol: float
    name: str
    description: str


# QR reference against itself or another factorization of X
QR_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='qr_fp64',
    description='Factorizations of X in double precision',
)

# Anything that forms X'X squares the condition number of X
NORMAL_EQUATIONS_FP64 = ToleranceTier(
    rtol=1e-8,
    atol=1e-10,
    name='normal_equations_fp64',
    description="Solves against the cross-product X'X in double precision",
)

# Sequential accumulation over n rows loses ~log10(n) digits vs pairwise BLAS
ACCUMULATED_FP64 = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='accumulated_fp64',
    description="Single-pass loop accumulation of X'X and X'y",
)

# Condition number of X above which the normal equations lose too many
# digits to be trusted. At cond(X) = 1e6, cond(X'X) = 1e12.
NORMAL_EQUATIONS_CONDITION_THRESHOLD = 1e6


def select_tolerance(method_name: str) -> ToleranceTier:
    """Select the tolerance tier for comparing a method against the QR fit."""
    if method_name in ('lm', 'cpu_qr'):
        return QR_FP64
    if method_name == 'jit':
        return ACCUMULATED_FP64
    return NORMAL_EQUATIONS_FP64

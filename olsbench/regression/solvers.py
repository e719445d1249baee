"""
fit(): the full model fit.

This is step one of the tutorial and the reference every other method
is checked against.
"""

from typing import Literal
from numpy.typing import ArrayLike

from olsbench.regression.design import Design
from olsbench.regression.solution import LinearSolution
from olsbench.regression.backends.cpu import CPUQRBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']

_BACKENDS = {
    'auto': CPUQRBackend,
    'cpu': CPUQRBackend,
    'cpu_qr': CPUQRBackend,
}


def fit(
    X_or_design: ArrayLike | Design,
    y: ArrayLike | None = None,
    *,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit y = Xβ + e by ordinary least squares.

    Besides β this computes residuals, fitted values, sums of squares and
    what the summary needs for standard errors and p-values.

    Args:
        X_or_design: Design matrix (n x p) or a prebuilt Design
        y: Response vector (n,); required with an array X
        backend: 'auto', 'cpu' or 'cpu_qr', all pivoted QR on the CPU

    Returns:
        LinearSolution

    Raises:
        ValidationError: If X or y fails validation
        DimensionError: If X and y disagree in length
        ValueError: If y is missing or the backend is unknown

    Example:
        >>> from olsbench.data import simulate
        >>> sample = simulate(1_000)
        >>> print(fit(sample.design()).summary())
    """
    if isinstance(X_or_design, Design):
        design = X_or_design
    elif y is None:
        raise ValueError("y required when passing arrays")
    else:
        design = Design.from_arrays(X_or_design, y)

    try:
        backend_cls = _BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {backend!r}. Use one of {', '.join(_BACKENDS)}"
        ) from None

    return LinearSolution(backend_cls().solve(design), design)

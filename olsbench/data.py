"""
Simulated sample shared by every benchmark.

    x ~ N(0, 1)
    y = intercept + slope * x + e,   e ~ N(0, noise_sd²)
    X = [1, x]

The tutorial uses intercept 5, slope 2 and unit noise, with ten million
observations for the main run and one thousand for the small-sample
aside.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
import pandas as pd
from numpy.typing import NDArray

from olsbench.core.exceptions import ValidationError
from olsbench.core.validation import check_positive_int
from olsbench.regression.design import Design

DEFAULT_N = 10_000_000
SMALL_N = 1_000
DEFAULT_SEED = 42


@dataclass(frozen=True)
class SampleData:
    """
    Predictor, response and design matrix of one simulated sample.

    X is C-contiguous float64 with the constant column first, so every
    method returns coefficients ordered (intercept, slope).
    """
    x: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    X: NDArray[np.floating[Any]]
    intercept: float
    slope: float
    noise_sd: float
    seed: int | None

    @property
    def n(self) -> int:
        return self.x.shape[0]

    @property
    def true_coefficients(self) -> NDArray[np.floating[Any]]:
        return np.array([self.intercept, self.slope])

    def design(self) -> Design:
        """Validated regression Design over (X, y)."""
        return Design.from_arrays(self.X, self.y, columns=('(Intercept)', 'x'))

    def to_frame(self) -> pd.DataFrame:
        """The sample as a two-column DataFrame (x, y)."""
        return pd.DataFrame({'x': self.x, 'y': self.y})

    def __repr__(self) -> str:
        return (
            f"SampleData(n={self.n}, intercept={self.intercept}, "
            f"slope={self.slope}, noise_sd={self.noise_sd}, seed={self.seed})"
        )


def simulate(
    n: int = DEFAULT_N,
    *,
    seed: int | None = DEFAULT_SEED,
    intercept: float = 5.0,
    slope: float = 2.0,
    noise_sd: float = 1.0,
) -> SampleData:
    """
    Draw a sample from the linear model y = intercept + slope * x + e.

    Args:
        n: Sample size (at least 2, so the two-column design has full rank)
        seed: Seed for numpy.random.default_rng; None for fresh entropy
        intercept: True intercept
        slope: True slope
        noise_sd: Standard deviation of the normal noise

    Returns:
        SampleData with x, y and the n x 2 design matrix

    Raises:
        ValidationError: If n < 2 or noise_sd <= 0
    """
    n = check_positive_int(n, 'n', minimum=2)
    if not noise_sd > 0:
        raise ValidationError(f"noise_sd: must be > 0, got {noise_sd}")

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    y = intercept + slope * x + rng.normal(0.0, noise_sd, size=n)

    X = np.empty((n, 2), dtype=np.float64)
    X[:, 0] = 1.0
    X[:, 1] = x

    return SampleData(
        x=x,
        y=y,
        X=X,
        intercept=float(intercept),
        slope=float(slope),
        noise_sd=float(noise_sd),
        seed=seed,
    )

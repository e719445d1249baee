"""
Coefficient method results.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class CoefficientParams:
    """
    Parameter payload for a single-shot coefficient computation.

    Attributes:
        coefficients: Estimated coefficients, (intercept, slope) for the
            tutorial's design
        condition_number: cond(X) if it was checked, else None
    """
    coefficients: NDArray[np.floating[Any]]
    condition_number: float | None = None

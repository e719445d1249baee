"""
Core infrastructure for olsbench.

Shared abstractions used by the regression fit, the coefficient methods,
the benchmark harness and the report.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, environment detection, linear algebra kernels
"""

from olsbench.core.result import Result
from olsbench.core.exceptions import (
    OlsBenchError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    BenchmarkCheckError,
)

__all__ = [
    "Result",
    "OlsBenchError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "BenchmarkCheckError",
]

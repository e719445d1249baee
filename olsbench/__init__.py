"""
olsbench: how fast can you compute least-squares coefficients?

Benchmarks successively cheaper ways of getting the intercept and slope
of a simple linear regression, from a full model fit down to a
JIT-compiled loop, and writes the results up as an HTML tutorial.

Submodules:
    data: The simulated sample
    regression: Full linear model fit (pivoted QR)
    methods: Competing coefficient computations
    benchmark: Microbenchmark harness
    report: Plots and the narrative HTML report
"""

__version__ = "0.1.0"

from olsbench import data
from olsbench import regression
from olsbench import methods
from olsbench import benchmark

__all__ = [
    "__version__",
    "data",
    "regression",
    "methods",
    "benchmark",
]

"""
Shared compute infrastructure for olsbench.

Submodules:
    environment: Hardware and library version detection
    timing: Section timer and the benchmark clock
    tolerances: Tolerance tiers for comparing coefficient methods
    linalg: Linear algebra kernels (QR, cross-products, normal-equation solves)
"""

from olsbench.core.compute.environment import (
    EnvironmentInfo,
    get_environment_info,
)
from olsbench.core.compute.timing import Timer, timed, clock_ns, clock_resolution_ns

__all__ = [
    "EnvironmentInfo",
    "get_environment_info",
    "Timer",
    "timed",
    "clock_ns",
    "clock_resolution_ns",
]

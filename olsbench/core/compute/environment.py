"""
Hardware and library detection.

Benchmark timings mean little without knowing what produced them: the
CPU, the BLAS numpy was built against, and the versions of the libraries
under test. The report header and `olsbench methods` print this.
"""

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
import os
import platform


_TRACKED_PACKAGES = ('numpy', 'scipy', 'numba', 'pandas', 'matplotlib', 'seaborn')


@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Information about the machine and numerical stack.

    Attributes:
        python: Python version string
        platform: OS/platform string
        cpu: Human-readable CPU name
        cpu_count: Logical CPU count (None if unknown)
        blas: Name of the BLAS numpy was built against (None if unknown)
        packages: Mapping of package name to installed version
    """
    python: str
    platform: str
    cpu: str
    cpu_count: int | None
    blas: str | None
    packages: dict[str, str]

    def __str__(self) -> str:
        libs = ", ".join(f"{k} {v}" for k, v in self.packages.items())
        blas = f", BLAS {self.blas}" if self.blas else ""
        return f"Python {self.python} on {self.cpu} ({self.cpu_count} cores{blas}); {libs}"

    def as_rows(self) -> list[tuple[str, str]]:
        """Key/value rows for tabular display."""
        rows = [
            ('Python', self.python),
            ('Platform', self.platform),
            ('CPU', f"{self.cpu} ({self.cpu_count} logical cores)"),
            ('BLAS', self.blas or 'unknown'),
        ]
        rows.extend(self.packages.items())
        return rows


def get_cpu_name() -> str:
    """Best-effort CPU name."""
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"
    return processor


def get_blas_name() -> str | None:
    """Name of the BLAS library numpy links against, if numpy reports it."""
    import numpy as np

    config = np.show_config(mode='dicts')
    blas = config.get('Build Dependencies', {}).get('blas', {})
    name = blas.get('name')
    if name and blas.get('version'):
        return f"{name} {blas['version']}"
    return name


def get_package_versions(packages: tuple[str, ...] = _TRACKED_PACKAGES) -> dict[str, str]:
    """Installed versions of the given distributions; missing ones are skipped."""
    versions: dict[str, str] = {}
    for name in packages:
        try:
            versions[name] = version(name)
        except PackageNotFoundError:
            continue
    return versions


def get_environment_info() -> EnvironmentInfo:
    """Collect EnvironmentInfo for the running interpreter."""
    return EnvironmentInfo(
        python=platform.python_version(),
        platform=platform.platform(),
        cpu=get_cpu_name(),
        cpu_count=os.cpu_count(),
        blas=get_blas_name(),
        packages=get_package_versions(),
    )

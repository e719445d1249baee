"""
Tests for hardware and library detection.
"""

from olsbench.core.compute.environment import (
    EnvironmentInfo,
    get_environment_info,
    get_package_versions,
)


class TestEnvironmentInfo:

    def test_collects_numpy_version(self):
        info = get_environment_info()
        assert isinstance(info, EnvironmentInfo)
        assert 'numpy' in info.packages
        assert info.python

    def test_str_mentions_python(self):
        info = get_environment_info()
        assert str(info).startswith(f"Python {info.python}")

    def test_rows_are_pairs(self):
        rows = get_environment_info().as_rows()
        assert rows[0][0] == 'Python'
        assert all(len(row) == 2 for row in rows)

    def test_missing_package_skipped(self):
        versions = get_package_versions(('numpy', 'surely-not-an-installed-dist'))
        assert list(versions) == ['numpy']

"""
Tests for the Result[P] envelope.
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from olsbench.core.result import Result


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResultConstruction:

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=42.0),
            info={"method": "crossprod"},
            timing={"total_seconds": 0.01},
            backend_name="crossprod",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "crossprod"
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "crossprod"

    def test_timing_none(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="lm")
        assert result.timing is None

    def test_warnings_default_empty(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="lm")
        assert result.warnings == ()


class TestResultImmutability:

    def test_cannot_reassign_params(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="lm")
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(2.0)

    def test_cannot_reassign_backend_name(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="lm")
        with pytest.raises(FrozenInstanceError):
            result.backend_name = "jit"


class TestHasWarning:

    def test_substring_match(self):
        result = Result(
            params=FakeParams(1.0),
            info={},
            timing=None,
            backend_name="normal_solve",
            warnings=("Design matrix is ill-conditioned (condition number 1e+08)",),
        )
        assert result.has_warning("ill-conditioned")
        assert not result.has_warning("singular")

    def test_no_warnings(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="lm")
        assert not result.has_warning("anything")

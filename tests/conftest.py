"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from olsbench.data import simulate
from olsbench.methods import registry


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset for basic tests."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def sample():
    """Small simulated sample, same model as the tutorial."""
    return simulate(2_000, seed=42)


@pytest.fixture
def zero_slope_column_data():
    """Two-column design whose second column is all zeros (X'X singular)."""
    n = 50
    X = np.column_stack([np.ones(n), np.zeros(n)])
    y = np.arange(n, dtype=np.float64)
    return X, y


@pytest.fixture
def zeros_method(monkeypatch):
    """A registered method that always returns [0, 0]; removed after the test."""
    method = registry.Method(
        name='zeros',
        step=2,
        label="always zero",
        expression="np.zeros(2)",
        kernel=lambda X, y: np.zeros(X.shape[1]),
    )
    monkeypatch.setitem(registry._METHODS, method.name, method)
    return method

"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from mspc_utils import build_covariance_model


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(20170521)


@pytest.fixture
def noc_data(rng):
    """Correlated normal operating condition data (100 × 3)."""
    mixing = np.array([
        [1.0, 0.8, 0.5],
        [0.0, 0.6, 0.3],
        [0.0, 0.0, 0.4],
    ])
    return rng.standard_normal((100, 3)) @ mixing + np.array([10.0, -5.0, 2.0])


@pytest.fixture
def pca_model(noc_data):
    """PCA covariance model with one latent direction."""
    return build_covariance_model(noc_data, n_components=1)


@pytest.fixture
def pls_data(rng):
    """Calibration data (80 × 4) and a single response."""
    X = rng.standard_normal((80, 4)) @ np.array([
        [1.0, 0.5, 0.2, 0.0],
        [0.0, 1.0, 0.4, 0.1],
        [0.0, 0.0, 1.0, 0.3],
        [0.0, 0.0, 0.0, 1.0],
    ])
    y = X @ np.array([1.0, -0.5, 0.25, 0.0]) + 0.1 * rng.standard_normal(80)
    return X, y


@pytest.fixture
def pls_model(pls_data):
    """PLS covariance model with two latent directions."""
    X, y = pls_data
    return build_covariance_model(X, y, n_components=2)


@pytest.fixture
def diagonal_model():
    """
    Hand-checkable PCA model: directions e1, e2, e3 with variances 8, 2, 1.

    N = 3 so that a 3-row test batch is compared at a rescaling factor of 1.
    """
    return {
        'cross_product': np.diag([8.0, 2.0, 1.0]),
        'n_samples': 3,
        'n_components': 1,
    }

"""Subspace decomposition tests."""

import numpy as np
import pytest

from mspc_utils import (
    CovarianceModel,
    PCADecomposer,
    PLSDecomposer,
    check_covariance_model,
    get_decomposer,
)


class TestPCADecomposer:

    def test_full_rank_basis(self, pca_model):
        basis = PCADecomposer().decompose(pca_model, 3)

        assert basis.rank == 3
        np.testing.assert_allclose(basis.weights.T @ basis.weights, np.eye(3), atol=1e-10)
        np.testing.assert_array_equal(basis.weights, basis.loadings)

    def test_variances_are_ordered_eigenvalues(self, pca_model):
        basis = PCADecomposer().decompose(pca_model, 3)
        XX = pca_model.cross_product

        assert np.all(np.diff(basis.variances) <= 0)
        assert np.sum(basis.variances) == pytest.approx(np.trace(XX))
        np.testing.assert_allclose(XX @ basis.loadings, basis.loadings * basis.variances, atol=1e-8)

    def test_truncated_rank(self, pca_model):
        basis = PCADecomposer().decompose(pca_model, 2)

        assert basis.weights.shape == (3, 2)
        assert basis.variances.shape == (2,)

    def test_deterministic_signs(self, pca_model):
        P = PCADecomposer().decompose(pca_model, 3).loadings

        largest = P[np.argmax(np.abs(P), axis=0), np.arange(3)]
        assert np.all(largest > 0)

    def test_zero_rank(self, pca_model):
        basis = PCADecomposer().decompose(pca_model, 0)

        assert basis.rank == 0
        assert basis.weights.shape == (3, 0)


class TestPLSDecomposer:

    def test_weights_and_loadings_are_biorthogonal(self, pls_model):
        basis = PLSDecomposer().decompose(pls_model, 4)

        assert basis.rank == 4
        np.testing.assert_allclose(basis.loadings.T @ basis.weights, np.eye(4), atol=1e-8)

    def test_scores_are_uncorrelated(self, pls_model):
        basis = PLSDecomposer().decompose(pls_model, 4)
        R = basis.weights

        np.testing.assert_allclose(
            R.T @ pls_model.cross_product @ R, np.diag(basis.variances), atol=1e-6
        )

    def test_full_rank_regression_is_least_squares(self, pls_model):
        basis = PLSDecomposer().decompose(pls_model, 4)
        ols = np.linalg.solve(pls_model.cross_product, pls_model.cross_product_xy)

        np.testing.assert_allclose(basis.extras['beta'], ols, rtol=1e-6, atol=1e-8)

    def test_stops_when_response_is_explained(self):
        model = check_covariance_model({
            'cross_product': np.eye(3),
            'cross_product_xy': np.array([[1.0], [0.0], [0.0]]),
            'n_samples': 10,
            'model_type': 'pls',
        })

        basis = PLSDecomposer().decompose(model, 3)

        assert basis.rank == 1
        np.testing.assert_allclose(basis.weights[:, 0], [1.0, 0.0, 0.0])

    def test_multiple_responses(self, pls_data, rng):
        X, y = pls_data
        XY = X.T @ np.column_stack([y, rng.standard_normal(80)])
        model = check_covariance_model({
            'cross_product': X.T @ X,
            'cross_product_xy': XY,
            'n_samples': 80,
            'model_type': 'pls',
        })

        basis = PLSDecomposer().decompose(model, 2)

        assert basis.weights.shape == (4, 2)
        assert basis.extras['beta'].shape == (4, 2)


def test_get_decomposer(pca_model, pls_model):
    assert isinstance(get_decomposer(pca_model), PCADecomposer)
    assert isinstance(get_decomposer(pls_model), PLSDecomposer)


def test_get_decomposer_unknown_type():
    model = CovarianceModel(cross_product=np.eye(2), n_samples=5, model_type='ica')

    with pytest.raises(ValueError, match='Value Error'):
        get_decomposer(model)

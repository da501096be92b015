"""MSPC index tests."""

import numpy as np
import pytest

from mspc_utils import (
    IndexKind,
    adicov_index,
    adicov_index_modified,
    resolve_index_kind,
    score_index,
)


X = np.array([
    [1.0, 2.0],
    [3.0, 0.0],
])
XS = np.array([
    [1.0, 1.0],
    [1.0, 0.0],
])


class TestResolveIndexKind:

    @pytest.mark.parametrize('value, expected', [
        (IndexKind.STANDARD, IndexKind.STANDARD),
        ('standard', IndexKind.STANDARD),
        ('Modified', IndexKind.MODIFIED),
        (0, IndexKind.STANDARD),
        (1, IndexKind.MODIFIED),
        (np.int64(1), IndexKind.MODIFIED),
    ])
    def test_valid_selectors(self, value, expected):
        assert resolve_index_kind(value) is expected

    @pytest.mark.parametrize('value', [2, 'both', False, 1.0, None])
    def test_invalid_selectors(self, value):
        with pytest.raises(ValueError, match='Value Error'):
            resolve_index_kind(value)

    def test_string_value(self):
        assert str(IndexKind.MODIFIED) == 'modified'


def test_standard_index():
    # Differences [0, 1] and [2, 0]: squared distance 5, energy 14
    assert adicov_index(X, XS, np.eye(2)) == pytest.approx(5.0 / 14.0)


def test_modified_index():
    assert adicov_index_modified(X, XS, np.eye(2)) == pytest.approx(2.5)


def test_indices_use_the_projection():
    basis = np.array([[1.0], [0.0]])

    assert adicov_index(X, XS, basis) == pytest.approx(4.0 / 10.0)
    assert adicov_index_modified(X, XS, basis) == pytest.approx(2.0)


def test_identical_matrices_give_zero():
    for kind in IndexKind:
        assert score_index(kind, X, X, np.eye(2)) == 0.0


def test_standard_index_without_energy():
    basis = np.array([[0.0], [1.0]])
    zero = np.zeros((2, 2))

    assert adicov_index(zero, zero, basis) == 0.0
    assert adicov_index(zero, XS, basis) == np.inf


def test_empty_batch():
    empty = np.zeros((0, 2))

    assert adicov_index_modified(empty, empty, np.eye(2)) == 0.0
    assert adicov_index(empty, empty, np.eye(2)) == 0.0


def test_empty_basis_scores_zero():
    assert score_index('standard', X, XS, np.zeros((2, 0))) == 0.0
    assert score_index(1, X, XS, np.zeros((2, 0))) == 0.0


def test_shape_mismatch():
    with pytest.raises(ValueError, match='Dimension Error'):
        adicov_index(X, XS[:1], np.eye(2))

"""
ADICOV-based MSPC Indices

Scalar indices comparing a batch of observations with its ADICOV
approximation inside a subspace spanned by the columns of ``basis``:

- Standard index : squared distance relative to the energy of the batch
                   in the subspace.
- Modified index : squared distance averaged over observations.

Both indices are 0 when the approximation reproduces the batch exactly.
"""

from enum import Enum
from typing import Union

import numpy as np


class IndexKind(str, Enum):
    """MSPC index definition. The integer aliases are 0 (standard) and 1 (modified)."""

    STANDARD = 'standard'
    MODIFIED = 'modified'

    def __str__(self) -> str:
        return self.value


_INDEX_ALIASES = {0: IndexKind.STANDARD, 1: IndexKind.MODIFIED}


def resolve_index_kind(index: Union[IndexKind, str, int]) -> IndexKind:
    """
    Convert an index selector into an ``IndexKind``.

    Accepts an ``IndexKind``, its string value ('standard' / 'modified')
    or the integer aliases 0 and 1.

    Raises
    ------
    ValueError
        If ``index`` is none of the above.
    """
    if isinstance(index, IndexKind):
        return index
    if isinstance(index, str):
        try:
            return IndexKind(index.lower())
        except ValueError:
            pass
    elif isinstance(index, (int, np.integer)) and not isinstance(index, bool):
        if int(index) in _INDEX_ALIASES:
            return _INDEX_ALIASES[int(index)]

    raise ValueError(
        f"Value Error: index must be 'standard' (0) or 'modified' (1), got {index!r}"
    )


def _projected_distance(X: np.ndarray, Xs: np.ndarray, basis: np.ndarray) -> float:
    X = np.asarray(X, dtype=float)
    Xs = np.asarray(Xs, dtype=float)
    if X.shape != Xs.shape:
        raise ValueError(f"Dimension Error: X and Xs shapes differ: {X.shape} vs {Xs.shape}")
    return float(np.sum(((X - Xs) @ basis) ** 2))


def adicov_index(X: np.ndarray, Xs: np.ndarray, basis: np.ndarray) -> float:
    """
    Standard ADICOV similarity index.

    .. math::
        ind = \\frac{||(X - X_s) B||_F^2}{||X B||_F^2}

    Parameters
    ----------
    X : np.ndarray
        Preprocessed observations (L × M).
    Xs : np.ndarray
        ADICOV approximation of ``X`` (L × M).
    basis : np.ndarray
        Subspace basis B (M × A), possibly variance-scaled.

    Returns
    -------
    float
        Non-negative index. When ``X`` has no energy in the subspace the
        index is 0 if ``Xs`` has none either, and ``inf`` otherwise.
    """
    basis = np.asarray(basis, dtype=float)
    distance = _projected_distance(X, Xs, basis)
    energy = float(np.sum((np.asarray(X, dtype=float) @ basis) ** 2))

    if energy == 0:
        return 0.0 if distance == 0 else np.inf
    return distance / energy


def adicov_index_modified(X: np.ndarray, Xs: np.ndarray, basis: np.ndarray) -> float:
    """
    Modified ADICOV index: mean squared distance per observation.

    .. math::
        ind = \\frac{1}{L} ||(X - X_s) B||_F^2

    With a variance-scaled basis this is the average Hotelling-like
    distance between observations and their approximation; with an
    orthonormal residual basis it is the average SPE-like distance.
    Returns 0 for an empty batch.
    """
    basis = np.asarray(basis, dtype=float)
    n_obs = np.asarray(X).shape[0]
    if n_obs == 0:
        return 0.0
    return _projected_distance(X, Xs, basis) / n_obs


INDEX_FUNCTIONS = {
    IndexKind.STANDARD: adicov_index,
    IndexKind.MODIFIED: adicov_index_modified,
}


def score_index(
    index: Union[IndexKind, str, int],
    X: np.ndarray,
    Xs: np.ndarray,
    basis: np.ndarray
) -> float:
    """Compute the index selected by ``index`` (0 for an empty basis)."""
    basis = np.asarray(basis, dtype=float)
    if basis.size == 0:
        return 0.0
    return INDEX_FUNCTIONS[resolve_index_kind(index)](X, Xs, basis)

"""
ADICOV: Approximation of a Data matrix wIth a COVariance matrix

Given a target cross-product matrix XX and a data matrix X, ADICOV returns
the matrix Xs closest to X (in Frobenius norm) whose scores in a given
subspace reproduce the target covariance:

    T  = X @ R                      scores of the data
    C  = R' @ XX @ R                target score cross-product
    Ts = argmin ||T - Ts||  s.t.  Ts' Ts = C
    Xs = Ts @ P'

The constrained problem is an orthogonal Procrustes problem: with
``T @ C^(1/2) = U S V'`` (thin SVD), ``Ts = U V' C^(1/2)``.

References
----------
.. [1] Camacho, J. (2017). On the generation of random multivariate data.
       Chemometrics and Intelligent Laboratory Systems, 160, 40-51.
"""

import logging

import numpy as np
from scipy import linalg
from typing import Optional

from .config import RANK_TOLERANCE_FACTOR

logger = logging.getLogger(__name__)


def _sqrtm_psd(C: np.ndarray) -> np.ndarray:
    """Symmetric square root of a positive semi-definite matrix."""
    eigenvalues, eigenvectors = linalg.eigh((C + C.T) / 2)
    eigenvalues = np.clip(eigenvalues, 0.0, None)
    return (eigenvectors * np.sqrt(eigenvalues)) @ eigenvectors.T


def adicov(
    XX: np.ndarray,
    X: np.ndarray,
    n_components: int,
    R: np.ndarray,
    P: np.ndarray,
    multiplicity: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Approximate a data matrix so that it matches a target covariance.

    Parameters
    ----------
    XX : np.ndarray
        Target cross-product matrix (M × M).
    X : np.ndarray
        Data to approximate (L × M), already preprocessed.
    n_components : int
        Rank of the approximation. Must not exceed the columns of ``R``.
    R : np.ndarray
        Score weights of the subspace (M × A).
    P : np.ndarray
        Loadings of the subspace (M × A).
    multiplicity : np.ndarray, optional
        Positive multiplicity (weight) of each row of ``X`` (L,). Default ones.

    Returns
    -------
    Xs : np.ndarray
        Approximation of ``X`` (L × M). A zero matrix when the rank is 0,
        the subspace is empty or ``X`` has no rows.

    Raises
    ------
    ValueError
        If the rank exceeds the subspace width or the multiplicity vector
        is not positive with one entry per row.

    Notes
    -----
    Singular values of ``T @ C^(1/2)`` below a relative rank tolerance are
    discarded, so directions where X carries no information are rebuilt as
    zero. In particular a zero matrix is approximated by a zero matrix.
    When L < A the covariance can only be matched on L directions.
    """
    X = np.asarray(X, dtype=float)
    XX = np.asarray(XX, dtype=float)
    R = np.asarray(R, dtype=float)
    P = np.asarray(P, dtype=float)
    n_obs, n_features = X.shape

    if R.ndim != 2 or R.shape != P.shape or R.shape[0] != n_features:
        raise ValueError(
            f"Dimension Error: R and P must be {n_features}-by-A, got {R.shape} and {P.shape}"
        )
    if XX.shape != (n_features, n_features):
        raise ValueError(f"Dimension Error: XX must be {n_features}-by-{n_features}, got {XX.shape}")
    if n_components < 0 or n_components > R.shape[1]:
        raise ValueError(
            f"Value Error: n_components must be between 0 and {R.shape[1]}, got {n_components}"
        )

    if multiplicity is None:
        multiplicity = np.ones(n_obs)
    multiplicity = np.asarray(multiplicity, dtype=float).ravel()
    if multiplicity.shape[0] != n_obs:
        raise ValueError(
            f"Dimension Error: multiplicity must have {n_obs} entries, got {multiplicity.shape[0]}"
        )
    if np.any(multiplicity <= 0):
        raise ValueError("Value Error: multiplicity must be strictly positive")

    Xs = np.zeros((n_obs, n_features))
    if n_components == 0 or n_obs == 0:
        return Xs

    R = R[:, :n_components]
    P = P[:, :n_components]
    sqrt_mult = np.sqrt(multiplicity)[:, np.newaxis]

    T = sqrt_mult * (X @ R)
    C_half = _sqrtm_psd(R.T @ XX @ R)

    U, s, Vt = linalg.svd(T @ C_half, full_matrices=False)
    if s.size == 0 or s[0] == 0:
        return Xs

    tol = RANK_TOLERANCE_FACTOR * np.finfo(float).eps * max(T.shape) * s[0]
    keep = s > tol
    Ts = (U[:, keep] @ Vt[keep, :]) @ C_half

    logger.debug("ADICOV: %d observations, rank %d, %d effective directions",
                 n_obs, n_components, int(keep.sum()))

    return (Ts / sqrt_mult) @ P.T

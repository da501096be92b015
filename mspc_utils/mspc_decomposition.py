"""
Subspace Decomposition of Covariance Models

Decomposes the cross-product matrix of a covariance model into an ordered
basis of directions and their variances. The orchestration in
``mspc_adicov`` is written once against ``DirectionBasis``; the model type
only selects the decomposer:

- PCADecomposer : eigendecomposition of XX (weights = loadings)
- PLSDecomposer : kernel PLS on XX and XY (weights R != loadings P)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np
from scipy import linalg

from .config import PLS_TOLERANCE
from .mspc_model import CovarianceModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectionBasis:
    """
    Ordered direction basis of a covariance model.

    Attributes
    ----------
    weights : np.ndarray
        Score weights R (M × rank). Scores are computed as ``T = X @ R``.
    loadings : np.ndarray
        Loadings P (M × rank). Data are rebuilt as ``X_hat = T @ P.T``.
    variances : np.ndarray
        Variance (sum of squares) of the scores of each direction (rank,),
        non-increasing for PCA.
    extras : dict
        Additional model-specific outputs (e.g. PLS regression coefficients).
    """
    weights: np.ndarray
    loadings: np.ndarray
    variances: np.ndarray
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def rank(self) -> int:
        """Number of directions in the basis."""
        return int(self.weights.shape[1])


def _empty_basis(n_features: int) -> DirectionBasis:
    empty = np.zeros((n_features, 0))
    return DirectionBasis(weights=empty, loadings=empty, variances=np.zeros(0))


def _fix_signs(vectors: np.ndarray) -> np.ndarray:
    """Flip each column so that its largest-magnitude entry is positive."""
    if vectors.size == 0:
        return vectors
    idx = np.argmax(np.abs(vectors), axis=0)
    signs = np.sign(vectors[idx, np.arange(vectors.shape[1])])
    signs[signs == 0] = 1.0
    return vectors * signs


class SubspaceDecomposer(ABC):
    """Common interface of the covariance decompositions."""

    @abstractmethod
    def decompose(self, model: CovarianceModel, rank: int) -> DirectionBasis:
        """
        Decompose ``model`` into at most ``rank`` ordered directions.

        Parameters
        ----------
        model : CovarianceModel
            Validated covariance model.
        rank : int
            Number of directions requested.

        Returns
        -------
        DirectionBasis
        """


class PCADecomposer(SubspaceDecomposer):
    """
    PCA of a cross-product matrix.

    The loadings are the eigenvectors of XX ordered by descending
    eigenvalue; the variances are the eigenvalues (score sums of squares,
    t't, NOT divided by N-1).
    """

    def decompose(self, model: CovarianceModel, rank: int) -> DirectionBasis:
        XX = np.asarray(model.cross_product)
        n_features = XX.shape[0]
        rank = min(int(rank), n_features)
        if rank <= 0:
            return _empty_basis(n_features)

        eigenvalues, eigenvectors = linalg.eigh(XX)
        order = np.argsort(eigenvalues)[::-1][:rank]

        # Negative eigenvalues are round-off of a PSD matrix
        variances = np.clip(eigenvalues[order], 0.0, None)
        P = _fix_signs(eigenvectors[:, order])

        logger.debug("PCA decomposition: %d directions out of %d variables", rank, n_features)

        return DirectionBasis(weights=P, loadings=P, variances=variances)


class PLSDecomposer(SubspaceDecomposer):
    """
    Kernel PLS from cross-product matrices (Dayal & MacGregor, 1997).

    Only XY is deflated. Extraction stops early when the deflated XY or the
    variance of the next score vanishes, so the basis may hold fewer
    directions than requested.

    References
    ----------
    .. [1] Dayal, B.S. & MacGregor, J.F. (1997). Improved PLS algorithms.
           Journal of Chemometrics, 11, 73-85.
    """

    def decompose(self, model: CovarianceModel, rank: int) -> DirectionBasis:
        XX = np.asarray(model.cross_product)
        XY = np.array(model.cross_product_xy, dtype=float, copy=True)
        n_features = XX.shape[0]
        rank = min(int(rank), n_features)
        if rank <= 0:
            return _empty_basis(n_features)

        n_responses = XY.shape[1]
        xy_norm = max(linalg.norm(XY), np.finfo(float).tiny)
        xx_norm = max(linalg.norm(XX), np.finfo(float).tiny)

        W, P, Q, R, variances = [], [], [], [], []
        for _ in range(rank):
            if n_responses == 1:
                w = XY[:, 0].copy()
            else:
                eigenvalues, eigenvectors = linalg.eigh(XY.T @ XY)
                w = XY @ eigenvectors[:, np.argmax(eigenvalues)]

            w_norm = linalg.norm(w)
            if w_norm <= PLS_TOLERANCE * xy_norm:
                break
            w = w / w_norm

            r = w.copy()
            for p_i, r_i in zip(P, R):
                r = r - (p_i @ w) * r_i

            tt = float(r @ XX @ r)
            if tt <= PLS_TOLERANCE * xx_norm:
                break

            p = (XX @ r) / tt
            q = (XY.T @ r) / tt
            XY = XY - tt * np.outer(p, q)

            W.append(w)
            P.append(p)
            Q.append(q)
            R.append(r)
            variances.append(tt)

        if not R:
            logger.debug("PLS decomposition: no directions with non-null covariance")
            return _empty_basis(n_features)

        W = np.column_stack(W)
        P = np.column_stack(P)
        Q = np.column_stack(Q)
        R = np.column_stack(R)

        logger.debug("PLS decomposition: %d directions (%d requested)", R.shape[1], rank)

        return DirectionBasis(
            weights=R,
            loadings=P,
            variances=np.asarray(variances),
            extras={'beta': R @ Q.T, 'W': W, 'Q': Q},
        )


_DECOMPOSERS = {
    'pca': PCADecomposer,
    'pls': PLSDecomposer,
}


def get_decomposer(model: CovarianceModel) -> SubspaceDecomposer:
    """Return the decomposer matching ``model.model_type``."""
    try:
        return _DECOMPOSERS[model.model_type]()
    except KeyError:
        raise ValueError(
            f"Value Error: no decomposition available for model_type {model.model_type!r}"
        ) from None

"""
ADICOV-based MSPC Statistics

Computes the D-statistic (latent subspace) and Q-statistic (residual
subspace) of a batch of new observations against a covariance model,
using ADICOV approximations instead of the classical T² / SPE formulas.

Unlike classical MSPC, calibration statistics and control limits are not
computed here: that would require a set of covariance models.

References
----------
.. [1] Camacho, J. et al. (2011). Chemometrics and Intelligent Laboratory
       Systems, 105, 171-180.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional, Union

import numpy as np
import pandas as pd

from .adicov import adicov
from .config import DEFAULT_INDEX, VARIANCE_TOLERANCE
from .mspc_decomposition import get_decomposer
from .mspc_indices import IndexKind, resolve_index_kind, score_index
from .mspc_model import CovarianceModel, check_covariance_model, with_components
from .mspc_pretreatments import preprocess_apply

logger = logging.getLogger(__name__)

MatrixLike = Union[np.ndarray, pd.DataFrame]


class MSPCResult(NamedTuple):
    """
    D and Q statistics of a test batch.

    ``rt`` and ``rq`` are None when the model carries no calibration
    information (N = 0 or no directions); check for None before use.
    """
    d_stat: float
    q_stat: float
    rt: Optional[MatrixLike]
    rq: Optional[MatrixLike]


def _as_test_array(test: Optional[MatrixLike], n_features: int) -> np.ndarray:
    """Return the test batch as an L × M float array (L may be 0)."""
    if test is None:
        return np.zeros((0, n_features))

    test_array = test.values if isinstance(test, pd.DataFrame) else np.asarray(test)
    # Only a batch without rows is empty; an L-by-0 batch is a width mismatch
    if test_array.ndim >= 1 and test_array.shape[0] == 0:
        return np.zeros((0, n_features))

    test_array = test_array.astype(float)
    if test_array.ndim != 2 or test_array.shape[1] != n_features:
        raise ValueError(
            f"Dimension Error: test must be L-by-{n_features}, got shape {test_array.shape}"
        )
    return test_array


def _check_latent_variances(variances: np.ndarray) -> None:
    """Latent directions are whitened by 1/sqrt(variance): all must be positive."""
    if variances.size == 0:
        return
    threshold = VARIANCE_TOLERANCE * max(float(np.max(variances)), 0.0)
    bad = np.where(variances <= threshold)[0]
    if bad.size > 0:
        raise ValueError(
            f"Value Error: latent direction(s) {list(bad + 1)} have null variance "
            "and cannot be variance-scaled; reduce n_components"
        )


def _wrap(residuals: np.ndarray, test: Optional[MatrixLike]) -> MatrixLike:
    if isinstance(test, pd.DataFrame) and test.shape[1] == residuals.shape[1]:
        return pd.DataFrame(residuals, index=test.index, columns=test.columns)
    return residuals


def mspc_adicov(
    model: Union[CovarianceModel, Dict[str, Any]],
    test: Optional[MatrixLike] = None,
    index: Union[IndexKind, str, int] = DEFAULT_INDEX
) -> MSPCResult:
    """
    Compute D-st and Q-st of a test batch in covariance MSPC using ADICOV.

    Parameters
    ----------
    model : CovarianceModel or dict
        Covariance model of the calibration data (see ``check_covariance_model``).
    test : np.ndarray or pd.DataFrame, optional
        Batch of new observations (L × M), in original units: the model
        preprocessing is applied here. None means an empty batch.
    index : IndexKind, str or int, optional
        MSPC index definition:
        - 'standard' (0): ADICOV similarity index
        - 'modified' (1): modified index
        Default is ``config.DEFAULT_INDEX``.

    Returns
    -------
    MSPCResult
        ``(d_stat, q_stat, rt, rq)``:
        - d_stat : D-statistic of the batch
        - q_stat : Q-statistic of the batch
        - rt : differential matrix for diagnosing D (L × M)
        - rq : differential matrix for diagnosing Q (L × M)
        ``rt``/``rq`` are DataFrames when ``test`` is a DataFrame, and None
        when the model has no calibration samples or no directions.

    Raises
    ------
    ValueError
        If the model is invalid, ``test`` does not have M columns, ``index``
        is unknown, ``n_components`` exceeds the directions available or a
        latent direction has null variance.

    Examples
    --------
    >>> model = build_covariance_model(X_noc, n_components=1)
    >>> D, Q, Rt, Rq = mspc_adicov(model, X_new[:5], index='standard')
    """
    # === INPUT VALIDATION ===
    model = check_covariance_model(model)
    index_kind = resolve_index_kind(index)

    n_features = model.n_features
    n_lvs = model.n_components
    test_array = _as_test_array(test, n_features)
    n_obs = test_array.shape[0]

    if model.n_samples == 0:
        logger.info("Model has no calibration samples: D = Q = 0")
        return MSPCResult(0.0, 0.0, None, None)

    # === FULL-RANK DECOMPOSITION ===
    # All directions are needed: the first n_lvs form the latent block,
    # the rest the residual block.
    full_model = with_components(model, n_features)
    basis = get_decomposer(full_model).decompose(full_model, n_features)

    if basis.rank == 0:
        logger.info("Model cross-product carries no directions: D = Q = 0")
        return MSPCResult(0.0, 0.0, None, None)

    if n_lvs > basis.rank:
        raise ValueError(
            f"Value Error: n_components ({n_lvs}) exceeds the {basis.rank} "
            "directions available in the model"
        )

    R, P, variances = basis.weights, basis.loadings, basis.variances
    _check_latent_variances(variances[:n_lvs])

    # === PREPROCESSING ===
    tests = preprocess_apply(test_array, model.average, model.scale, model.weight)

    # Target covariance at the degrees of freedom of the test batch
    factor = max(n_obs - 1, 0) / max(model.n_samples - 1, 1)
    target = model.cross_product * factor
    ones = np.ones(n_obs)

    logger.debug("ADICOV MSPC: L=%d, M=%d, latent=%d, residual=%d, factor=%.6g",
                 n_obs, n_features, n_lvs, basis.rank - n_lvs, factor)

    # === LATENT BLOCK ===
    if n_lvs > 0:
        ti = adicov(target, tests, n_lvs, R[:, :n_lvs], P[:, :n_lvs], ones)
    else:
        ti = tests

    # === RESIDUAL BLOCK ===
    ri = adicov(target, tests, basis.rank - n_lvs, R[:, n_lvs:], P[:, n_lvs:], ones)

    # === INDICES ===
    latent_basis = R[:, :n_lvs] / np.sqrt(variances[:n_lvs])
    d_stat = score_index(index_kind, tests, ti, latent_basis)
    q_stat = score_index(index_kind, tests, ri, R[:, n_lvs:])

    return MSPCResult(
        d_stat=d_stat,
        q_stat=q_stat,
        rt=_wrap(tests - ti, test),
        rq=_wrap(tests - ri, test),
    )

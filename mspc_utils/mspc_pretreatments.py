"""
MSPC Pretreatment Functions

Centering, scaling and variable weighting for calibration and test data.

Calibration data are preprocessed with ``preprocess_calibration``, which
returns the statistics that must later be re-applied to any new batch with
``preprocess_apply``. Test data are NEVER preprocessed with their own
statistics: the calibration average/scale are always used.
"""

import logging

import numpy as np
import pandas as pd
from typing import Tuple, Optional, Union

from .config import PREPROCESSING_METHODS

logger = logging.getLogger(__name__)


def _as_float_array(X: Union[np.ndarray, pd.DataFrame]) -> np.ndarray:
    """Return ``X`` as a 2-D float array (DataFrames are converted)."""
    if isinstance(X, pd.DataFrame):
        X_array = X.values.astype(float)
    else:
        X_array = np.asarray(X, dtype=float)

    if X_array.ndim == 1:
        X_array = X_array.reshape(1, -1)
    if X_array.ndim != 2:
        raise ValueError(
            f"Dimension Error: data must be a 2-D matrix, got {X_array.ndim} dimensions"
        )
    return X_array


def _check_weight(weight: Optional[np.ndarray], n_features: int) -> np.ndarray:
    """Return a length-M weight vector (ones when ``weight`` is None)."""
    if weight is None:
        return np.ones(n_features)

    weight = np.asarray(weight, dtype=float).ravel()
    if weight.shape[0] != n_features:
        raise ValueError(
            f"Dimension Error: weight must have {n_features} entries, got {weight.shape[0]}"
        )
    return weight


def preprocess_calibration(
    X: Union[np.ndarray, pd.DataFrame],
    method: str = 'auto',
    weight: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Preprocess calibration data and return the statistics used.

    Parameters
    ----------
    X : np.ndarray or pd.DataFrame
        Calibration data (n_samples × n_features).
    method : str, optional
        Preprocessing method:
        - 'none'   : no centering, no scaling
        - 'center' : mean centering
        - 'auto'   : mean centering and unit variance (autoscaling)
        - 'scale'  : unit variance without centering
        - 'pareto' : mean centering and division by sqrt of the std
        Default is 'auto'.
    weight : np.ndarray, optional
        Per-variable weights (n_features,) applied after scaling.

    Returns
    -------
    Xcs : np.ndarray
        Preprocessed data (n_samples × n_features).
    average : np.ndarray
        Centering vector (n_features,). Zeros when not centering.
    scale : np.ndarray
        Scaling vector (n_features,). Ones when not scaling.

    Raises
    ------
    ValueError
        If ``method`` is unknown or ``weight`` has the wrong length.

    Notes
    -----
    Standard deviations use ddof=1. Constant variables (std = 0) are
    given a scale of 1 to avoid division by zero.
    """
    X_array = _as_float_array(X)
    n_samples, n_features = X_array.shape

    if method not in PREPROCESSING_METHODS:
        raise ValueError(
            f"Value Error: unknown preprocessing method '{method}'. "
            f"Options: {', '.join(PREPROCESSING_METHODS)}"
        )

    weight = _check_weight(weight, n_features)

    # === CENTERING ===
    if method in ('center', 'auto', 'pareto') and n_samples > 0:
        average = np.mean(X_array, axis=0)
    else:
        average = np.zeros(n_features)

    # === SCALING ===
    if method in ('auto', 'scale', 'pareto') and n_samples > 1:
        std = np.std(X_array, axis=0, ddof=1)
        if method == 'pareto':
            std = np.sqrt(std)
        std[std == 0] = 1.0  # Avoid division by zero
        scale = std
    else:
        scale = np.ones(n_features)

    Xcs = (X_array - average) / scale * weight

    logger.debug("Calibration preprocessing '%s' applied to %d x %d data",
                 method, n_samples, n_features)

    return Xcs, average, scale


def preprocess_apply(
    X: Union[np.ndarray, pd.DataFrame],
    average: np.ndarray,
    scale: np.ndarray,
    weight: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Apply stored calibration centering, scaling and weighting to new data.

    Parameters
    ----------
    X : np.ndarray or pd.DataFrame
        New observations (n_samples × n_features).
    average : np.ndarray
        Calibration centering vector (n_features,).
    scale : np.ndarray
        Calibration scaling vector (n_features,).
    weight : np.ndarray, optional
        Per-variable weights (n_features,). None means unit weights.

    Returns
    -------
    np.ndarray
        ``(X - average) / scale * weight``, same shape as ``X``.

    Examples
    --------
    >>> Xcs, av, sc = preprocess_calibration(X_train, method='auto')
    >>> X_test_cs = preprocess_apply(X_test, av, sc)
    """
    X_array = _as_float_array(X)
    n_features = X_array.shape[1]

    average = np.asarray(average, dtype=float).ravel()
    scale = np.asarray(scale, dtype=float).ravel()
    if average.shape[0] != n_features or scale.shape[0] != n_features:
        raise ValueError(
            f"Dimension Error: average and scale must have {n_features} entries, "
            f"got {average.shape[0]} and {scale.shape[0]}"
        )

    weight = _check_weight(weight, n_features)

    return (X_array - average) / scale * weight

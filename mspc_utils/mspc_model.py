"""
Covariance Model for MSPC

A covariance (cross-product) model summarises calibration data by its
cross-product matrix ``XX = X'X``, the number of calibration samples and
the preprocessing applied. It is all the ADICOV-based MSPC needs: the raw
calibration observations are not kept.

Two model types are supported:
- 'pca' : single-block model, only ``XX`` is required
- 'pls' : two-block model, ``XY = X'Y`` is also required
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import DEFAULT_PREPROCESSING, MODEL_TYPE_ALIASES, MODEL_TYPES
from .mspc_pretreatments import preprocess_calibration

logger = logging.getLogger(__name__)


def _read_only(array: Optional[np.ndarray]) -> Optional[np.ndarray]:
    """Return a non-writeable float copy of ``array``."""
    if array is None:
        return None
    array = np.array(array, dtype=float, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class CovarianceModel:
    """
    Read-only covariance model of calibration data.

    Attributes
    ----------
    cross_product : np.ndarray
        X-block cross-product matrix (M × M).
    n_samples : int
        Number of calibration observations (N).
    n_components : int or sequence of int
        Number of retained latent directions (A), or the 1-based
        identifiers 1..A of those directions.
    average : np.ndarray, optional
        Centering vector (M,).
    scale : np.ndarray, optional
        Scaling vector (M,).
    weight : np.ndarray, optional
        Variable weights (M,). None means default (unit) weighting.
    model_type : str
        'pca' or 'pls'.
    cross_product_xy : np.ndarray, optional
        X-Y cross-product matrix (M × K), PLS models only.

    Notes
    -----
    Use ``check_covariance_model`` to obtain a normalized instance: only
    validated models have ``n_components`` as an int and their arrays
    flagged read-only.
    """
    cross_product: np.ndarray
    n_samples: int
    n_components: Union[int, Sequence[int]] = 0
    average: Optional[np.ndarray] = None
    scale: Optional[np.ndarray] = None
    weight: Optional[np.ndarray] = None
    model_type: str = 'pca'
    cross_product_xy: Optional[np.ndarray] = None

    @property
    def n_features(self) -> int:
        """Number of variables (M)."""
        return int(np.shape(self.cross_product)[1])


def _count_components(n_components: Union[int, Sequence[int]], n_features: int) -> int:
    """
    Turn a component selector into a count.

    Only contiguous selections 1..A are meaningful: the latent block is
    always the first A directions of the decomposition.
    """
    if np.isscalar(n_components):
        count = int(n_components)
        if count != n_components:
            raise ValueError(f"Value Error: n_components must be an integer, got {n_components}")
    else:
        lvs = [int(lv) for lv in np.asarray(n_components).ravel() if lv != 0]
        count = len(lvs)
        if sorted(lvs) != list(range(1, count + 1)):
            raise ValueError(
                "Value Error: latent directions must be the contiguous set 1..A, "
                f"got {lvs}"
            )

    if count < 0 or count > n_features:
        raise ValueError(
            f"Value Error: n_components must be between 0 and {n_features}, got {count}"
        )
    return count


def check_covariance_model(model: Union[CovarianceModel, Dict[str, Any]]) -> CovarianceModel:
    """
    Validate and normalize a covariance model.

    Parameters
    ----------
    model : CovarianceModel or dict
        Model to validate. A dict must use the ``CovarianceModel`` field
        names as keys.

    Returns
    -------
    CovarianceModel
        A new frozen model with defaults filled in, ``n_components`` as an
        int, a symmetrized cross-product and read-only arrays.

    Raises
    ------
    ValueError
        If any field is missing, of the wrong shape or of an invalid value.
    """
    if isinstance(model, dict):
        known = {f.name for f in fields(CovarianceModel)}
        unknown = set(model) - known
        if unknown:
            raise ValueError(f"Value Error: unknown model fields {sorted(unknown)}")
        if 'cross_product' not in model or 'n_samples' not in model:
            raise ValueError("Value Error: model requires 'cross_product' and 'n_samples'")
        model = CovarianceModel(**model)
    elif not isinstance(model, CovarianceModel):
        raise ValueError(
            f"Value Error: model must be a CovarianceModel or dict, got {type(model).__name__}"
        )

    # === CROSS-PRODUCT ===
    XX = np.asarray(model.cross_product, dtype=float)
    if XX.ndim != 2 or XX.shape[0] != XX.shape[1]:
        raise ValueError(f"Dimension Error: cross_product must be M-by-M, got shape {XX.shape}")
    n_features = XX.shape[1]
    XX = (XX + XX.T) / 2

    # === SAMPLE COUNT ===
    n_samples = model.n_samples
    if int(n_samples) != n_samples or n_samples < 0:
        raise ValueError(f"Value Error: n_samples must be a non-negative integer, got {n_samples}")

    n_components = _count_components(model.n_components, n_features)

    # === PREPROCESSING PARAMETERS ===
    average = np.zeros(n_features) if model.average is None else np.asarray(model.average, dtype=float).ravel()
    scale = np.ones(n_features) if model.scale is None else np.asarray(model.scale, dtype=float).ravel()
    if average.shape[0] != n_features:
        raise ValueError(f"Dimension Error: average must have {n_features} entries, got {average.shape[0]}")
    if scale.shape[0] != n_features:
        raise ValueError(f"Dimension Error: scale must have {n_features} entries, got {scale.shape[0]}")
    if np.any(scale == 0):
        raise ValueError("Value Error: scale must not contain zeros")

    weight = model.weight
    if weight is not None:
        weight = np.asarray(weight, dtype=float).ravel()
        if weight.shape[0] != n_features:
            raise ValueError(f"Dimension Error: weight must have {n_features} entries, got {weight.shape[0]}")

    # === MODEL TYPE ===
    model_type = MODEL_TYPE_ALIASES.get(model.model_type, model.model_type)
    if model_type not in MODEL_TYPES:
        raise ValueError(f"Value Error: model_type must be 'pca' or 'pls', got {model.model_type!r}")

    XY = model.cross_product_xy
    if model_type == 'pls':
        if XY is None:
            raise ValueError("Value Error: a 'pls' model requires cross_product_xy")
        XY = np.asarray(XY, dtype=float)
        if XY.ndim == 1:
            XY = XY.reshape(-1, 1)
        if XY.ndim != 2 or XY.shape[0] != n_features or XY.shape[1] < 1:
            raise ValueError(
                f"Dimension Error: cross_product_xy must be {n_features}-by-K, got shape {XY.shape}"
            )

    return CovarianceModel(
        cross_product=_read_only(XX),
        n_samples=int(n_samples),
        n_components=n_components,
        average=_read_only(average),
        scale=_read_only(scale),
        weight=_read_only(weight),
        model_type=model_type,
        cross_product_xy=_read_only(XY),
    )


def with_components(model: CovarianceModel, n_components: int) -> CovarianceModel:
    """Return a copy of a validated ``model`` retaining ``n_components`` directions."""
    return replace(model, n_components=_count_components(n_components, model.n_features))


def build_covariance_model(
    X: Union[np.ndarray, pd.DataFrame],
    Y: Optional[Union[np.ndarray, pd.DataFrame]] = None,
    n_components: Union[int, Sequence[int]] = 1,
    preprocessing: str = DEFAULT_PREPROCESSING,
    preprocessing_y: str = DEFAULT_PREPROCESSING,
    weight: Optional[np.ndarray] = None
) -> CovarianceModel:
    """
    Build a covariance model from a calibration batch.

    Parameters
    ----------
    X : np.ndarray or pd.DataFrame
        Calibration data (N × M).
    Y : np.ndarray or pd.DataFrame, optional
        Response data (N × K). When given, a 'pls' model is built.
    n_components : int or sequence of int, optional
        Number of latent directions to retain. Default is 1.
    preprocessing : str, optional
        Preprocessing of X (see ``preprocess_calibration``). Default 'auto'.
    preprocessing_y : str, optional
        Preprocessing of Y. Default 'auto'.
    weight : np.ndarray, optional
        Per-variable weights for X.

    Returns
    -------
    CovarianceModel
        Validated model with ``XX = Xcs'Xcs`` (and ``XY = Xcs'Ycs``).

    Examples
    --------
    >>> model = build_covariance_model(X_noc, n_components=2)
    >>> model.cross_product.shape
    (10, 10)
    """
    Xcs, average, scale = preprocess_calibration(X, method=preprocessing, weight=weight)
    n_samples = Xcs.shape[0]

    XY = None
    model_type = 'pca'
    if Y is not None:
        Y_array = Y.values if isinstance(Y, pd.DataFrame) else np.asarray(Y, dtype=float)
        if Y_array.ndim == 1:
            Y_array = Y_array.reshape(-1, 1)
        if Y_array.shape[0] != n_samples:
            raise ValueError(
                f"Dimension Error: Y must have {n_samples} rows, got {Y_array.shape[0]}"
            )
        Ycs, _, _ = preprocess_calibration(Y_array, method=preprocessing_y)
        XY = Xcs.T @ Ycs
        model_type = 'pls'

    logger.info("Built %s covariance model from %d observations and %d variables",
                model_type.upper(), n_samples, Xcs.shape[1])

    return check_covariance_model(CovarianceModel(
        cross_product=Xcs.T @ Xcs,
        n_samples=n_samples,
        n_components=n_components,
        average=average,
        scale=scale,
        weight=weight,
        model_type=model_type,
        cross_product_xy=XY,
    ))

"""
ADICOV Process Monitoring

Batch-wise monitoring with a covariance model trained on normal operating
condition (NOC) data. Each new batch of observations is summarised by one
D-statistic and one Q-statistic.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from .config import DEFAULT_INDEX, DEFAULT_PREPROCESSING, MODEL_TYPE_ALIASES, MODEL_TYPES
from .mspc_adicov import mspc_adicov
from .mspc_indices import IndexKind, resolve_index_kind
from .mspc_model import build_covariance_model

logger = logging.getLogger(__name__)


class ADICOVMonitor:
    """
    ADICOV-based Multivariate Statistical Process Monitoring

    Parameters
    ----------
    n_components : int, optional
        Number of latent directions retained in the model. Default is 1.
    model_type : str or int, optional
        'pca' (default, or 1) or 'pls' (or 2). A 'pls' monitor needs Y in ``fit``.
    preprocessing : str, optional
        Preprocessing of the calibration data: 'none', 'center', 'auto',
        'scale' or 'pareto'. Default is 'auto'.
    index : IndexKind, str or int, optional
        MSPC index definition used by ``predict``. Default is
        ``config.DEFAULT_INDEX``.

    Attributes
    ----------
    model_ : CovarianceModel
        Fitted covariance model
    feature_names_ : list
        Names of input features

    Examples
    --------
    >>> monitor = ADICOVMonitor(n_components=2).fit(X_noc)
    >>> results = monitor.predict(X_batch)
    >>> print(results['d'], results['q'])
    >>> summary = monitor.predict_batches([X_b1, X_b2, X_b3])
    """

    def __init__(
        self,
        n_components: int = 1,
        model_type: Union[str, int] = 'pca',
        preprocessing: str = DEFAULT_PREPROCESSING,
        index: Union[IndexKind, str, int] = DEFAULT_INDEX
    ):
        model_type = MODEL_TYPE_ALIASES.get(model_type, model_type)
        if model_type not in MODEL_TYPES:
            raise ValueError(f"Value Error: model_type must be 'pca' or 'pls', got {model_type!r}")

        self.n_components = n_components
        self.model_type = model_type
        self.preprocessing = preprocessing
        self.index = resolve_index_kind(index)

        self.model_ = None
        self.feature_names_ = None
        self.is_fitted_ = False

    def fit(
        self,
        X: Union[np.ndarray, pd.DataFrame],
        Y: Optional[Union[np.ndarray, pd.DataFrame]] = None,
        feature_names: List[str] = None
    ) -> 'ADICOVMonitor':
        """
        Fit the covariance model on NOC data.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Calibration data from normal operating conditions
        Y : array-like, shape (n_samples, n_responses), optional
            Responses, required for a 'pls' monitor
        feature_names : list of str, optional
            Names of features. If None and X is DataFrame, uses column names

        Returns
        -------
        self : ADICOVMonitor
        """
        if self.model_type == 'pls' and Y is None:
            raise ValueError("Value Error: a 'pls' monitor requires Y")
        if self.model_type == 'pca' and Y is not None:
            logger.warning("Y is ignored by a 'pca' monitor; use model_type='pls' to model it")
            Y = None

        if isinstance(X, pd.DataFrame):
            self.feature_names_ = feature_names or list(X.columns)
        else:
            n_features = np.asarray(X).shape[1]
            self.feature_names_ = feature_names or [f'Var{i+1}' for i in range(n_features)]

        self.model_ = build_covariance_model(
            X, Y,
            n_components=self.n_components,
            preprocessing=self.preprocessing,
        )
        self.is_fitted_ = True

        logger.info("ADICOV monitor fitted: %d samples, %d variables, %d latent directions",
                    self.model_.n_samples, self.model_.n_features, self.model_.n_components)

        return self

    def predict(self, X: Union[np.ndarray, pd.DataFrame]) -> Dict[str, Any]:
        """
        Compute the D and Q statistics of one batch.

        Parameters
        ----------
        X : array-like, shape (n_observations, n_features)
            Batch of new process data, in original units

        Returns
        -------
        results : dict
            - 'd': D-statistic of the batch
            - 'q': Q-statistic of the batch
            - 'rt': differential matrix for diagnosing D
            - 'rq': differential matrix for diagnosing Q
            - 'n_observations': batch size
            - 'index': index definition used
        """
        if not self.is_fitted_:
            raise ValueError("Model must be fitted before prediction. Call fit() first.")

        if not isinstance(X, pd.DataFrame):
            X = np.asarray(X, dtype=float)
            if X.ndim == 2 and X.shape[1] == len(self.feature_names_):
                X = pd.DataFrame(X, columns=self.feature_names_)

        result = mspc_adicov(self.model_, X, index=self.index)

        return {
            'd': result.d_stat,
            'q': result.q_stat,
            'rt': result.rt,
            'rq': result.rq,
            'n_observations': X.shape[0],
            'index': str(self.index),
        }

    def predict_batches(
        self,
        batches: Iterable[Union[np.ndarray, pd.DataFrame]],
        batch_names: Optional[List[str]] = None
    ) -> pd.DataFrame:
        """
        Compute D and Q for a sequence of batches.

        Returns
        -------
        pd.DataFrame
            One row per batch with columns 'D', 'Q' and 'N_obs'.
        """
        rows = []
        for batch in batches:
            results = self.predict(batch)
            rows.append({
                'D': results['d'],
                'Q': results['q'],
                'N_obs': results['n_observations'],
            })

        summary_df = pd.DataFrame(rows, columns=['D', 'Q', 'N_obs'])
        if batch_names is not None:
            if len(batch_names) != len(summary_df):
                raise ValueError(
                    f"Dimension Error: {len(batch_names)} batch names for {len(summary_df)} batches"
                )
            summary_df.index = batch_names

        return summary_df

    def get_model_summary(self) -> Dict[str, Any]:
        """
        Get summary of fitted model parameters.

        Returns
        -------
        summary : dict
            Dictionary with model information
        """
        if not self.is_fitted_:
            raise ValueError("Model not fitted yet.")

        return {
            'model_type': self.model_.model_type,
            'n_components': self.model_.n_components,
            'n_features': self.model_.n_features,
            'n_samples_train': self.model_.n_samples,
            'preprocessing': self.preprocessing,
            'index': str(self.index),
            'feature_names': self.feature_names_,
        }

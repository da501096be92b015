"""
MSPC Utility Modules for covariance-based process monitoring
============================================================

Multivariate Statistical Process Control (MSPC) on covariance models using
ADICOV approximations:
- Covariance (cross-product) models of calibration data, PCA or PLS
- Calibration pretreatments and their application to new data
- Subspace decomposition of covariance models
- ADICOV approximation of a batch to a target covariance
- D (latent) and Q (residual) statistics of a batch of observations

Package Structure
-----------------
mspc_model          : CovarianceModel, validation and construction
mspc_pretreatments  : Centering, scaling and weighting
mspc_decomposition  : PCA / PLS direction bases
adicov              : ADICOV approximation
mspc_indices        : Standard and modified ADICOV indices
mspc_adicov         : D-st and Q-st of a batch
adicov_monitor      : Batch-wise monitoring class
config              : Package-level configuration constants

Quick Start
-----------
>>> from mspc_utils import build_covariance_model, mspc_adicov
>>> import numpy as np
>>>
>>> # Covariance model of NOC data with 1 latent direction
>>> model = build_covariance_model(X_noc, n_components=1)
>>>
>>> # D and Q statistics of a new batch
>>> D, Q, Rt, Rq = mspc_adicov(model, X_batch, index='standard')
"""

import logging

# Import configuration constants
from .config import (
    DEFAULT_INDEX,
    DEFAULT_PREPROCESSING,
    VARIANCE_TOLERANCE,
    PLS_TOLERANCE
)

# Import model functions
from .mspc_model import (
    CovarianceModel,
    check_covariance_model,
    build_covariance_model
)

# Import pretreatment functions
from .mspc_pretreatments import (
    preprocess_calibration,
    preprocess_apply
)

# Import decomposition classes
from .mspc_decomposition import (
    DirectionBasis,
    SubspaceDecomposer,
    PCADecomposer,
    PLSDecomposer,
    get_decomposer
)

# Import ADICOV and index functions
from .adicov import adicov
from .mspc_indices import (
    IndexKind,
    resolve_index_kind,
    adicov_index,
    adicov_index_modified,
    score_index
)

# Import MSPC functions
from .mspc_adicov import (
    MSPCResult,
    mspc_adicov
)
from .adicov_monitor import ADICOVMonitor

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Define public API
__all__ = [
    # Configuration constants
    'DEFAULT_INDEX',
    'DEFAULT_PREPROCESSING',
    'VARIANCE_TOLERANCE',
    'PLS_TOLERANCE',

    # Model functions
    'CovarianceModel',
    'check_covariance_model',
    'build_covariance_model',

    # Pretreatment functions
    'preprocess_calibration',
    'preprocess_apply',

    # Decomposition
    'DirectionBasis',
    'SubspaceDecomposer',
    'PCADecomposer',
    'PLSDecomposer',
    'get_decomposer',

    # ADICOV and indices
    'adicov',
    'IndexKind',
    'resolve_index_kind',
    'adicov_index',
    'adicov_index_modified',
    'score_index',

    # MSPC
    'MSPCResult',
    'mspc_adicov',
    'ADICOVMonitor',
]

# Package metadata
__version__ = '1.0.0'
__description__ = 'ADICOV-based MSPC utility modules for covariance models'

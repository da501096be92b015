"""
Package-level configuration constants for ADICOV-based MSPC.
"""

# MSPC index used when the caller does not choose one.
# NOTE: the historical documentation of this computation lists the standard
# index (0) as default while the computation itself falls back to the
# modified one (1). The computation's behaviour is kept; pass ``index``
# explicitly when it matters.
DEFAULT_INDEX = 'modified'

# Calibration preprocessing
DEFAULT_PREPROCESSING = 'auto'
PREPROCESSING_METHODS = ('none', 'center', 'auto', 'scale', 'pareto')

# Latent variances at or below VARIANCE_TOLERANCE * max(variances) cannot be whitened
VARIANCE_TOLERANCE = 1e-10

# Kernel PLS stops extracting directions below this (relative) magnitude
PLS_TOLERANCE = 1e-10

# Singular values below RANK_TOLERANCE_FACTOR * eps * max(shape) * s_max are discarded
RANK_TOLERANCE_FACTOR = 1.0

MODEL_TYPES = ('pca', 'pls')

# Integer codes accepted for model_type
MODEL_TYPE_ALIASES = {1: 'pca', 2: 'pls'}

# -*- coding: utf-8 -*-
"""
Configuration of the BBCI utilities

This module holds all configuration constants of the package: logging,
type checking defaults and processing parameters.
"""

# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# =============================================================================
# TYPE CHECKING
# =============================================================================

# Name reported in diagnostics when the caller does not give one
DEFAULT_VARIABLE_NAME = 'variable'

# Options for scipy.io.loadmat when resolving variables from .mat files
# (structs become dicts, cells become lists, singleton dims are squeezed)
MAT_LOAD_OPTIONS = {
    'simplify_cells': True,
}

# =============================================================================
# PROVENANCE
# =============================================================================

# Append an entry to dat['history'] for every processing call
HISTORY_ENABLED = True
HISTORY_FIELD = 'history'

# =============================================================================
# PROCESSING
# =============================================================================

# Above this many elements per interval, proc_variance reduces epoch by epoch
VARIANCE_BLOCK_LIMIT = 10 ** 6

# Averaging policies accepted by proc_z_score
Z_SCORE_POLICIES = ['mean', 'nanmean', 'median']

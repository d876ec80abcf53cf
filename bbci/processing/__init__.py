# -*- coding: utf-8 -*-
"""Processing functions for continuous (cnt) and epoched (epo) data."""

from bbci.processing.select_classes import proc_select_classes
from bbci.processing.variance import proc_variance
from bbci.processing.z_score import proc_z_score

# -*- coding: utf-8 -*-
"""BBCI Utilities

Processing functions for continuous and epoched biosignal data (cnt/epo
structures) and a runtime type checker for function arguments.

Data Format:
    Data structures are plain dicts. Continuous data 'cnt' holds x of shape
    (T, nChans); epoched data 'epo' holds x of shape (T, nChans, nEpochs),
    one-hot class labels y of shape (nClasses, nEpochs) and className.

Example:
    >>> from bbci.misc import check_type
    >>> from bbci.processing import proc_z_score
    >>>
    >>> check_type(epo, 'STRUCT(x clab)', 'epo')
    >>> out = proc_z_score(epo, classes=['left', 'right'])
"""

from bbci.__version__ import __version__

# -*- coding: utf-8 -*-
"""
Provenance tracking for BBCI data structures.

Each processing function records its name and parameters in the 'history'
list of the structure it returns, so that the chain of operations that
produced a data set can be reconstructed.
"""

from datetime import datetime
from typing import Any, Dict, Mapping

from bbci import config


def misc_history(dat: Mapping, fcn: str, **params) -> Dict[str, Any]:
    """
    Return a copy of dat with a history entry for fcn appended.

    Args:
        dat: Data structure (cnt, epo, ...)
        fcn: Name of the processing function
        **params: Parameters the function was called with

    Returns:
        Shallow copy of dat. The history list is copied, not shared.
    """
    dat = dict(dat)
    if not config.HISTORY_ENABLED:
        return dat
    history = list(dat.get(config.HISTORY_FIELD) or [])
    history.append({
        'fcn': fcn,
        'date': datetime.now().isoformat(timespec='seconds'),
        'params': dict(params),
    })
    dat[config.HISTORY_FIELD] = history
    return dat

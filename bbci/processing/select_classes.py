# -*- coding: utf-8 -*-
"""Selection of classes (and their epochs) from epoched data."""

import logging
from typing import Any, Dict, List, Mapping, Sequence, Union

import numpy as np

from bbci.misc.check_type import check_type
from bbci.misc.history import misc_history

logger = logging.getLogger(__name__)


def proc_select_classes(epo: Mapping, classes: Union[str, int, Sequence]) -> Dict[str, Any]:
    """
    Keep only the given classes and the epochs belonging to them.

    Args:
        epo: Epoched data with fields x (T, nChans, nEpochs), y
             (nClasses, nEpochs) and className
        classes: Class name, class index, or a list of names/indices. The
            output classes follow this order.

    Returns:
        New epo with x, y and className restricted to the selection

    Raises:
        ValueError: If a class name is not found in epo['className'] or a
            class index is out of range
    """
    check_type(epo, '!STRUCT(x y className)', 'epo')
    if isinstance(classes, (str, int, np.integer)):
        classes = [classes]
    check_type(list(classes), '!CELL', 'classes')

    class_names = list(epo['className'])
    indices: List[int] = []
    for cls in classes:
        if isinstance(cls, str):
            if cls not in class_names:
                raise ValueError(f"Class '{cls}' not found in {class_names}")
            indices.append(class_names.index(cls))
        else:
            index = int(cls)
            if not 0 <= index < len(class_names):
                raise ValueError(
                    f"Class index {index} out of range for {len(class_names)} classes"
                )
            indices.append(index)

    y = np.asarray(epo['y'])[indices, :]
    keep = np.flatnonzero(y.any(axis=0))

    out = misc_history(epo, 'proc_select_classes', classes=list(classes))
    out['x'] = np.asarray(epo['x'])[..., keep]
    out['y'] = y[:, keep]
    out['className'] = [class_names[i] for i in indices]
    logger.info(f"Selected classes {out['className']}: {len(keep)} of "
                f"{y.shape[1]} epochs")
    return out

# -*- coding: utf-8 -*-
"""
Z-Score Between Two Classes

Computes the (pseudo) z-score of the class difference of epoched data,

    z = (m1 - m2) / sqrt(s1^2 / N1 + s2^2 / N2)

where m, s and N are the class average, standard deviation and number of
epochs. The average is taken across the last dimension of epo['x'].
"""

import logging
from typing import List, Mapping, Optional
from warnings import warn

import numpy as np

from bbci import config
from bbci.misc.check_type import check_type
from bbci.misc.history import misc_history
from bbci.misc.options import opt_check_proplist, opt_proplist_to_struct, opt_set_defaults
from bbci.misc.structs import copy_struct
from bbci.processing.select_classes import proc_select_classes

logger = logging.getLogger(__name__)

Z_SCORE_PROPS = [
    ('policy', 'mean', f"CHAR({' '.join(config.Z_SCORE_POLICIES)})"),
    ('classes', 'ALL', 'CHAR|CELL{CHAR}'),
    ('std', True, 'BOOL'),
]

_AVERAGES = {
    'mean': np.mean,
    'nanmean': np.nanmean,
    'median': np.median,
}


def proc_z_score(epo: Optional[Mapping], *args, **kwargs):
    """
    Calculate the z-score of the difference between two classes.

    Args:
        epo: Epoched data with fields x (..., nEpochs) and clab, and
            optionally y (nClasses, nEpochs) and className. If None, the
            property list is returned.
        *args: Options as dict and/or property/value pairs
        **kwargs: Options as keyword arguments
            - policy: 'mean' (default), 'nanmean' or 'median'
            - classes: Names of the two classes, or 'ALL' (default)
            - std: Keep the per-class standard deviation in the output

    Returns:
        New epo with fields
            - x: z-scores, shape epo['x'].shape[:-1]
            - y: [[1]] (one class left)
            - className: ['z( A , B )']
            - yUnit: 'z-score'
            - N: number of epochs per class
            - std: per-class standard deviation (only if opt std)

    Raises:
        ValueError: If the selection does not hold exactly two classes or a
            class name is unknown

    Example:
        >>> out = proc_z_score(epo, 'policy', 'median')
        >>> out['className']
        ['z( left , right )']
    """
    if epo is None:
        return list(Z_SCORE_PROPS)

    check_type(epo, '!STRUCT(x clab)', 'epo')
    opt = opt_proplist_to_struct(*args)
    opt.update(kwargs)
    opt, _ = opt_set_defaults(opt, Z_SCORE_PROPS)
    opt_check_proplist(opt, Z_SCORE_PROPS)

    epo = misc_history(epo, 'proc_z_score', **opt)
    x = np.asarray(epo['x'], dtype=float)
    n_epochs = x.shape[-1]
    if 'y' not in epo:
        warn('no classes label found: calculating average across all epochs')
        epo['y'] = np.ones((1, n_epochs))
        epo['className'] = ['all']
    y = np.atleast_2d(np.asarray(epo['y']))

    classes = opt['classes']
    if isinstance(classes, str) and classes == 'ALL':
        classes = epo['className']
    if isinstance(classes, str):
        classes = [classes]
    classes = list(classes)
    n_classes = len(classes)

    if y.sum(axis=1).max() == 1:
        warn('only one epoch per class - nothing to average')
        out = proc_select_classes(epo, classes)
        out['N'] = np.ones(n_classes, dtype=int)
        return out

    if n_classes != 2:
        raise ValueError(f"z-score requires exactly two classes, got {classes}")

    class_names = list(epo['className'])
    ev_ind: List[np.ndarray] = []
    for cls in classes:
        if cls not in class_names:
            raise ValueError(f"Class '{cls}' not found in {class_names}")
        ev_ind.append(np.flatnonzero(y[class_names.index(cls)]))

    out = copy_struct(epo, exclude=('x', 'y', 'className'))
    sz = x.shape
    flat = x.reshape(-1, sz[-1])
    average = _AVERAGES[opt['policy'].lower()]
    std_fcn = np.nanstd if opt['policy'].lower() == 'nanmean' else np.std

    means = np.zeros((flat.shape[0], n_classes))
    stds = np.zeros((flat.shape[0], n_classes))
    n_per_class = np.zeros(n_classes, dtype=int)
    for ic, ev in enumerate(ev_ind):
        means[:, ic] = average(flat[:, ev], axis=1)
        # std of a single epoch is 0
        stds[:, ic] = std_fcn(flat[:, ev], axis=1, ddof=1 if len(ev) > 1 else 0)
        n_per_class[ic] = len(ev)

    means = means.reshape(sz[:-1] + (n_classes,))
    stds = stds.reshape(sz[:-1] + (n_classes,))
    zs = (means[..., 0] - means[..., 1]) / np.sqrt(
        stds[..., 0] ** 2 / n_per_class[0] + stds[..., 1] ** 2 / n_per_class[1])

    if opt['std']:
        out['std'] = stds
    out['x'] = zs
    out['y'] = np.ones((1, 1))
    out['yUnit'] = 'z-score'
    out['className'] = [f"z( {classes[0]} , {classes[1]} )"]
    out['N'] = n_per_class
    logger.info(f"Computed z-scores of {out['className'][0]} with policy "
                f"'{opt['policy']}' (N={n_per_class.tolist()})")
    return out

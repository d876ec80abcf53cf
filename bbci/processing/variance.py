# -*- coding: utf-8 -*-
"""
Variance in Time Intervals

Computes the variance (or standard deviation) of continuous or epoched
signals in equally spaced time intervals. Typical use is band-power
features: band-pass filter, epoch, then proc_variance(epo, 1) gives one
log-variance feature per channel and trial.
"""

import logging
from typing import Any, Dict, Mapping, Union
from warnings import warn

import numpy as np

from bbci import config
from bbci.misc.check_type import check_type
from bbci.misc.history import misc_history

logger = logging.getLogger(__name__)


def _section_bounds(n_samples: int, n_sections: int) -> np.ndarray:
    # round half up, as round(linspace(1, T+1, n+1)) in 1-based indexing
    return np.floor(np.linspace(0, n_samples, n_sections + 1) + 0.5).astype(int)


def proc_variance(dat: Mapping, n_sections: Union[int, str] = 1,
                  calc_std: Union[bool, str] = False) -> Dict[str, Any]:
    """
    Compute the variance in n_sections equally spaced intervals.

    Works for cnt (x of shape (T, nChans)) and epo (x of shape
    (T, nChans, nEpochs)) structures. Variance and standard deviation use
    N-1 normalization.

    Args:
        dat: Data structure with field x, time on the first axis
        n_sections: Number of intervals, or 'std' for one interval with
            calc_std=True
        calc_std: Compute the standard deviation instead of the variance.
            The strings 'std' and 'var' are accepted as well.

    Returns:
        New structure with x of shape (n_sections,) + x.shape[1:] and t
        holding the index of the last sample of each interval

    Raises:
        ValueError: If there are more intervals than samples
    """
    check_type(dat, '!STRUCT(x)', 'dat')
    if isinstance(n_sections, str) and n_sections.lower() == 'std':
        n_sections = 1
        calc_std = True
    if isinstance(calc_std, str):
        check_type(calc_std, 'CHAR(std var)', 'calc_std')
        calc_std = calc_std.lower() == 'std'
    check_type(n_sections, '!INT[1]', 'n_sections')
    check_type(calc_std, '!BOOL[1]', 'calc_std')
    n_sections = int(n_sections)
    calc_std = bool(calc_std)

    x = np.asarray(dat['x'], dtype=float)
    n_samples = x.shape[0]
    if not 1 <= n_sections <= n_samples:
        raise ValueError(
            f"n_sections must be between 1 and the number of samples "
            f"({n_samples}), got {n_sections}"
        )
    n_chans = x.shape[1] if x.ndim > 1 else 1
    x3 = x.reshape(n_samples, n_chans, -1)
    n_epochs = x3.shape[2]

    dat = misc_history(dat, 'proc_variance', n_sections=n_sections, calc_std=calc_std)
    bounds = _section_bounds(n_samples, n_sections)
    xo = np.zeros((n_sections, n_chans, n_epochs))
    t = np.zeros(n_sections, dtype=int)
    for s in range(n_sections):
        segment = x3[bounds[s]:bounds[s + 1]]
        if len(segment) == 1:
            warn('calculating variance of scalar')
        elif calc_std:
            xo[s] = segment.std(axis=0, ddof=1)
        elif segment.size <= config.VARIANCE_BLOCK_LIMIT:
            xo[s] = segment.var(axis=0, ddof=1)
        else:
            for i in range(n_epochs):
                xo[s, :, i] = segment[:, :, i].var(axis=0, ddof=1)
        t[s] = bounds[s + 1] - 1

    dat['x'] = xo.reshape((n_sections,) + x.shape[1:])
    dat['t'] = t
    logger.info(f"Computed {'std' if calc_std else 'variance'} in {n_sections} "
                f"section(s) for {n_chans} channel(s), {n_epochs} epoch(s)")
    return dat

# -*- coding: utf-8 -*-
"""
Option Handling

Processing functions declare their optional arguments as a property list of
(name, default, type_def) triples, e.g.

    props = [('policy', 'mean', 'CHAR(mean nanmean median)'),
             ('std',    True,   'BOOL')]

Callers pass options as a dict, as property/value pairs, or both. The
helpers below normalize these into a dict, fill defaults and type-check
every value.

Example:
    >>> opt = opt_proplist_to_struct('Policy', 'median')
    >>> opt, isdefault = opt_set_defaults(opt, props)
    >>> opt_check_proplist(opt, props)
    >>> opt
    {'policy': 'median', 'std': True}
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence, Tuple

from bbci.misc.check_type import check_type
from bbci.misc.errors import OptionError

logger = logging.getLogger(__name__)

Props = Sequence[Tuple[str, Any, str]]


def opt_proplist_to_struct(*args) -> Dict[str, Any]:
    """
    Convert a property/value list (optionally led by a dict) into a dict.

    Args:
        *args: [opt_dict,] name1, value1, name2, value2, ...

    Returns:
        New dict; later occurrences of a property override earlier ones

    Raises:
        ValueKindMismatch: If the pairs do not form a property list
    """
    opt = {}
    pairs = list(args)
    if pairs and isinstance(pairs[0], Mapping):
        opt.update(pairs.pop(0))
    check_type(pairs, 'PROPLIST', 'property list')
    for key, value in zip(pairs[::2], pairs[1::2]):
        opt[key] = value
    return opt


def opt_set_defaults(opt: Mapping, props: Props) -> Tuple[Dict[str, Any], Dict[str, bool]]:
    """
    Fill in default values for properties not given in opt.

    Property names are matched case-insensitively and renamed to the
    spelling used in props. If a property is given in several spellings,
    the last one wins. Properties not declared in props are kept as they
    are; opt_check_proplist reports them.

    Returns:
        (opt, isdefault) where isdefault maps each declared property to
        True if its default value was used
    """
    opt = dict(opt)
    isdefault = {}
    for prop_name, default, _ in props:
        given = [key for key in opt if key.lower() == prop_name.lower()]
        if not given:
            opt[prop_name] = default
            isdefault[prop_name] = True
            continue
        value = opt[given[-1]]
        for key in given:
            del opt[key]
        opt[prop_name] = value
        isdefault[prop_name] = False
    defaults_used = [key for key, used in isdefault.items() if used]
    if defaults_used:
        logger.debug(f"Using default values for: {defaults_used}")
    return opt, isdefault


def opt_check_proplist(opt: Mapping, props: Props) -> None:
    """
    Check that opt only holds declared properties of the declared types.

    Raises:
        OptionError: If opt holds an undeclared property
        TypeCheckError: If a value does not comply with its type_def
    """
    types = {prop_name.lower(): type_def for prop_name, _, type_def in props}
    for key, value in opt.items():
        type_def = types.get(key.lower())
        if type_def is None:
            raise OptionError(
                f"Unexpected property '{key}'. Valid properties: "
                f"{', '.join(prop_names(props))}"
            )
        check_type(value, type_def, key)


def prop_names(props: Props) -> List[str]:
    return [prop[0] for prop in props]

# -*- coding: utf-8 -*-
"""Helpers for BBCI data structures (plain dicts)."""

from typing import Any, Dict, Iterable, Mapping, Optional


def copy_struct(src: Mapping, fields: Optional[Iterable[str]] = None,
                exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Shallow copy of a struct, restricted to some fields.

    Args:
        src: Struct to copy
        fields: Fields to keep (all fields if None). Fields missing in src
            are ignored.
        exclude: Fields to drop

    Returns:
        New dict sharing the field values of src

    Example:
        >>> out = copy_struct(epo, exclude=('x', 'y', 'className'))
    """
    exclude = set(exclude)
    keep = src.keys() if fields is None else [f for f in fields if f in src]
    return {key: src[key] for key in keep if key not in exclude}

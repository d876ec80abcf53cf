# -*- coding: utf-8 -*-
"""
Type Expression Parser

This module turns the textual type specifications used by check_type into a
small tree of nodes. The grammar is:

    TypeExpression := Alternative ('|' Alternative)*
    Alternative    := ['!'] Kind [Qualifier]
    Kind           := DOUBLE | INT | BOOL | CHAR | FUNC | CELL | STRUCT | PROPLIST

Qualifiers:
    DOUBLE/INT/BOOL/CHAR  '[' DimensionSpec (' ' DimensionSpec)* ']'
    CHAR                  '(' value (' ' value)* ')'
    CELL                  '{' TypeExpression '}'
    STRUCT                '(' field (' ' field)* ')'

A DimensionSpec is 'n', 'a-b', 'a-', '-b' or '-'.

Malformed qualifiers and unknown keywords do not raise here. They are kept
in the tree and reported by the checker when (and only when) evaluation
reaches them, so that 'DOUBLE|FOO' still accepts numeric values.

Example:
    >>> expr = parse_type('!CHAR|DOUBLE[3]')
    >>> expr.forbid_empty
    True
    >>> expr.root.left.kind
    <Kind.CHAR: 'CHAR'>
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union


class Kind(Enum):
    """Type keywords, matched case-insensitively as a prefix."""
    DOUBLE = 'DOUBLE'
    INT = 'INT'
    BOOL = 'BOOL'
    CHAR = 'CHAR'
    FUNC = 'FUNC'
    CELL = 'CELL'
    STRUCT = 'STRUCT'
    PROPLIST = 'PROPLIST'


SIZED_KINDS = (Kind.DOUBLE, Kind.INT, Kind.BOOL, Kind.CHAR)

_DIM_PATTERN = re.compile(r'(?P<lo>\d*)(?P<dash>-?)(?P<hi>\d*)')
_OPENERS = {'[': ']', '{': '}', '(': ')'}


@dataclass(frozen=True)
class DimRange:
    """Inclusive range of accepted lengths for one dimension."""
    lo: int = 0
    hi: float = math.inf

    def __contains__(self, length: int) -> bool:
        return self.lo <= length <= self.hi


@dataclass(frozen=True)
class SizeSpec:
    text: str
    ranges: Tuple[DimRange, ...]


@dataclass(frozen=True)
class AnyType:
    """Empty expression, accepts every value."""
    text: str = ''


@dataclass(frozen=True)
class UnknownType:
    text: str


@dataclass(frozen=True)
class KindType:
    """
    One alternative: a kind keyword plus its parsed qualifier.

    Attributes:
        kind: Type keyword
        text: Source text of this alternative
        size: Shape constraint (DOUBLE, INT, BOOL, CHAR)
        allowed: Enumerated allowed values (CHAR)
        fields: Required field names (STRUCT)
        element: Type of every cell (CELL)
        bad_qualifier: Qualifier text that could not be parsed
        bad_size: True when bad_qualifier is a size specification
    """
    kind: Kind
    text: str
    size: Optional[SizeSpec] = None
    allowed: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()
    element: Optional['TypeExpr'] = None
    bad_qualifier: Optional[str] = None
    bad_size: bool = False


@dataclass(frozen=True)
class UnionType:
    left: 'Node'
    right: 'Node'
    text: str


Node = Union[AnyType, UnknownType, KindType, UnionType]


@dataclass(frozen=True)
class TypeExpr:
    text: str
    root: Node
    forbid_empty: bool = False


def parse_dim_range(token: str) -> DimRange:
    """
    Parse one dimension token into an inclusive range.

    Args:
        token: 'n', 'a-b', 'a-', '-b' or '-'

    Returns:
        DimRange with hi=math.inf for open upper bounds

    Raises:
        ValueError: If the token is not a valid dimension specification

    Example:
        >>> parse_dim_range('3-')
        DimRange(lo=3, hi=inf)
    """
    match = _DIM_PATTERN.fullmatch(token)
    if match is None or not token:
        raise ValueError(f"Invalid dimension specification: '{token}'")
    lo, dash, hi = match.group('lo', 'dash', 'hi')
    if not dash:
        return DimRange(int(lo), int(lo))
    return DimRange(int(lo) if lo else 0, int(hi) if hi else math.inf)


def parse_size(qualifier: str) -> SizeSpec:
    """Parse '[d1 d2 ...]'. Raises ValueError for anything else."""
    if not _is_wrapped(qualifier, '[', ']'):
        raise ValueError(f"Size specification must be wrapped in []: '{qualifier}'")
    ranges = tuple(parse_dim_range(tok) for tok in qualifier[1:-1].split())
    return SizeSpec(qualifier, ranges)


def parse_type(text: str) -> TypeExpr:
    """
    Parse a type specification into a TypeExpr tree.

    Args:
        text: Type specification such as '!STRUCT(x clab)' or 'CELL{CHAR}'

    Returns:
        TypeExpr whose root is an AnyType, UnknownType, KindType or UnionType
    """
    body = text.strip()
    # '!' on any alternative forbids the empty value for the whole expression
    forbid_empty = any(alt.startswith('!') for alt in split_alternatives(body))
    return TypeExpr(text=text, root=_parse_alternatives(body),
                    forbid_empty=forbid_empty)


def find_union_split(text: str) -> int:
    """Index of the first '|' outside of brackets, or -1."""
    depth = 0
    for i, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _OPENERS.values():
            depth = max(depth - 1, 0)
        elif char == '|' and depth == 0:
            return i
    return -1


def split_alternatives(text: str) -> List[str]:
    """Top-level alternatives of a type specification, stripped."""
    alternatives = []
    split = find_union_split(text)
    while split >= 0:
        alternatives.append(text[:split].strip())
        text = text[split + 1:]
        split = find_union_split(text)
    alternatives.append(text.strip())
    return alternatives


def _parse_alternatives(text: str) -> Node:
    if text.startswith('!'):
        text = text[1:].strip()
    if not text:
        return AnyType()
    split = find_union_split(text)
    if split < 0:
        return _parse_alternative(text)
    # A|B|C associates as A|(B|C)
    return UnionType(left=_parse_alternatives(text[:split].strip()),
                     right=_parse_alternatives(text[split + 1:].strip()),
                     text=text)


def _parse_alternative(text: str) -> Node:
    upper = text.upper()
    for kind in Kind:
        if upper.startswith(kind.value):
            return _parse_qualifier(kind, text, text[len(kind.value):])
    return UnknownType(text)


def _parse_qualifier(kind: Kind, text: str, qualifier: str) -> KindType:
    if not qualifier:
        return KindType(kind, text)

    if kind == Kind.CHAR and _is_wrapped(qualifier, '(', ')'):
        return KindType(kind, text, allowed=tuple(qualifier[1:-1].split()))

    if kind in SIZED_KINDS:
        try:
            return KindType(kind, text, size=parse_size(qualifier))
        except ValueError:
            return KindType(kind, text, bad_qualifier=qualifier, bad_size=True)

    if kind == Kind.CELL and _is_wrapped(qualifier, '{', '}'):
        return KindType(kind, text, element=parse_type(qualifier[1:-1]))

    if kind == Kind.STRUCT and _is_wrapped(qualifier, '(', ')'):
        return KindType(kind, text, fields=tuple(qualifier[1:-1].split()))

    return KindType(kind, text, bad_qualifier=qualifier)


def _is_wrapped(text: str, opener: str, closer: str) -> bool:
    return len(text) >= 2 and text[0] == opener and text[-1] == closer

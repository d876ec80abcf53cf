# -*- coding: utf-8 -*-
"""
Runtime Type Checking

This module checks that a value complies with a type specification such as
'DOUBLE[- 3]', 'CHAR(red green blue)', 'STRUCT(x clab)' or 'CELL{CHAR}'.
See bbci.misc.type_expr for the grammar. The kinds are:

    DOUBLE    numeric scalar or array (bool excluded)
    INT       numeric with all elements whole numbers
    BOOL      bool, bool array, or numeric with all elements in {0, 1}
    CHAR      str, optionally restricted to enumerated values
    FUNC      callable
    CELL      list, tuple or object array, optionally typed per element
    STRUCT    mapping, DataFrame, structured array, dataclass or namespace,
              optionally with required fields
    PROPLIST  property/value list: even length, str at even positions

Alternatives are combined with '|'. The empty value is always accepted
unless the specification starts with '!'.

Sizes follow MATLAB conventions: every value has rank >= 2, a 1-D array or
a str of length n has size (1, n). A single dimension spec like 'DOUBLE[5]'
accepts row and column vectors of that length.

Example:
    >>> check_type(np.arange(5), 'DOUBLE[5]', 'vec')
    TypeVerdict(ok=True, msg='', error=None)
    >>> check_type(np.zeros((3, 4)), 'DOUBLE[2 4]', 'x', toplevel=False).msg
    "Size mismatch for variable 'x': expected [2 4] but got [3 4]"
"""

import dataclasses
import logging
import numbers
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Optional, Tuple, Type

import numpy as np
import pandas as pd

from bbci import config
from bbci.misc.errors import (
    DisallowedValue,
    MalformedTypeExpression,
    MissingField,
    TypeCheckError,
    ValueKindMismatch,
    ValueShapeMismatch,
)
from bbci.misc.type_expr import (
    AnyType,
    Kind,
    KindType,
    SizeSpec,
    TypeExpr,
    UnionType,
    UnknownType,
    parse_type,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TypeVerdict:
    """
    Result of one type check.

    Attributes:
        ok: Whether the value complies with the specification
        msg: Diagnostic message, never empty when ok is False
        error: Exception class to raise for a rejection
    """
    ok: bool
    msg: str = ''
    error: Optional[Type[TypeCheckError]] = None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self):
        if not self.ok:
            raise self.error(self.msg)


ACCEPTED = TypeVerdict(True)


def _reject(error: Type[TypeCheckError], msg: str) -> TypeVerdict:
    return TypeVerdict(False, msg, error)


# =============================================================================
# VALUE INSPECTION
# =============================================================================

def is_empty(value: Any) -> bool:
    """True for None, '', empty containers, zero-size arrays and empty pandas objects."""
    if value is None:
        return True
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return value.empty
    if isinstance(value, np.ndarray):
        return value.size == 0
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) == 0
    return False


def value_size(value: Any) -> Tuple[int, ...]:
    """
    Size of a value in MATLAB terms (rank >= 2).

    Returns:
        (1, n) for str, list, tuple and 1-D arrays of length n; (n, 1) for
        a pandas Series; the numpy shape for arrays of rank >= 2; (1, 1)
        for scalars and records.
    """
    if isinstance(value, (str, list, tuple)):
        return (1, len(value))
    if isinstance(value, pd.Series):
        return (len(value), 1)
    if isinstance(value, (pd.DataFrame, np.ndarray)):
        shape = value.shape
        if len(shape) == 0:
            return (1, 1)
        if len(shape) == 1:
            return (1, shape[0])
        return tuple(shape)
    return (1, 1)


def _as_array(value: Any) -> np.ndarray:
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return value.to_numpy()
    return np.asarray(value)


def _is_logical(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return True
    if isinstance(value, (np.ndarray, pd.Series, pd.DataFrame)):
        return _as_array(value).dtype.kind == 'b'
    return False


def _is_numeric(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, numbers.Number):
        return True
    if isinstance(value, (np.ndarray, pd.Series, pd.DataFrame)):
        return _as_array(value).dtype.kind in 'iufc'
    return False


def _is_int(value: Any) -> bool:
    if not _is_numeric(value):
        return False
    arr = _as_array(value)
    if arr.dtype.kind == 'c':
        return False
    return bool(np.all(arr == np.floor(arr)))


def _is_bool(value: Any) -> bool:
    if _is_logical(value):
        return True
    if not _is_numeric(value):
        return False
    arr = _as_array(value)
    return bool(np.all((arr == 0) | (arr == 1)))


def _is_cell(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return True
    return isinstance(value, np.ndarray) and value.dtype == object


def _is_struct(value: Any) -> bool:
    if isinstance(value, (Mapping, pd.DataFrame, SimpleNamespace)):
        return True
    if isinstance(value, (np.ndarray, np.void)) and value.dtype.names is not None:
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_proplist(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) % 2:
        return False
    return all(isinstance(key, str) for key in value[::2])


def _has_field(value: Any, field: str) -> bool:
    if isinstance(value, Mapping):
        return field in value
    if isinstance(value, pd.DataFrame):
        return field in value.columns
    if isinstance(value, (np.ndarray, np.void)):
        return field in value.dtype.names
    return hasattr(value, field)


def _cell_elements(value: Any):
    if isinstance(value, np.ndarray):
        return value.flat
    return value


_KIND_TESTS = {
    Kind.DOUBLE: _is_numeric,
    Kind.INT: _is_int,
    Kind.BOOL: _is_bool,
    Kind.CHAR: lambda value: isinstance(value, str),
    Kind.FUNC: callable,
    Kind.CELL: _is_cell,
    Kind.STRUCT: _is_struct,
    Kind.PROPLIST: _is_proplist,
}


# =============================================================================
# QUALIFIER CHECKS
# =============================================================================

def _check_size(value: Any, spec: Optional[SizeSpec], name: str) -> TypeVerdict:
    if spec is None or not spec.ranges:
        return ACCEPTED

    size = value_size(value)
    n_specs = len(spec.ranges)
    is_vector = len(size) == 2 and 1 in size
    if n_specs == 1:
        ok = is_vector and int(np.prod(size)) in spec.ranges[0]
    else:
        if n_specs != len(size):
            return _reject(
                ValueShapeMismatch,
                f"Mismatch in #dim of variable '{name}': "
                f"expected {n_specs} but got {len(size)}"
            )
        ok = all(length in dim for length, dim in zip(size, spec.ranges))

    if ok:
        return ACCEPTED
    received = (int(np.prod(size)),) if is_vector and n_specs == 1 else size
    return _reject(
        ValueShapeMismatch,
        f"Size mismatch for variable '{name}': expected {spec.text} "
        f"but got [{' '.join(str(n) for n in received)}]"
    )


def _check_char(value: str, node: KindType, name: str) -> TypeVerdict:
    if not node.allowed:
        return _check_size(value, node.size, name)
    if value.lower() in (allowed.lower() for allowed in node.allowed):
        return ACCEPTED
    return _reject(
        DisallowedValue,
        f"Invalid value '{value}' of variable '{name}'. "
        f"Allowed values: {' '.join(node.allowed)}"
    )


def _check_cell(value: Any, node: KindType, name: str) -> TypeVerdict:
    if node.element is None:
        return ACCEPTED
    for i, element in enumerate(_cell_elements(value)):
        verdict = _check_expr(element, node.element, f"{name}{{{i}}}")
        if not verdict.ok:
            return verdict
    return ACCEPTED


def _check_struct(value: Any, node: KindType, name: str) -> TypeVerdict:
    missing = [field for field in node.fields if not _has_field(value, field)]
    if not missing:
        return ACCEPTED
    return _reject(
        MissingField,
        f"Missing obligatory field(s) in variable '{name}': {', '.join(missing)}"
    )


def _check_no_qualifier(value: Any, node: KindType, name: str) -> TypeVerdict:
    return ACCEPTED


_QUALIFIER_CHECKS = {
    Kind.DOUBLE: lambda value, node, name: _check_size(value, node.size, name),
    Kind.INT: lambda value, node, name: _check_size(value, node.size, name),
    Kind.BOOL: lambda value, node, name: _check_size(value, node.size, name),
    Kind.CHAR: _check_char,
    Kind.FUNC: _check_no_qualifier,
    Kind.CELL: _check_cell,
    Kind.STRUCT: _check_struct,
    Kind.PROPLIST: _check_no_qualifier,
}


# =============================================================================
# EVALUATION
# =============================================================================

def _check_kind(value: Any, node: KindType, name: str) -> TypeVerdict:
    if not _KIND_TESTS[node.kind](value):
        return _reject(
            ValueKindMismatch,
            f"Type error in variable '{name}': expected type is {node.text}"
        )
    if node.bad_qualifier is not None:
        if node.bad_size:
            msg = (f"Invalid size specification '{node.bad_qualifier}' "
                   f"for variable '{name}'")
        else:
            msg = (f"Invalid specification '{node.bad_qualifier}' of "
                   f"{node.kind.value} type in variable '{name}'")
        return _reject(MalformedTypeExpression, msg)
    return _QUALIFIER_CHECKS[node.kind](value, node, name)


def _check_node(value: Any, node, name: str) -> TypeVerdict:
    if isinstance(node, AnyType):
        return ACCEPTED
    if isinstance(node, UnknownType):
        return _reject(MalformedTypeExpression,
                       f"Unknown type: {node.text} in variable '{name}'")
    if isinstance(node, UnionType):
        left = _check_node(value, node.left, name)
        if left.ok:
            return left
        right = _check_node(value, node.right, name)
        if right.ok:
            return right
        logger.debug(f"No alternative of '{node.text}' matched '{name}': {right.msg}")
        return left
    return _check_kind(value, node, name)


def _check_expr(value: Any, expr: TypeExpr, name: str) -> TypeVerdict:
    if isinstance(expr.root, AnyType):
        return ACCEPTED
    if is_empty(value):
        if not expr.forbid_empty:
            return ACCEPTED
        return _reject(
            ValueShapeMismatch,
            f"Empty value not allowed for variable '{name}' "
            f"(expected type is {expr.text})"
        )
    return _check_node(value, expr.root, name)


# =============================================================================
# PUBLIC API
# =============================================================================

def check_type(value: Any, type_def: str,
               name: str = config.DEFAULT_VARIABLE_NAME,
               toplevel: bool = True) -> TypeVerdict:
    """
    Check that a value complies with a type specification.

    Args:
        value: Value to check
        type_def: Type specification, e.g. '!STRUCT(x clab)' or 'CHAR|DOUBLE[3]'
        name: Variable name used in diagnostic messages
        toplevel: Raise on rejection (True) or return the verdict (False)

    Returns:
        TypeVerdict; truthy if the value complies

    Raises:
        TypeCheckError: Subclass matching the rejection, only if toplevel

    Example:
        >>> check_type('green', 'CHAR(red green blue)', 'linecolor')
        TypeVerdict(ok=True, msg='', error=None)
        >>> check_type({'x': 1}, 'STRUCT(x clab)', 'epo')
        Traceback (most recent call last):
        ...
        bbci.misc.errors.MissingField: Missing obligatory field(s) in variable 'epo': clab
    """
    verdict = _check_expr(value, parse_type(type_def), name)
    if not verdict.ok:
        logger.debug(f"Type check of '{name}' against '{type_def}' failed: {verdict.msg}")
        if toplevel:
            verdict.raise_for_error()
    return verdict


def check_type_named(name: str, type_def: str, namespace: Mapping,
                     toplevel: bool = True) -> TypeVerdict:
    """
    Check the variable called name in namespace.

    Args:
        name: Variable name, looked up in namespace and used in messages
        type_def: Type specification
        namespace: Mapping from variable names to values, e.g. the contents
            of a loaded .mat file or vars() of the caller
        toplevel: Raise on rejection (True) or return the verdict (False)

    Raises:
        NameError: If name is not defined in namespace
        TypeCheckError: On rejection, only if toplevel
    """
    try:
        value = namespace[name]
    except KeyError:
        raise NameError(f"Undefined variable '{name}'") from None
    return check_type(value, type_def, name, toplevel=toplevel)

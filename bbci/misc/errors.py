# -*- coding: utf-8 -*-
"""Exceptions raised by the type checker and the option helpers."""


class TypeCheckError(TypeError):
    """Base class for rejected type checks."""


class MalformedTypeExpression(TypeCheckError, ValueError):
    """Unknown type keyword, bad qualifier delimiters or bad size token."""


class ValueShapeMismatch(TypeCheckError):
    """Rank or dimension length outside the declared range."""


class ValueKindMismatch(TypeCheckError):
    """Value is not of the declared kind (numeric, textual, record, ...)."""


class MissingField(TypeCheckError):
    """Required struct field(s) absent."""


class DisallowedValue(TypeCheckError):
    """Text value not among the enumerated allowed values."""


class OptionError(ValueError):
    """Property given that is not declared in the property list."""

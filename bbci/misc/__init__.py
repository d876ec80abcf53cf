# -*- coding: utf-8 -*-
"""Miscellaneous helpers: runtime type checking, options, history, structs."""

from bbci.misc.check_type import TypeVerdict, check_type, check_type_named
from bbci.misc.errors import (
    DisallowedValue,
    MalformedTypeExpression,
    MissingField,
    OptionError,
    TypeCheckError,
    ValueKindMismatch,
    ValueShapeMismatch,
)
from bbci.misc.history import misc_history
from bbci.misc.options import opt_check_proplist, opt_proplist_to_struct, opt_set_defaults
from bbci.misc.structs import copy_struct

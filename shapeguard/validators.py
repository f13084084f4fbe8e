"""
Built-in leaf guards.

Each guard returns a bool and, when handed a DiagnosticContext, reports a
single message through it on failure.
"""

from __future__ import annotations

import inspect
import math
import re
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, Optional

from .context import DiagnosticContext
from .core import guard, type_guard_error
from .types import UNDEFINED, Guard


def leaf(name: str, expected_type: str, check: Callable[[Any], bool]) -> Guard:
    """
    Build a leaf guard from a plain predicate.

    Usage:
        is_even = leaf("is_even", "even number", lambda x: x % 2 == 0)
    """

    @guard(name, expected_type)
    def check_value(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if check(value):
            return True
        if context is not None:
            context.on_error(type_guard_error(value, context.identifier, expected_type))
        return False

    return check_value


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and not (
        isinstance(x, float) and math.isnan(x)
    )


def _is_sequence(x: Any) -> bool:
    return isinstance(x, (list, tuple))


@guard("is_any", "any")
def is_any(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
    return True


@guard("is_unknown", "unknown")
def is_unknown(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
    return True


is_defined = leaf("is_defined", "defined", lambda x: x is not UNDEFINED)
is_nil = leaf("is_nil", "null", lambda x: x is None or x is UNDEFINED)

is_string = leaf("is_string", "string", lambda x: isinstance(x, str))
is_non_empty_string = leaf(
    "is_non_empty_string",
    "non-empty string",
    lambda x: isinstance(x, str) and x.strip() != "",
)

is_number = leaf("is_number", "number", _is_number)
is_integer = leaf(
    "is_integer",
    "integer",
    lambda x: _is_number(x) and (isinstance(x, int) or x.is_integer()),
)
is_positive_number = leaf(
    "is_positive_number", "positive number", lambda x: _is_number(x) and x > 0
)
is_non_negative_number = leaf(
    "is_non_negative_number",
    "non-negative number",
    lambda x: _is_number(x) and x >= 0,
)

is_boolean = leaf("is_boolean", "boolean", lambda x: isinstance(x, bool))
is_date = leaf("is_date", "date", lambda x: isinstance(x, date))
is_function = leaf("is_function", "function", inspect.isroutine)
is_regex = leaf("is_regex", "RegExp", lambda x: isinstance(x, re.Pattern))
is_error = leaf("is_error", "Error", lambda x: isinstance(x, BaseException))

is_non_null_object = leaf(
    "is_non_null_object", "non-null object", lambda x: isinstance(x, Mapping)
)
is_array = leaf("is_array", "Array", _is_sequence)
is_non_empty_array = leaf(
    "is_non_empty_array", "non-empty Array", lambda x: _is_sequence(x) and len(x) > 0
)

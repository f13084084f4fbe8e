"""
Value rendering for diagnostic messages.
"""

from __future__ import annotations

import inspect
import math
from datetime import date
from typing import Any

from pydantic_core import PydanticSerializationError, to_json

from .types import UNDEFINED


def json_fallback(value: Any) -> Any:
    """Render objects the JSON serializer does not know."""
    if value is UNDEFINED:
        return None
    if inspect.isroutine(value):
        return "function"
    if isinstance(value, BaseException):
        return "Error"
    return repr(value)


def stringify(value: Any) -> str:
    """
    Convert a value to a formatted JSON-like string.

    Never raises. Absent values, routines, exceptions and non-finite floats
    render as fixed tokens rather than through the serializer.
    """
    if value is UNDEFINED:
        return "undefined"

    if isinstance(value, date):
        return value.isoformat()

    if inspect.isroutine(value):
        return "function"

    if isinstance(value, BaseException):
        return "Error"

    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"

    try:
        return to_json(
            value, indent=2, inf_nan_mode="null", fallback=json_fallback
        ).decode()
    except (PydanticSerializationError, ValueError, TypeError, RecursionError):
        return repr(value)

"""
Core helpers shared by leaf guards, combinators and the schema engine.
"""

from __future__ import annotations

from typing import Any, Callable

from .stringify import stringify
from .types import Guard

MAX_INLINE_VALUE_LENGTH = 200


def type_guard_error(value: Any, identifier: str, expected_type: str) -> str:
    """
    Build the canonical mismatch message.

    The rendered value is dropped when it is too long to be useful inline.
    """
    value_string = stringify(value)
    if len(value_string) > MAX_INLINE_VALUE_LENGTH:
        return f'Expected {identifier} to be "{expected_type}"'
    return f'Expected {identifier} ({value_string}) to be "{expected_type}"'


def describe(value: Any, identifier: str) -> str:
    """Identifier followed by the rendered value, when it is short enough."""
    value_string = stringify(value)
    if len(value_string) > MAX_INLINE_VALUE_LENGTH:
        return identifier
    return f"{identifier} ({value_string})"


def guard(
    name: str, expected_type: str | None = None
) -> Callable[[Callable[..., bool]], Guard]:
    """
    Label a guard function with a display name and diagnostic category.

    Usage:
        @guard("is_even", "even number")
        def check(value, context=None): ...
    """

    def decorator(fn: Callable[..., bool]) -> Guard:
        fn.__name__ = name
        fn.__qualname__ = name
        fn.expected_type = expected_type  # type: ignore[attr-defined]
        return fn

    return decorator


def guard_name(fn: Any) -> str:
    """Display name of a guard, as used in union summaries."""
    name = getattr(fn, "__name__", None) or getattr(fn, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(fn).__name__


def expected_type_name(fn: Any) -> str:
    """
    Diagnostic category of a guard.

    An explicit expected_type attribute wins; otherwise an ``is_<name>``
    function name yields ``<name>``.
    """
    expected = getattr(fn, "expected_type", None)
    if expected:
        return expected

    name = getattr(fn, "__name__", "") or ""
    if name.startswith("is_"):
        return name[3:].replace("_", " ")
    return "unknown"

"""
Combinators: functions that take guards and return a new guard.

None of them mutate their inputs, and none keep state between calls.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from .context import DiagnosticContext
from .core import describe, expected_type_name, guard, guard_name, type_guard_error
from .stringify import stringify
from .types import UNDEFINED, BrandRoutine, Err, ErrorMode, Guard
from .validators import is_non_null_object


def strictly_equal(a: Any, b: Any) -> bool:
    """Equality that does not cross types (1 is not True, 1 is not 1.0)."""
    if a is b:
        return True
    return type(a) is type(b) and a == b


def _fails_fast(context: Optional[DiagnosticContext]) -> bool:
    return context is None or context.error_mode is ErrorMode.SINGLE


def is_one_of(*acceptable_values: Any) -> Guard:
    """
    Valid iff the value strictly equals one of the acceptable values.

    Usage:
        is_status = is_one_of("active", "inactive")
    """
    values = tuple(acceptable_values)

    @guard("is_one_of", " | ".join(stringify(v) for v in values))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if any(strictly_equal(value, v) for v in values):
            return True
        if context is not None:
            context.on_error(
                f"{context.identifier} ({stringify(value)}) must be one of following "
                f"values {' | '.join(stringify(v) for v in values)}"
            )
        return False

    return check


def is_one_of_types(*guards: Guard) -> Guard:
    """
    Valid iff at least one guard accepts the value.

    On failure every guard is re-run against a private sink, and the distinct
    reasons are reported under a summary line as one message.
    """
    candidates = tuple(guards)
    names = " | ".join(guard_name(g) for g in candidates)

    @guard("is_one_of_types", names)
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        is_valid = any(g(value, None) for g in candidates)

        if not is_valid and context is not None:
            summary = describe(value, context.identifier)
            messages = [f'Expected {summary} type to match one of "{names}"']

            def collect(error: str) -> None:
                line = f"- {error}"
                if line not in messages:
                    messages.append(line)

            private = context.with_sink(collect)
            if private.error_mode is ErrorMode.JSON:
                private = private.with_mode(ErrorMode.MULTI)
            for g in candidates:
                g(value, private)

            context.on_error("\n".join(messages))

        return is_valid

    return check


def is_array_with_each_item(predicate: Guard) -> Guard:
    """
    Valid iff the value is a list or tuple whose every item passes predicate.

    Items are checked under ``identifier[index]``. Without a context, or in
    single mode, checking stops at the first failing item.
    """

    @guard("is_array", "Array")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not isinstance(value, (list, tuple)):
            if context is not None:
                context.on_error(type_guard_error(value, context.identifier, "Array"))
            return False

        if _fails_fast(context):
            return all(
                predicate(item, context.item(i) if context else None)
                for i, item in enumerate(value)
            )

        results = [predicate(item, context.item(i)) for i, item in enumerate(value)]
        return all(results)

    return check


def is_non_empty_array_with_each_item(predicate: Guard) -> Guard:
    """As is_array_with_each_item, additionally rejecting empty sequences."""
    each_item = is_array_with_each_item(predicate)

    @guard("is_non_empty_array", "non-empty Array")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not each_item(value, context):
            return False
        if len(value) == 0:
            if context is not None:
                context.on_error(
                    type_guard_error(value, context.identifier, "non-empty Array")
                )
            return False
        return True

    return check


def is_object_with_each_item(predicate: Guard) -> Guard:
    """
    Valid iff the value is a mapping whose every value passes predicate.

    Keys are not checked; values are addressed by position, ``identifier[index]``.
    """

    @guard("is_object", "Object")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not isinstance(value, Mapping):
            if context is not None:
                context.on_error(type_guard_error(value, context.identifier, "Object"))
            return False

        items = list(value.values())
        if _fails_fast(context):
            return all(
                predicate(item, context.item(i) if context else None)
                for i, item in enumerate(items)
            )

        results = [predicate(item, context.item(i)) for i, item in enumerate(items)]
        return all(results)

    return check


def is_null_or(predicate: Guard) -> Guard:
    """None passes outright; anything else is delegated unchanged."""

    @guard(f"is_null_or_{guard_name(predicate)}", expected_type_name(predicate))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if value is None:
            return True
        return predicate(value, context)

    return check


def is_undefined_or(predicate: Guard) -> Guard:
    """UNDEFINED (an absent key) passes outright; anything else is delegated."""

    @guard(f"is_undefined_or_{guard_name(predicate)}", expected_type_name(predicate))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if value is UNDEFINED:
            return True
        return predicate(value, context)

    return check


def is_nil_or(predicate: Guard) -> Guard:
    """None and UNDEFINED both pass outright."""

    @guard(f"is_nil_or_{guard_name(predicate)}", expected_type_name(predicate))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if value is None or value is UNDEFINED:
            return True
        return predicate(value, context)

    return check


def is_equal_to(expected_value: Any) -> Guard:
    expected_type = f"equal to {stringify(expected_value)}"

    @guard("is_equal_to", expected_type)
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if strictly_equal(value, expected_value):
            return True
        if context is not None:
            context.on_error(type_guard_error(value, context.identifier, expected_type))
        return False

    return check


def is_enum(enum_cls: type[Enum]) -> Guard:
    """
    Valid for members of enum_cls and for values strictly equal to a member's value.

    Usage:
        class Color(Enum):
            RED = "red"

        is_color = is_enum(Color)
        is_color(Color.RED)  # True
        is_color("red")      # True
    """
    members = tuple(enum_cls)
    by_value = is_one_of(*(m.value for m in members))

    @guard("is_enum", enum_cls.__name__)
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if isinstance(value, enum_cls):
            return True
        return by_value(value, context)

    return check


def is_pattern(pattern: str | re.Pattern[str]) -> Guard:
    """
    Valid iff the value is a string in which pattern is found.

    Non-strings and non-matching strings are reported with different messages.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    @guard("is_pattern", "string")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not isinstance(value, str):
            if context is not None:
                context.on_error(type_guard_error(value, context.identifier, "string"))
            return False

        if compiled.search(value) is None:
            if context is not None:
                context.on_error(
                    f'{describe(value, context.identifier)} does not match pattern '
                    f'"{compiled.pattern}"'
                )
            return False

        return True

    return check


def is_branded(routine: BrandRoutine, name: str = "is_branded") -> Guard:
    """
    Adapt a validation routine to the guard protocol.

    The routine rejects a value by raising an exception or by returning
    Err(reason); any other outcome accepts. No other type check is applied.

    Usage:
        def check_user_id(value):
            if not isinstance(value, int) or value <= 1000:
                raise ValueError("UserId must be an integer greater than 1000")

        is_user_id = is_branded(check_user_id)
    """

    @guard(name, "branded")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        try:
            outcome = routine(value)
        except Exception as e:
            detail = str(e) or type(e).__name__
        else:
            if not isinstance(outcome, Err):
                return True
            detail = str(outcome.error)

        if context is not None:
            context.on_error(
                f"{context.identifier}: branded type validation failed: {detail}"
            )
        return False

    return check


def guard_with_tolerance(
    predicate: Guard, tolerance: Callable[[Any], bool]
) -> Guard:
    """
    Run predicate, then narrow its verdict with tolerance.

    A predicate failure is reported as the predicate reports it. A value the
    predicate accepts but tolerance rejects fails without any report.

    Usage:
        is_small_number = guard_with_tolerance(is_number, lambda x: abs(x) < 1e6)
    """

    @guard(f"{guard_name(predicate)}_with_tolerance", expected_type_name(predicate))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not predicate(value, context):
            return False
        return bool(tolerance(value))

    return check


def tolerate(
    value: Any, predicate: Guard, context: Optional[DiagnosticContext] = None
) -> Any:
    """Run predicate for its diagnostics and hand value back unchanged."""
    predicate(value, context)
    return value


def is_intersection_of(*guards: Guard) -> Guard:
    """Valid iff every guard accepts; stops at the first rejection."""
    members = tuple(guards)

    @guard(
        "is_intersection_of", " & ".join(expected_type_name(g) for g in members)
    )
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        return all(g(value, context) for g in members)

    return check


def is_extension_of(base: Guard, extension: Guard) -> Guard:
    """Valid iff base accepts and then extension accepts."""

    @guard("is_extension_of", expected_type_name(base))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        return base(value, context) and extension(value, context)

    return check


def is_generic(predicate: Guard) -> Guard:
    """Reusable pass-through wrapper around predicate."""

    @guard(guard_name(predicate), expected_type_name(predicate))
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        return predicate(value, context)

    return check


def is_tuple(*guards: Guard) -> Guard:
    """Valid iff the value is a sequence of exactly len(guards) positionally-valid items."""
    members = tuple(guards)
    expected = f"Tuple of length {len(members)}"

    @guard("is_tuple", expected)
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not isinstance(value, (list, tuple)) or len(value) != len(members):
            if context is not None:
                context.on_error(type_guard_error(value, context.identifier, expected))
            return False

        if _fails_fast(context):
            return all(
                g(item, context.item(i) if context else None)
                for i, (g, item) in enumerate(zip(members, value))
            )

        results = [
            g(item, context.item(i)) for i, (g, item) in enumerate(zip(members, value))
        ]
        return all(results)

    return check


def is_partial_of(shape: Any) -> Guard:
    """
    Schema guard in which every declared key may be absent.

    Present keys are still checked against their guards.
    """
    from .schema import SchemaGuard, is_schema

    base = shape if isinstance(shape, SchemaGuard) else is_schema(shape)
    return SchemaGuard({key: is_undefined_or(g) for key, g in base.fields.items()})


def is_pick(base: Guard, *picked_keys: str) -> Guard:
    """
    Valid iff the value is a mapping holding every picked key.

    Only presence is checked. When a key is missing, base is re-run with the
    caller's context so the report carries base's own expectations. If base
    accepts the value anyway, the missing key itself is reported.
    """
    keys = tuple(picked_keys)

    @guard("is_pick", "object")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not is_non_null_object(value, context):
            return False

        for key in keys:
            if key not in value:
                if context is not None and base(value, context):
                    context.on_error(
                        type_guard_error(
                            UNDEFINED, f"{context.identifier}.{key}", "defined"
                        )
                    )
                return False

        return True

    return check


def is_omit(base: Any, *omitted_keys: str) -> Guard:
    """
    Valid iff the value is a mapping holding none of the omitted keys, and
    every other declared key of base that is present passes its guard.
    """
    from .schema import SchemaGuard, is_schema

    schema = base if isinstance(base, SchemaGuard) else is_schema(base)
    keys = tuple(omitted_keys)
    remaining = SchemaGuard(
        {k: is_undefined_or(g) for k, g in schema.fields.items() if k not in keys}
    )

    @guard("is_omit", "object")
    def check(value: Any, context: Optional[DiagnosticContext] = None) -> bool:
        if not is_non_null_object(value, context):
            return False

        present = [key for key in keys if key in value]
        if present:
            if context is not None:
                messages = [
                    type_guard_error(value[key], f"{context.identifier}.{key}", "absent")
                    for key in present
                ]
                if context.error_mode is ErrorMode.SINGLE:
                    messages = messages[:1]
                context.on_error("; ".join(messages))
            return False

        return remaining(value, context)

    return check

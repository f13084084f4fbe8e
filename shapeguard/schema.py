"""
Structural schema engine.

A shape is a mapping of field name to a guard, a nested shape, or a
one-element list wrapping an item shape. Shapes are converted once into
tagged nodes (Leaf, Nested, ArrayOf) and compiled into a SchemaGuard.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

from pydantic import create_model, model_validator

from .combinators import is_array_with_each_item
from .context import DiagnosticContext
from .core import expected_type_name, type_guard_error
from .results import (
    ValidationResult,
    make_error,
    make_result,
    make_tree_node,
    report_validation_result,
)
from .types import UNDEFINED, ErrorMode, Guard

logger = logging.getLogger(__name__)

ROOT_IDENTIFIER = "root"
OBJECT_TYPE = "object"


@dataclass(frozen=True, slots=True)
class Leaf:
    """A field checked by a guard."""

    guard: Guard


@dataclass(frozen=True, slots=True)
class Nested:
    """A field holding an object described by its own shape."""

    shape: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ArrayOf:
    """A field holding a list whose every item matches item."""

    item: Any


SchemaNode = Leaf | Nested | ArrayOf


def to_node(entry: Any) -> SchemaNode:
    """
    Convert a shape entry to a schema node.

    Conversion rules:
        Leaf | Nested | ArrayOf -> pass through
        SchemaGuard -> Leaf (already compiled)
        Mapping -> Nested
        [item] -> ArrayOf(item)
        Callable -> Leaf
    """
    if isinstance(entry, (Leaf, Nested, ArrayOf)):
        return entry

    if isinstance(entry, SchemaGuard):
        return Leaf(entry)

    if isinstance(entry, Mapping):
        return Nested(entry)

    if isinstance(entry, list):
        if len(entry) != 1:
            raise ValueError(
                f"Array shapes take exactly one item shape, got {len(entry)}"
            )
        return ArrayOf(entry[0])

    if callable(entry):
        return Leaf(entry)

    raise TypeError(f"Cannot convert {type(entry).__name__} to a schema node")


def compile_node(node: SchemaNode) -> Guard:
    """Compile a schema node into a guard."""
    match node:
        case Leaf(guard=g):
            return g
        case Nested(shape=shape):
            return SchemaGuard.from_shape(shape)
        case ArrayOf(item=item):
            return is_array_with_each_item(compile_node(to_node(item)))

    raise TypeError(f"Unknown schema node: {node!r}")


def _discard(message: str) -> None:
    pass


def _field_value(value: Mapping[str, Any], key: str) -> Any:
    return value[key] if key in value else UNDEFINED


@dataclass(frozen=True, slots=True, eq=False)
class SchemaGuard:
    """
    Guard for a mapping with declared fields.

    Fields are checked in declaration order. The context's mode decides
    whether checking stops at the first failure (single) or visits every
    field and reports once (multi, json).
    """

    fields: Mapping[str, Guard]
    name: str = "is_schema"
    expected_type: str = OBJECT_TYPE

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_shape(cls, shape: Mapping[str, Any]) -> SchemaGuard:
        fields = {key: compile_node(to_node(entry)) for key, entry in shape.items()}
        logger.debug("Compiled schema with fields: %s", ", ".join(map(str, fields)))
        return cls(fields)

    def __call__(
        self, value: Any, context: Optional[DiagnosticContext] = None
    ) -> bool:
        if context is None:
            return isinstance(value, Mapping) and all(
                g(_field_value(value, key)) for key, g in self.fields.items()
            )

        # The result only lives long enough to be reported
        result = self._evaluate(value, context, snapshot=False)
        report_validation_result(result, context)
        return result.valid

    def validate(
        self, value: Any, context: Optional[DiagnosticContext] = None
    ) -> ValidationResult:
        """
        Validate value without reporting, returning the full result.

        Single mode yields at most one error. Multi and json modes yield one
        error per failing field; json mode also attaches a one-level tree.
        """
        if context is None:
            context = DiagnosticContext(ROOT_IDENTIFIER, _discard)
        return self._evaluate(value, context, snapshot=True)

    def _evaluate(
        self, value: Any, context: DiagnosticContext, snapshot: bool
    ) -> ValidationResult:
        mode = context.error_mode
        with_tree = mode is ErrorMode.JSON

        if not isinstance(value, Mapping):
            result = self._reject_non_object(value, context, with_tree, snapshot)
        elif mode is ErrorMode.SINGLE:
            result = self._validate_fail_fast(value, context, snapshot)
        else:
            result = self._validate_all(value, context, with_tree, snapshot)

        if not result.valid:
            logger.debug(
                "%s failed %s validation with %d error(s)",
                context.identifier,
                mode.value,
                len(result.errors),
            )
        return result

    def _reject_non_object(
        self, value: Any, context: DiagnosticContext, with_tree: bool, snapshot: bool
    ) -> ValidationResult:
        identifier = context.identifier
        error = make_error(
            identifier,
            OBJECT_TYPE,
            value,
            type_guard_error(value, identifier, OBJECT_TYPE),
            snapshot=snapshot,
        )
        tree = None
        if with_tree:
            tree = make_tree_node(
                identifier, False, OBJECT_TYPE, value, snapshot=snapshot
            )
        return make_result(False, [error], tree)

    def _validate_fail_fast(
        self, value: Mapping[str, Any], context: DiagnosticContext, snapshot: bool
    ) -> ValidationResult:
        for key, field_guard in self.fields.items():
            outcome = _check_field(
                value, key, field_guard, context, with_tree=False, snapshot=snapshot
            )
            if not outcome.valid:
                return make_result(False, outcome.errors)
        return make_result(True)

    def _validate_all(
        self,
        value: Mapping[str, Any],
        context: DiagnosticContext,
        with_tree: bool,
        snapshot: bool,
    ) -> ValidationResult:
        # Nested guards report plain text so their messages can be joined
        field_context = context.with_mode(ErrorMode.MULTI)
        outcomes = {
            key: _check_field(
                value, key, field_guard, field_context, with_tree, snapshot
            )
            for key, field_guard in self.fields.items()
        }

        valid = all(o.valid for o in outcomes.values())
        errors = [e for o in outcomes.values() for e in o.errors]
        tree = None
        if with_tree:
            children = {
                key: o.tree for key, o in outcomes.items() if o.tree is not None
            }
            tree = make_tree_node(
                context.identifier,
                valid,
                OBJECT_TYPE,
                value,
                children=children,
                snapshot=snapshot,
            )
        return make_result(valid, errors, tree)


def _check_field(
    value: Mapping[str, Any],
    key: str,
    field_guard: Guard,
    context: DiagnosticContext,
    with_tree: bool,
    snapshot: bool,
) -> ValidationResult:
    """Run one field guard against a private sink and describe the outcome."""
    field_value = _field_value(value, key)
    field_context = context.child(key)
    path = field_context.identifier
    expected = expected_type_name(field_guard)

    messages: list[str] = []
    is_valid = field_guard(field_value, field_context.with_sink(messages.append))

    tree = None
    if with_tree:
        tree = make_tree_node(path, is_valid, expected, field_value, snapshot=snapshot)
    if is_valid:
        return make_result(True, (), tree)

    message = "; ".join(messages) or type_guard_error(field_value, path, expected)
    error = make_error(path, expected, field_value, message, snapshot=snapshot)
    return make_result(False, [error], tree)


def is_schema(shape: Mapping[str, Any] | SchemaGuard) -> SchemaGuard:
    """
    Build a guard from a shape.

    Usage:
        is_user = is_schema({
            "name": is_string,
            "address": {"city": is_string},
            "contacts": [{"kind": is_string, "value": is_string}],
        })
    """
    if isinstance(shape, SchemaGuard):
        return shape
    if not isinstance(shape, Mapping):
        raise TypeError("Schema must be a mapping")
    return SchemaGuard.from_shape(shape)


# Aliases
is_type = is_schema
is_shape = is_schema
is_nested_type = is_schema


def validate(
    value: Any,
    schema: Mapping[str, Any] | Guard,
    *,
    identifier: str = ROOT_IDENTIFIER,
    mode: ErrorMode | str | None = None,
) -> ValidationResult:
    """
    Validate value and return the result instead of reporting it.

    Args:
        value: The value to validate
        schema: A shape mapping or any guard
        identifier: Path used as the root of every error path
        mode: Diagnostic mode; defaults to the ambient validation_context mode

    Usage:
        result = validate({"name": 1}, {"name": is_string}, mode="multi")
        result.valid      # False
        result.errors[0]  # ValidationError(path="root.name", ...)
    """
    target = is_schema(schema) if isinstance(schema, Mapping) else schema
    context = DiagnosticContext(identifier, _discard, mode)

    if isinstance(target, SchemaGuard):
        return target.validate(value, context)

    messages: list[str] = []
    if target(value, context.with_sink(messages.append)):
        return make_result(True)

    expected = expected_type_name(target)
    message = "; ".join(messages) or type_guard_error(value, identifier, expected)
    return make_result(False, [make_error(identifier, expected, value, message)])


def to_pydantic(name: str, schema: Mapping[str, Any] | SchemaGuard) -> type:
    """
    Compile a schema to a Pydantic model.

    The model runs the schema guard in multi mode before field validation and
    rejects the input with every failure message. Fields whose guard accepts
    an absent value are optional with a None default.

    Usage:
        User = to_pydantic("User", {
            "name": is_string,
            "email": is_undefined_or(is_string),
        })
        user = User(name="Alice")
    """
    guard = is_schema(schema)

    fields: dict[str, Any] = {}
    for key, field_guard in guard.fields.items():
        if field_guard(UNDEFINED):
            fields[key] = (Any, None)
        else:
            fields[key] = (Any, ...)

    def check_shape(cls: type, data: Any) -> Any:
        messages: list[str] = []
        if not guard(data, DiagnosticContext(name, messages.append, ErrorMode.MULTI)):
            raise ValueError("; ".join(messages))
        return data

    return create_model(
        name,
        __validators__={"check_shape": model_validator(mode="before")(check_shape)},
        **fields,
    )

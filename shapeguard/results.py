"""
Validation records and the reporter that turns them into error-sink calls.

All builders copy what they are handed, so mutating an argument after the
call, or a field of a returned record, never leaks into the other. Callers that
report a record and drop it at once pass snapshot=False to skip the copy.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic_core import PydanticSerializationError, to_json

from .context import DiagnosticContext
from .stringify import json_fallback, stringify
from .types import UNDEFINED, ErrorMode


def _identity(value: Any) -> Any:
    return value


class GuardError(ValueError):
    """Raised by ValidationResult.raise_if_invalid()."""

    def __init__(self, errors: tuple[ValidationError, ...]):
        self.errors = errors
        super().__init__("; ".join(e.message for e in errors) or "Validation failed")


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One concrete mismatch at one path."""

    path: str
    expected_type: str
    actual_value: Any
    message: str


@dataclass(frozen=True, slots=True)
class ValidationTree:
    """One level of a schema's diagnostic tree."""

    valid: bool
    path: str
    value: Any = UNDEFINED
    expected_type: Optional[str] = None
    children: dict[str, ValidationTree] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Last segment of the path, as used for the serialized root key."""
        return self.path.rsplit(".", 1)[-1] or "root"

    def _entry(self, render: Callable[[Any], Any] = _identity) -> dict[str, Any]:
        entry: dict[str, Any] = {"valid": self.valid}
        if self.value is not UNDEFINED:
            entry["value"] = render(self.value)
        if self.expected_type:
            entry["expectedType"] = self.expected_type
        return entry

    def to_dict(
        self,
        root_key: str | None = None,
        render: Callable[[Any], Any] = _identity,
    ) -> dict[str, Any]:
        """
        Simplified payload: the root keyed by root_key (defaults to the path),
        with one entry per child. Children are never expanded further.

        render is applied to every value in the payload.
        """
        key = root_key if root_key is not None else self.path
        if not self.children:
            return {key: self._entry(render)}
        return {
            key: {
                "valid": self.valid,
                "value": {
                    name: child._entry(render) for name, child in self.children.items()
                },
            }
        }

    def to_json(self, root_key: str | None = None, indent: int | None = 2) -> str:
        try:
            return _dump(self.to_dict(root_key), indent)
        except (PydanticSerializationError, ValueError, TypeError, RecursionError):
            # Values pydantic cannot encode are reported by their message rendering
            return _dump(self.to_dict(root_key, render=stringify), indent)


def _dump(payload: dict[str, Any], indent: int | None) -> str:
    return to_json(
        payload, indent=indent, inf_nan_mode="null", fallback=json_fallback
    ).decode()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one value."""

    valid: bool
    errors: tuple[ValidationError, ...] = ()
    tree: Optional[ValidationTree] = None

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def raise_if_invalid(self) -> None:
        """Raise GuardError listing every error when the result is invalid."""
        if not self.valid:
            raise GuardError(self.errors)


def _snapshot(value: Any) -> Any:
    """Deep copy of value, or value itself when it cannot be copied."""
    try:
        return copy.deepcopy(value)
    except Exception:
        return value


def make_error(
    path: str,
    expected_type: str,
    actual_value: Any,
    message: str,
    *,
    snapshot: bool = True,
) -> ValidationError:
    """Build an error record. snapshot=False keeps actual_value as given."""
    return ValidationError(
        path=path,
        expected_type=expected_type,
        actual_value=_snapshot(actual_value) if snapshot else actual_value,
        message=message,
    )


def make_result(
    valid: bool,
    errors: Iterable[ValidationError] = (),
    tree: Optional[ValidationTree] = None,
) -> ValidationResult:
    return ValidationResult(valid=valid, errors=tuple(errors), tree=tree)


def make_tree_node(
    path: str,
    valid: bool,
    expected_type: Optional[str] = None,
    value: Any = UNDEFINED,
    children: Mapping[str, ValidationTree] | None = None,
    *,
    snapshot: bool = True,
) -> ValidationTree:
    return ValidationTree(
        valid=valid,
        path=path,
        value=_snapshot(value) if snapshot else value,
        expected_type=expected_type,
        children=dict(children or {}),
    )


def combine_results(
    results: Iterable[ValidationResult], path: str = "root"
) -> ValidationResult:
    """Merge results into one whose tree holds each result's tree as a child."""
    results = list(results)
    valid = all(r.valid for r in results)
    errors = [e for r in results for e in r.errors]
    children = {r.tree.key: r.tree for r in results if r.tree is not None}
    tree = make_tree_node(path, valid, children=children)
    return make_result(valid, errors, tree)


def report_validation_result(
    result: ValidationResult, context: Optional[DiagnosticContext]
) -> None:
    """
    Perform the error-sink calls appropriate to the context's mode.

    single -> first message; multi -> all messages joined with "; ";
    json -> the serialized tree (falls back to multi without a tree).
    """
    if result.valid or context is None:
        return

    mode = context.error_mode
    if mode is ErrorMode.JSON and result.tree is not None:
        context.on_error(result.tree.to_json(root_key=context.identifier))
    elif mode is ErrorMode.SINGLE:
        if result.errors:
            context.on_error(result.errors[0].message)
    elif result.errors:
        context.on_error("; ".join(e.message for e in result.errors))

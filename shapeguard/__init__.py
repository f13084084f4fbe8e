"""
shapeguard - composable runtime guards with path-qualified diagnostics.

Usage:
    from shapeguard import DiagnosticContext, is_number, is_schema, is_string

    is_user = is_schema({
        "name": is_string,
        "age": is_number,
        "address": {"city": is_string},
    })

    is_user(data)  # bool only
    is_user(data, DiagnosticContext("user", print, mode="multi"))
"""

from .combinators import (
    guard_with_tolerance,
    is_array_with_each_item,
    is_branded,
    is_enum,
    is_equal_to,
    is_extension_of,
    is_generic,
    is_intersection_of,
    is_nil_or,
    is_non_empty_array_with_each_item,
    is_null_or,
    is_object_with_each_item,
    is_omit,
    is_one_of,
    is_one_of_types,
    is_partial_of,
    is_pattern,
    is_pick,
    is_tuple,
    is_undefined_or,
    tolerate,
)
from .context import DiagnosticContext, default_mode, validation_context
from .core import guard, type_guard_error
from .results import (
    GuardError,
    ValidationError,
    ValidationResult,
    ValidationTree,
    combine_results,
    make_error,
    make_result,
    make_tree_node,
    report_validation_result,
)
from .schema import (
    ArrayOf,
    Leaf,
    Nested,
    SchemaGuard,
    is_nested_type,
    is_schema,
    is_shape,
    is_type,
    to_pydantic,
    validate,
)
from .stringify import stringify
from .types import UNDEFINED, Err, ErrorMode, Guard, Ok
from .validators import (
    is_any,
    is_array,
    is_boolean,
    is_date,
    is_defined,
    is_error,
    is_function,
    is_integer,
    is_nil,
    is_non_empty_array,
    is_non_empty_string,
    is_non_negative_number,
    is_non_null_object,
    is_number,
    is_positive_number,
    is_regex,
    is_string,
    is_unknown,
    leaf,
)

__all__ = [
    # Protocol
    "Guard",
    "UNDEFINED",
    "ErrorMode",
    "Ok",
    "Err",
    "DiagnosticContext",
    "validation_context",
    "default_mode",
    "guard",
    "leaf",
    "type_guard_error",
    "stringify",
    # Results
    "ValidationError",
    "ValidationResult",
    "ValidationTree",
    "GuardError",
    "make_error",
    "make_result",
    "make_tree_node",
    "combine_results",
    "report_validation_result",
    # Schema
    "Leaf",
    "Nested",
    "ArrayOf",
    "SchemaGuard",
    "is_schema",
    "is_type",
    "is_shape",
    "is_nested_type",
    "validate",
    "to_pydantic",
    # Combinators
    "is_one_of",
    "is_one_of_types",
    "is_array_with_each_item",
    "is_non_empty_array_with_each_item",
    "is_object_with_each_item",
    "is_partial_of",
    "is_pick",
    "is_omit",
    "is_branded",
    "is_pattern",
    "guard_with_tolerance",
    "tolerate",
    "is_null_or",
    "is_undefined_or",
    "is_nil_or",
    "is_enum",
    "is_equal_to",
    "is_intersection_of",
    "is_extension_of",
    "is_generic",
    "is_tuple",
    # Leaf guards
    "is_any",
    "is_unknown",
    "is_defined",
    "is_nil",
    "is_string",
    "is_non_empty_string",
    "is_number",
    "is_integer",
    "is_positive_number",
    "is_non_negative_number",
    "is_boolean",
    "is_date",
    "is_function",
    "is_regex",
    "is_error",
    "is_non_null_object",
    "is_array",
    "is_non_empty_array",
]

"""
Type definitions for shapeguard.

Provides the Guard protocol alias, the UNDEFINED sentinel, the diagnostic
ErrorMode, and a minimal Result type (Ok/Err) for branding routines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from .context import DiagnosticContext

T = TypeVar("T")
E = TypeVar("E")


class ErrorMode(Enum):
    """Diagnostic strategies for guard invocations."""

    SINGLE = "single"  # Fail fast, report the first failure
    MULTI = "multi"  # Visit every field, report one combined message
    JSON = "json"  # As multi, report a serialized diagnostic tree


class _Undefined:
    """
    Sentinel for a value that is absent, as opposed to present and None.

    Reading a missing key out of a mapping during validation yields UNDEFINED.
    """

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T = None  # type: ignore[assignment]

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


# Type aliases
Guard = Callable[[Any, "Optional[DiagnosticContext]"], bool]
ErrorSink = Callable[[str], None]
BrandRoutine = Callable[[Any], Any]

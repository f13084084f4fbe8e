"""
Diagnostic context threaded through guard invocations, and the ambient
configuration (default diagnostic mode) it falls back to.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace

from .types import ErrorMode, ErrorSink

# Context variable for the default diagnostic mode
_default_mode: ContextVar[ErrorMode] = ContextVar(
    "default_error_mode", default=ErrorMode.SINGLE
)


def default_mode() -> ErrorMode:
    """Return the diagnostic mode used by contexts that do not set one."""
    return _default_mode.get()


@contextmanager
def validation_context(*, mode: ErrorMode | str = ErrorMode.SINGLE):
    """
    Context manager for validation configuration.

    Args:
        mode: Diagnostic mode applied to every DiagnosticContext created
              without an explicit mode while the block runs.

    Example:
        from shapeguard import DiagnosticContext, is_schema, is_string, validation_context

        is_user = is_schema({"name": is_string, "email": is_string})
        messages = []

        # Single mode: the first failing field is reported
        is_user({}, DiagnosticContext("user", messages.append))

        # Multi mode: every failing field, joined with "; "
        with validation_context(mode="multi"):
            is_user({}, DiagnosticContext("user", messages.append))
    """
    token = _default_mode.set(ErrorMode(mode))
    try:
        yield
    finally:
        _default_mode.reset(token)


@dataclass(frozen=True, slots=True)
class DiagnosticContext:
    """
    Per-call diagnostic configuration.

    identifier is the dotted/bracketed path of the value currently being
    checked, on_error receives human-readable failure messages, and mode
    selects the diagnostic strategy (None defers to default_mode()).
    """

    identifier: str
    on_error: ErrorSink
    mode: ErrorMode | None = None

    def __post_init__(self) -> None:
        if self.mode is not None and not isinstance(self.mode, ErrorMode):
            object.__setattr__(self, "mode", ErrorMode(self.mode))

    @property
    def error_mode(self) -> ErrorMode:
        return self.mode if self.mode is not None else default_mode()

    def child(self, key: object) -> DiagnosticContext:
        """Derive the context for a mapping field."""
        return replace(self, identifier=f"{self.identifier}.{key}")

    def item(self, index: int) -> DiagnosticContext:
        """Derive the context for a sequence element."""
        return replace(self, identifier=f"{self.identifier}[{index}]")

    def with_sink(self, on_error: ErrorSink) -> DiagnosticContext:
        return replace(self, on_error=on_error)

    def with_mode(self, mode: ErrorMode | str) -> DiagnosticContext:
        return replace(self, mode=ErrorMode(mode))

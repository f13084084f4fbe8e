from typing import Any, Callable

import pytest

from shapeguard import DiagnosticContext, is_boolean, is_number, is_schema, is_string


class Sink:
    """Error sink that records every message it receives."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def context(self, identifier: str = "root", mode: Any = None) -> DiagnosticContext:
        return DiagnosticContext(identifier, self, mode)


@pytest.fixture(scope="function")
def sink() -> Sink:
    return Sink()


@pytest.fixture(scope="function")
def make_context(sink: Sink) -> Callable[..., DiagnosticContext]:
    return sink.context


@pytest.fixture(scope="function")
def is_user():
    return is_schema(
        {
            "name": is_string,
            "age": is_number,
            "active": is_boolean,
        }
    )

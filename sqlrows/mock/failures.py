"""Process-wide failure channel for mock setup and usage errors.

Setup mistakes (bad column specs, unknown columns, ...) are not returned to
the caller. They are reported to the installed handler, which by default logs
the message and raises `SetupError`. Tests exercising the error paths install
a capturing handler with `capture_failures()`, which restores the previous
handler on exit.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from sqlrows.shared.exceptions import SetupError
from sqlrows.shared.logging import get_logger

FailureHandler = Callable[[str], None]


def abort_on_failure(message: str) -> None:
    """Default handler: log the message and raise `SetupError`."""
    get_logger().error(message)
    raise SetupError(message)


_handler: FailureHandler = abort_on_failure


def get_failure_handler() -> FailureHandler:
    return _handler


def set_failure_handler(handler: FailureHandler) -> FailureHandler:
    """Install *handler* and return the one it replaces."""
    global _handler
    previous = _handler
    _handler = handler
    return previous


def report_failure(message: str, handler: FailureHandler | None = None) -> None:
    """Send *message* to *handler*, or to the process-wide handler when omitted."""
    if not message:
        raise ValueError("a failure message is required")
    (handler or _handler)(message)


@contextmanager
def failure_handler(handler: FailureHandler) -> Iterator[FailureHandler]:
    """Install *handler* for the duration of the block."""
    previous = set_failure_handler(handler)
    try:
        yield handler
    finally:
        set_failure_handler(previous)


@dataclass(slots=True)
class FailureRecorder:
    """Handler that records messages instead of aborting."""

    messages: list[str] = field(default_factory=list)

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()


@contextmanager
def capture_failures() -> Iterator[FailureRecorder]:
    """Record failures for the duration of the block instead of raising."""
    recorder = FailureRecorder()
    with failure_handler(recorder):
        yield recorder

from __future__ import annotations

import pytest

from sqlrows.mock import failures
from sqlrows.mock.failures import (
    FailureRecorder,
    abort_on_failure,
    capture_failures,
    failure_handler,
    get_failure_handler,
    report_failure,
    set_failure_handler,
)
from sqlrows.shared.exceptions import SetupError


def test_default_handler_logs_and_raises(capfd) -> None:
    assert get_failure_handler() is abort_on_failure

    with pytest.raises(SetupError, match="column spec missing required 'name'"):
        report_failure("column spec missing required 'name': type=int")

    captured = capfd.readouterr()
    assert "column spec missing required 'name'" in captured.err


def test_capture_failures_restores_previous_handler() -> None:
    original = get_failure_handler()

    with capture_failures() as recorder:
        report_failure("first")
        report_failure("second")
        assert get_failure_handler() is recorder

    assert recorder.messages == ["first", "second"]
    assert recorder.last == "second"
    assert get_failure_handler() is original


def test_failure_handler_restores_on_error() -> None:
    original = get_failure_handler()
    recorder = FailureRecorder()

    with pytest.raises(RuntimeError):
        with failure_handler(recorder):
            raise RuntimeError("boom")

    assert get_failure_handler() is original


def test_explicit_handler_bypasses_process_slot() -> None:
    recorder = FailureRecorder()

    report_failure("local only", recorder)

    assert recorder.messages == ["local only"]


def test_set_failure_handler_returns_previous() -> None:
    recorder = FailureRecorder()
    previous = set_failure_handler(recorder)
    try:
        assert failures.get_failure_handler() is recorder
    finally:
        set_failure_handler(previous)


def test_empty_message_rejected() -> None:
    with pytest.raises(ValueError):
        report_failure("", FailureRecorder())

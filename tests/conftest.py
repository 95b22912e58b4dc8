"""Shared pytest fixtures.

`failures` swaps the process-wide failure handler for a recorder so setup
errors can be asserted on instead of aborting the test; the previous handler
is restored afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sqlrows.mock.failures import FailureRecorder, capture_failures
from sqlrows.shared import paths


@pytest.fixture()
def failures() -> Iterator[FailureRecorder]:
    with capture_failures() as recorder:
        yield recorder


@pytest.fixture()
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config discovery at an empty temp directory and clear env overrides."""

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv(paths.CONFIG_DIR_ENV, str(config_dir))
    for key in (paths.CONFIG_FILE_ENV, "SQLROWS_DIALECT", "SQLROWS_COLUMN_WIDENING", "SQLROWS_VERBOSE"):
        monkeypatch.delenv(key, raising=False)
    return config_dir

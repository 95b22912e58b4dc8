"""Mockable SQL result sets for testing code without a live database."""

from __future__ import annotations

from sqlrows.mock import (
    Dialect,
    MockRowSet,
    SemanticType,
    capture_failures,
    failure_handler,
    load_fixture,
    new_mock_row_set,
)
from sqlrows.rowset import ColumnType, CursorRowSet, Ref, RowSet

__all__ = [
    "ColumnType",
    "CursorRowSet",
    "Dialect",
    "MockRowSet",
    "Ref",
    "RowSet",
    "SemanticType",
    "capture_failures",
    "failure_handler",
    "load_fixture",
    "new_mock_row_set",
]

"""In-memory mock of the RowSet contract."""

from .failures import (
    FailureRecorder,
    capture_failures,
    failure_handler,
    get_failure_handler,
    set_failure_handler,
)
from .fixtures import build_fixture, load_fixture
from .registry import Dialect, SemanticType, TypeDefaults
from .rowset import MockRowSet, new_mock_row_set
from .types import ColumnDescriptor, MockColumnType

__all__ = [
    "ColumnDescriptor",
    "Dialect",
    "FailureRecorder",
    "MockColumnType",
    "MockRowSet",
    "SemanticType",
    "TypeDefaults",
    "build_fixture",
    "capture_failures",
    "failure_handler",
    "get_failure_handler",
    "load_fixture",
    "new_mock_row_set",
    "set_failure_handler",
]

"""The RowSet read contract and its cursor-backed implementation."""

from .contract import ColumnType, Ref, RowSet
from .cursor_adapter import CursorColumnType, CursorRowSet

__all__ = ["ColumnType", "CursorColumnType", "CursorRowSet", "Ref", "RowSet"]

"""Append-only storage of column descriptors and rows."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlrows.shared.exceptions import ColumnSpecError, ColumnWideningError, UnknownColumnError

from .types import ColumnDescriptor

COLUMN_WIDENING_FORBID = "forbid"
COLUMN_WIDENING_PAD = "pad"


class RowStore:
    """Ordered descriptors, a case-insensitive name index and positionally aligned rows.

    Columns and rows are only ever appended. Methods raise `SetupError`
    subclasses; routing them to the failure channel is the caller's job.
    """

    def __init__(self, *, column_widening: str = COLUMN_WIDENING_FORBID) -> None:
        if column_widening not in (COLUMN_WIDENING_FORBID, COLUMN_WIDENING_PAD):
            raise ValueError(f"unsupported column widening policy: {column_widening}")
        self.column_widening = column_widening
        self._descriptors: list[ColumnDescriptor] = []
        self._index: dict[str, int] = {}
        self._rows: list[list[Any]] = []

    @property
    def descriptors(self) -> Sequence[ColumnDescriptor]:
        return tuple(self._descriptors)

    @property
    def names(self) -> list[str]:
        return [descriptor.name for descriptor in self._descriptors]

    @property
    def width(self) -> int:
        return len(self._descriptors)

    def __len__(self) -> int:
        return len(self._rows)

    def row(self, index: int) -> Sequence[Any]:
        return self._rows[index]

    def position_of(self, name: str) -> int | None:
        return self._index.get(name.lower())

    def append_column(self, descriptor: ColumnDescriptor) -> int:
        """Append *descriptor* and return its position."""
        if descriptor.key in self._index:
            raise ColumnSpecError(f"duplicate column name in mock row set: {descriptor.name}")
        if self._rows and self.column_widening == COLUMN_WIDENING_FORBID:
            raise ColumnWideningError(
                f"cannot add column {descriptor.name} after {len(self._rows)} row(s) were added"
            )

        position = len(self._descriptors)
        self._index[descriptor.key] = position
        self._descriptors.append(descriptor)
        # Existing rows gain a placeholder slot; its value is unspecified.
        for row in self._rows:
            if len(row) < position + 1:
                row.extend([None] * (position + 1 - len(row)))
        return position

    def append_mapping(self, values: Mapping[str, Any]) -> None:
        """Append a row built from column name -> value (names match ignoring case)."""
        row: list[Any] = [None] * len(self._descriptors)
        for name, value in values.items():
            position = self._index.get(name.lower())
            if position is None:
                raise UnknownColumnError(f"column {name} does not exist")
            row[position] = value
        self._rows.append(row)

    def append_values(self, values: Sequence[Any]) -> None:
        """Append a row from positional values, padded or cut to the column count."""
        width = len(self._descriptors)
        row = list(values[:width])
        row.extend([None] * (width - len(row)))
        self._rows.append(row)

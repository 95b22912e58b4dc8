"""`RowSet` over a PEP 249 (DB-API 2.0) cursor."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlrows.shared.exceptions import (
    DestinationCountError,
    DestinationTypeError,
    NoMoreRowsError,
    ScanNotPositionedError,
)

from .contract import NO_MORE_ROWS, SCAN_WITHOUT_NEXT, ColumnType, Ref


class CursorColumnType:
    """`ColumnType` view over one entry of ``cursor.description``.

    The seven-item description sequence is
    ``(name, type_code, display_size, internal_size, precision, scale, null_ok)``;
    drivers may leave any item but the name as None.
    """

    __slots__ = ("_description",)

    def __init__(self, description: Sequence[Any]) -> None:
        self._description = tuple(description) + (None,) * (7 - len(description))

    def database_type_name(self) -> str:
        type_code = self._description[1]
        if type_code is None:
            return ""
        return getattr(type_code, "__name__", None) or str(type_code)

    def decimal_size(self) -> tuple[int, int, bool]:
        precision, scale = self._description[4], self._description[5]
        return precision or 0, scale or 0, precision is not None or scale is not None

    def length(self) -> tuple[int, bool]:
        internal_size = self._description[3]
        return internal_size or 0, internal_size is not None

    def name(self) -> str:
        return str(self._description[0])

    def nullable(self) -> tuple[bool, bool]:
        null_ok = self._description[6]
        return bool(null_ok), null_ok is not None

    def scan_type(self) -> Any:
        type_code = self._description[1]
        return type_code if isinstance(type_code, type) else object


class CursorRowSet:
    """Forward the `RowSet` contract to an executed DB-API cursor.

    Fetch errors are kept and reported by `err()`, and `next()` returns False.
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._current: Sequence[Any] | None = None
        self._started = False
        self._exhausted = False
        self._err: BaseException | None = None

    def close(self) -> None:
        self._cursor.close()

    def column_types(self) -> list[ColumnType]:
        return [CursorColumnType(entry) for entry in self._cursor.description or ()]

    def columns(self) -> list[str]:
        return [entry[0] for entry in self._cursor.description or ()]

    def err(self) -> BaseException | None:
        return self._err

    def next(self) -> bool:
        if self._exhausted:
            return False
        self._started = True
        try:
            row = self._cursor.fetchone()
        except Exception as exc:
            self._err = exc
            row = None
        if row is None:
            self._current = None
            self._exhausted = True
            return False
        self._current = row
        return True

    def next_result_set(self) -> bool:
        nextset = getattr(self._cursor, "nextset", None)
        if nextset is None:
            return False
        if nextset():
            self._current = None
            self._started = False
            self._exhausted = False
            return True
        return False

    def scan(self, *dest: Ref[Any]) -> None:
        if self._exhausted:
            raise NoMoreRowsError(NO_MORE_ROWS)
        if not self._started or self._current is None:
            raise ScanNotPositionedError(SCAN_WITHOUT_NEXT)

        row = self._current
        if len(dest) != len(row):
            raise DestinationCountError(
                f"destination length {len(dest)} does not match row length {len(row)}"
            )
        for position, target in enumerate(dest):
            if not isinstance(target, Ref):
                raise DestinationTypeError(
                    f"destination {position} is {type(target).__name__}, not a Ref"
                )
        for target, value in zip(dest, row):
            target.value = value

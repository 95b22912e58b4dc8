"""The read contract shared by mock and cursor-backed result sets.

Code under test depends only on `RowSet` and `ColumnType`, so a test can hand
it a `MockRowSet` while production hands it a `CursorRowSet`.

Values are delivered through `Ref` holders::

    ident, label = Ref(int), Ref()
    while rows.next():
        rows.scan(ident, label)
        print(ident.value, label.value)
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

SCAN_WITHOUT_NEXT = "sql: Scan called without calling Next"
NO_MORE_ROWS = "no more rows"


class Ref(Generic[T]):
    """Scan destination: a mutable slot, optionally declared for one Python type.

    A `Ref` built without a kind accepts any value.
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind: type[T] | None = None, value: T | None = None) -> None:
        self.kind = kind
        self.value = value

    def accepts(self, scan_type: Any) -> bool:
        """Return True when a value of *scan_type* may be written into this slot."""
        return self.kind is None or self.kind is scan_type

    def __repr__(self) -> str:
        kind = self.kind.__name__ if self.kind is not None else "any"
        return f"Ref[{kind}]({self.value!r})"


@runtime_checkable
class ColumnType(Protocol):
    """Per-column metadata view."""

    def database_type_name(self) -> str: ...

    def decimal_size(self) -> tuple[int, int, bool]: ...

    def length(self) -> tuple[int, bool]: ...

    def name(self) -> str: ...

    def nullable(self) -> tuple[bool, bool]: ...

    def scan_type(self) -> Any: ...


@runtime_checkable
class RowSet(Protocol):
    """Forward-only result set.

    `scan` raises `sqlrows.shared.exceptions.ScanError` subclasses; every other
    method always succeeds.
    """

    def close(self) -> None: ...

    def column_types(self) -> list[ColumnType]: ...

    def columns(self) -> list[str]: ...

    def err(self) -> BaseException | None: ...

    def next(self) -> bool: ...

    def next_result_set(self) -> bool: ...

    def scan(self, *dest: Ref[Any]) -> None: ...

"""Mock `RowSet` backed by an in-memory `RowStore`."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlrows.rowset.contract import NO_MORE_ROWS, SCAN_WITHOUT_NEXT, ColumnType, Ref
from sqlrows.shared.exceptions import (
    DestinationCountError,
    DestinationTypeError,
    NoMoreRowsError,
    ScanNotPositionedError,
    SetupError,
)
from sqlrows.shared.logging import Logger, get_logger

from . import registry
from .failures import FailureHandler, report_failure
from .registry import Dialect
from .spec_parser import parse_column_spec
from .store import COLUMN_WIDENING_FORBID, RowStore
from .types import ColumnDescriptor, MockColumnType


class MockRowSet:
    """Result set built from column specs and pre-loaded rows.

    Setup problems (bad specs, unknown columns) go to the failure handler,
    either *on_failure* or the process-wide one. Scan problems raise
    `ScanError` subclasses, exactly as `CursorRowSet` does.
    """

    def __init__(
        self,
        specs: Iterable[str],
        dialect: Dialect | str,
        *,
        on_failure: FailureHandler | None = None,
        logger: Logger | None = None,
        column_widening: str = COLUMN_WIDENING_FORBID,
    ) -> None:
        self._on_failure = on_failure
        self._logger = logger or get_logger()
        self._store = RowStore(column_widening=column_widening)
        self._index = 0
        self._exhausted = False
        self._err: BaseException | None = None
        self.has_next_result_set = False

        try:
            self.dialect = Dialect.parse(dialect)
        except SetupError as exc:
            # Keep the instance usable (and empty) when a capturing handler returns.
            self.dialect = Dialect.SNOWFLAKE
            self._fail(exc)
            return

        for spec in specs:
            if not self.add_column(spec):
                break

    # -- setup -----------------------------------------------------------------

    def add_column(self, spec: str) -> bool:
        """Parse *spec* and append the column; returns False when setup failed."""
        try:
            descriptor = parse_column_spec(spec, self.dialect)
            self._store.append_column(descriptor)
        except SetupError as exc:
            self._fail(exc)
            return False
        self._logger.debug(
            f"mock column {descriptor.name}: {descriptor.semantic_type.value}"
            f"{' (nullable)' if descriptor.nullable else ''} -> {descriptor.native_type}"
        )
        return True

    def add(self, row: Mapping[str, Any]) -> None:
        """Append a row given as column name -> value; missing columns are None."""
        try:
            self._store.append_mapping(row)
        except SetupError as exc:
            self._fail(exc)

    def add_row(self, values: Sequence[Any]) -> None:
        """Append a row given positionally."""
        self._store.append_values(values)

    @property
    def descriptors(self) -> Sequence[ColumnDescriptor]:
        return self._store.descriptors

    @property
    def row_count(self) -> int:
        return len(self._store)

    @property
    def position(self) -> int:
        """Cursor position: 0 before the first row, row_count + 1 once exhausted."""
        if self._exhausted:
            return len(self._store) + 1
        return self._index

    def _fail(self, exc: SetupError) -> None:
        report_failure(str(exc), self._on_failure)

    # -- RowSet contract ---------------------------------------------------------

    def close(self) -> None:
        return None

    def column_types(self) -> list[ColumnType]:
        return [MockColumnType(descriptor) for descriptor in self._store.descriptors]

    def columns(self) -> list[str]:
        return self._store.names

    def err(self) -> BaseException | None:
        return self._err

    def next(self) -> bool:
        if self._index < len(self._store):
            self._index += 1
            self._exhausted = False
            return True
        self._exhausted = True
        return False

    def next_result_set(self) -> bool:
        if self.has_next_result_set:
            self.has_next_result_set = False
            return True
        return False

    def scan(self, *dest: Ref[Any]) -> None:
        if self._exhausted:
            raise NoMoreRowsError(NO_MORE_ROWS)
        if self._index == 0:
            raise ScanNotPositionedError(SCAN_WITHOUT_NEXT)

        row = self._store.row(self._index - 1)
        if len(dest) != len(row):
            raise DestinationCountError(
                f"destination length {len(dest)} does not match row length {len(row)}"
            )

        descriptors = self._store.descriptors
        for position, (target, value) in enumerate(zip(dest, row)):
            self._check_destination(descriptors[position], position, target, value)
        for target, value in zip(dest, row):
            target.value = value

    def _check_destination(
        self, descriptor: ColumnDescriptor, position: int, target: Any, value: Any
    ) -> None:
        if not isinstance(target, Ref):
            raise DestinationTypeError(
                f"destination {position} for column {descriptor.name} is {type(target).__name__}, not a Ref"
            )
        if descriptor.nullable:
            return
        expected = registry.scan_type(descriptor.semantic_type)
        if not target.accepts(expected):
            raise DestinationTypeError(
                f"destination {position} for column {descriptor.name} holds "
                f"{target.kind.__name__}, column scans as {expected.__name__}"
            )
        if not _value_fits(value, expected):
            raise DestinationTypeError(
                f"column {descriptor.name} stores {type(value).__name__}, "
                f"which cannot be scanned as {expected.__name__}"
            )


def _value_fits(value: Any, expected: type) -> bool:
    # bool is an int subclass but only fits bool columns.
    if isinstance(value, bool) and expected is not bool:
        return False
    return isinstance(value, expected)


def new_mock_row_set(specs: Iterable[str], dialect: Dialect | str, **kwargs: Any) -> MockRowSet:
    """Build a `MockRowSet`; see the class for keyword arguments."""
    return MockRowSet(specs, dialect, **kwargs)

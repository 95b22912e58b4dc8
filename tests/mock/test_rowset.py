from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from sqlrows.mock.failures import FailureRecorder
from sqlrows.mock.registry import Dialect
from sqlrows.mock.rowset import MockRowSet, new_mock_row_set
from sqlrows.mock.types import MockColumnType
from sqlrows.rowset.contract import ColumnType, Ref, RowSet
from sqlrows.shared.exceptions import (
    DestinationCountError,
    DestinationTypeError,
    NoMoreRowsError,
    ScanNotPositionedError,
    SetupError,
)

NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def _people() -> MockRowSet:
    rows = MockRowSet(
        ["name=ID;type=int64", "name=NAME;type=string", "name=TS;type=*timestamp"],
        Dialect.SNOWFLAKE,
    )
    rows.add({"ID": 1, "NAME": "Test1", "TS": NOW})
    rows.add({"id": 2, "name": "Test2", "ts": None})
    return rows


def test_mock_satisfies_contract() -> None:
    rows = _people()

    assert isinstance(rows, RowSet)
    assert all(isinstance(column_type, ColumnType) for column_type in rows.column_types())


def test_snowflake_columns_and_defaults() -> None:
    rows = new_mock_row_set(["name=ID;type=int64", "name=NAME;type=string"], "snowflake")

    assert rows.columns() == ["ID", "NAME"]
    id_type, name_type = rows.column_types()
    assert id_type.database_type_name() == "BIGINT"
    assert id_type.length() == (0, False)
    assert id_type.scan_type() is int
    assert name_type.database_type_name() == "VARCHAR"
    assert name_type.length() == (16777216, True)
    assert name_type.scan_type() is str


def test_postgres_nullable_timestamp() -> None:
    rows = MockRowSet(["name=TS;type=*timestamp"], Dialect.POSTGRES)

    (column_type,) = rows.column_types()
    assert column_type.nullable() == (True, True)
    assert column_type.database_type_name() == "TIMESTAMP WITH TIME ZONE"
    assert column_type.scan_type() == Optional[datetime]


def test_non_nullable_reports_known_not_null() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.MSSQL)

    assert rows.column_types()[0].nullable() == (False, True)


def test_column_type_names_preserve_case() -> None:
    rows = MockRowSet(
        ["name=UserID;type=int64", "name=FullName;type=string", "name=last_updated;type=*timestamp"],
        Dialect.POSTGRES,
    )

    assert [column_type.name() for column_type in rows.column_types()] == [
        "UserID",
        "FullName",
        "last_updated",
    ]


def test_decimal_size() -> None:
    rows = MockRowSet(
        [
            "name=Price;type=float64;precision=10;scale=2",
            "name=Amount;type=float64",
            "name=ID;type=int64",
        ],
        Dialect.SNOWFLAKE,
    )

    price, amount, ident = rows.column_types()
    assert price.decimal_size() == (10, 2, True)
    assert amount.decimal_size() == (0, 0, False)
    assert ident.decimal_size() == (0, 0, False)


def test_length_override_and_defaults() -> None:
    rows = MockRowSet(
        ["name=NAME;type=string;length=64", "name=DESCRIPTION;type=string", "name=ID;type=int64"],
        Dialect.SNOWFLAKE,
    )

    name, description, ident = rows.column_types()
    assert name.length() == (64, True)
    assert description.length() == (16777216, True)
    assert ident.length() == (0, False)


def test_database_type_name_override() -> None:
    rows = MockRowSet(
        ["name=ID;type=int64", "name=NAME;type=string", "name=TS;type=*timestamp;dbType=TIMESTAMP_NTZ"],
        Dialect.SNOWFLAKE,
    )

    assert [column_type.database_type_name() for column_type in rows.column_types()] == [
        "BIGINT",
        "VARCHAR",
        "TIMESTAMP_NTZ",
    ]


def test_column_types_are_mock_views_in_declaration_order() -> None:
    rows = _people()

    column_types = rows.column_types()
    assert len(column_types) == 3
    assert all(isinstance(column_type, MockColumnType) for column_type in column_types)
    assert [ct.descriptor.name for ct in column_types] == rows.columns()
    assert rows.column_types()[0].descriptor == column_types[0].descriptor


def test_add_and_scan_walks_rows_in_order() -> None:
    rows = _people()
    ident, name, ts = Ref(int), Ref(str), Ref()

    assert rows.next() is True
    rows.scan(ident, name, ts)
    assert (ident.value, name.value, ts.value) == (1, "Test1", NOW)

    assert rows.next() is True
    rows.scan(ident, name, ts)
    assert (ident.value, name.value, ts.value) == (2, "Test2", None)

    assert rows.next() is False
    with pytest.raises(NoMoreRowsError, match="no more rows"):
        rows.scan(ident, name, ts)


def test_next_is_idempotent_once_exhausted() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add_row([1])
    rows.add_row([2])

    results = [rows.next() for _ in range(5)]

    assert results == [True, True, False, False, False]
    assert rows.position == rows.row_count + 1


def test_empty_row_set_is_exhausted_immediately() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)

    assert rows.next() is False
    with pytest.raises(NoMoreRowsError):
        rows.scan(Ref(int))


def test_scan_without_next() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add({"ID": 42})
    ident = Ref(int)

    with pytest.raises(ScanNotPositionedError) as excinfo:
        rows.scan(ident)
    assert str(excinfo.value) == "sql: Scan called without calling Next"
    assert rows.position == 0

    assert rows.next() is True
    rows.scan(ident)
    assert ident.value == 42
    assert rows.next() is False


def test_rows_added_during_iteration_extend_it() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add_row([1])
    ident = Ref(int)

    assert rows.next() is True
    rows.add_row([2])
    assert rows.next() is True
    rows.scan(ident)
    assert ident.value == 2
    assert rows.next() is False


def test_rows_added_after_exhaustion_are_not_skipped() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add_row([1])
    ident = Ref(int)
    assert rows.next() is True
    assert rows.next() is False

    rows.add_row([2])
    rows.add_row([3])
    with pytest.raises(NoMoreRowsError):
        rows.scan(ident)

    assert rows.next() is True
    rows.scan(ident)
    assert ident.value == 2
    assert rows.next() is True
    rows.scan(ident)
    assert ident.value == 3
    assert rows.next() is False


def test_scan_destination_count_mismatch() -> None:
    rows = _people()
    rows.next()

    with pytest.raises(DestinationCountError, match="destination length 2 does not match row length 3"):
        rows.scan(Ref(), Ref())


def test_scan_rejects_incompatible_destination_for_non_nullable_column() -> None:
    rows = _people()
    rows.next()
    ident, name, ts = Ref(str), Ref(str), Ref()

    with pytest.raises(DestinationTypeError, match="column ID holds str, column scans as int"):
        rows.scan(ident, name, ts)
    # Nothing is written when any destination is rejected.
    assert name.value is None


def test_scan_rejects_non_ref_destination() -> None:
    rows = _people()
    rows.next()

    with pytest.raises(DestinationTypeError, match="not a Ref"):
        rows.scan([], Ref(), Ref())


def test_nullable_column_accepts_any_ref() -> None:
    rows = MockRowSet(["name=KEY;type=*uuid", "name=N;type=*int32"], Dialect.POSTGRES)
    key = uuid.uuid4()
    rows.add({"KEY": key})
    target_key, target_n = Ref(str), Ref(int, value=7)

    rows.next()
    rows.scan(target_key, target_n)

    assert target_key.value == key
    assert target_n.value is None


def test_untyped_ref_accepts_any_column() -> None:
    rows = MockRowSet(["name=FLAG;type=bool", "name=C;type=complex128"], Dialect.MSSQL)
    rows.add_row([True, 1 + 2j])
    flag, number = Ref(), Ref()

    rows.next()
    rows.scan(flag, number)

    assert flag.value is True
    assert number.value == 1 + 2j


def test_bool_column_rejects_int_ref() -> None:
    rows = MockRowSet(["name=FLAG;type=bool"], Dialect.MSSQL)
    rows.add_row([True])
    rows.next()

    with pytest.raises(DestinationTypeError):
        rows.scan(Ref(int))


def test_next_result_set_fires_once_per_flag() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add({"ID": 1})
    rows.add({"ID": 2})

    assert rows.next_result_set() is False
    rows.has_next_result_set = True
    assert rows.next_result_set() is True
    assert rows.next_result_set() is False

    ident = Ref(int)
    seen = []
    while rows.next():
        rows.scan(ident)
        seen.append(ident.value)
    assert seen == [1, 2]


def test_err_and_close() -> None:
    rows = _people()

    assert rows.err() is None
    assert rows.close() is None


def test_unknown_key_reports_through_failure_channel(failures: FailureRecorder) -> None:
    rows = MockRowSet(["name=ID;type=int;colour=blue"], Dialect.SNOWFLAKE)

    assert failures.messages == ["unknown keyword in column spec: colour"]
    assert rows.columns() == []


def test_unknown_key_aborts_by_default() -> None:
    with pytest.raises(SetupError, match="unknown keyword in column spec: colour"):
        MockRowSet(["name=ID;type=int;colour=blue"], Dialect.SNOWFLAKE)


@pytest.mark.parametrize(
    "specs, dialect, message",
    [
        (["type=int"], Dialect.SNOWFLAKE, "column spec missing required 'name'"),
        (["name=ID"], Dialect.POSTGRES, "column spec missing required 'type'"),
        (["name=ID;type=int;length=abc"], Dialect.MSSQL, "invalid length in column spec"),
        (["name=ID;type=int", "name=id;type=string"], Dialect.SNOWFLAKE, "duplicate column name in mock row set"),
        (["name=ID;type=decimal"], Dialect.SNOWFLAKE, "unsupported type: decimal"),
        (["name=ID;type=int"], "oracle", "unknown database dialect: oracle"),
    ],
)
def test_setup_errors(failures: FailureRecorder, specs: list[str], dialect: Dialect | str, message: str) -> None:
    MockRowSet(specs, dialect)

    assert len(failures.messages) == 1
    assert message in failures.messages[0]


def test_setup_stops_after_first_failure(failures: FailureRecorder) -> None:
    rows = MockRowSet(["name=A;type=int", "name=B", "name=C;type=int"], Dialect.SNOWFLAKE)

    assert len(failures.messages) == 1
    assert rows.columns() == ["A"]


def test_add_unknown_column(failures: FailureRecorder) -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.POSTGRES)

    rows.add({"XYZ": 123})

    assert failures.last == "column XYZ does not exist"
    assert rows.row_count == 0


def test_instance_handler_overrides_process_handler(failures: FailureRecorder) -> None:
    local = FailureRecorder()

    MockRowSet(["name=ID"], Dialect.SNOWFLAKE, on_failure=local)

    assert failures.messages == []
    assert local.messages == ["column spec missing required 'type': name=ID"]


def test_add_column_after_rows(failures: FailureRecorder) -> None:
    rows = MockRowSet(["name=A;type=int"], Dialect.SNOWFLAKE)
    rows.add_row([1])

    assert rows.add_column("name=B;type=int") is False
    assert "cannot add column B" in failures.last


def test_add_column_after_rows_with_padding() -> None:
    rows = MockRowSet(["name=A;type=int"], Dialect.SNOWFLAKE, column_widening="pad")
    rows.add_row([1])

    assert rows.add_column("name=B;type=*int") is True
    rows.add({"A": 2, "B": 3})

    a, b = Ref(int), Ref()
    rows.next()
    rows.scan(a, b)
    assert (a.value, b.value) == (1, None)
    rows.next()
    rows.scan(a, b)
    assert (a.value, b.value) == (2, 3)


def test_parsed_columns_are_logged_in_verbose_mode(capfd) -> None:
    from sqlrows.shared.logging import get_logger

    MockRowSet(["name=TS;type=*timestamp"], Dialect.POSTGRES, logger=get_logger(verbose=True))

    captured = capfd.readouterr()
    assert "mock column TS: timestamp (nullable) -> TIMESTAMP WITH TIME ZONE" in captured.err


def test_scan_rejects_missing_value_in_non_nullable_column() -> None:
    rows = MockRowSet(["name=ID;type=int64", "name=NAME;type=string"], Dialect.SNOWFLAKE)
    rows.add({"NAME": "x"})
    rows.next()
    ident, name = Ref(int), Ref(str)

    with pytest.raises(DestinationTypeError, match="column ID stores NoneType, which cannot be scanned as int"):
        rows.scan(ident, name)
    assert name.value is None


@pytest.mark.parametrize("stored", ["abc", True, 1.5])
def test_scan_rejects_stored_value_of_wrong_type(stored: object) -> None:
    rows = MockRowSet(["name=ID;type=int64"], Dialect.SNOWFLAKE)
    rows.add({"ID": stored})
    rows.next()
    ident = Ref(int)

    with pytest.raises(DestinationTypeError, match="column ID stores"):
        rows.scan(ident)
    assert ident.value is None


def test_untyped_ref_still_checks_non_nullable_value() -> None:
    rows = MockRowSet(["name=ID;type=int"], Dialect.SNOWFLAKE)
    rows.add_row([])
    rows.next()

    with pytest.raises(DestinationTypeError):
        rows.scan(Ref())

"""Output rendering helpers for sqlrows-mock."""

from __future__ import annotations

import json
import sys
from typing import IO, Any, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from sqlrows.mock.registry import Dialect, SemanticType, native_type_name, type_defaults
from sqlrows.rowset.contract import ColumnType


def render_column_types(
    column_types: Sequence[ColumnType],
    *,
    output_format: str,
    stream: IO[str] | None = None,
) -> None:
    """Render the metadata of *column_types* as a table or JSON."""
    output_stream = stream or sys.stdout
    records = [_column_record(column_type) for column_type in column_types]

    if output_format == "json":
        json.dump(records, output_stream, indent=2)
        output_stream.write("\n")
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    for header in ("Name", "DB Type", "Scan Type", "Nullable", "Length", "Precision", "Scale"):
        table.add_column(header, style="bold" if header == "Name" else None)
    for record in records:
        table.add_row(
            record["name"],
            record["database_type"],
            record["scan_type"],
            "yes" if record["nullable"] else "no",
            _optional(record["length"]),
            _optional(record["precision"]),
            _optional(record["scale"]),
        )
    _console(output_stream).print(table)


def render_type_table(
    dialect: Dialect,
    *,
    output_format: str,
    stream: IO[str] | None = None,
) -> None:
    """Render the semantic -> native type mapping for *dialect* with its defaults."""
    output_stream = stream or sys.stdout
    records = []
    for semantic_type in SemanticType:
        native = native_type_name(dialect, semantic_type)
        defaults = type_defaults(dialect, native)
        records.append(
            {
                "type": semantic_type.value,
                "database_type": native,
                "length": defaults.length,
                "precision": defaults.precision,
                "scale": defaults.scale,
            }
        )

    if output_format == "json":
        json.dump({"dialect": dialect.value, "types": records}, output_stream, indent=2)
        output_stream.write("\n")
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold", title=f"{dialect.value} types")
    for header in ("Type", "DB Type", "Length", "Precision", "Scale"):
        table.add_column(header)
    for record in records:
        table.add_row(
            record["type"],
            record["database_type"],
            str(record["length"]),
            str(record["precision"]),
            str(record["scale"]),
        )
    _console(output_stream).print(table)


def render_rows(
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    output_format: str,
    stream: IO[str] | None = None,
) -> None:
    """Render scanned rows."""
    output_stream = stream or sys.stdout
    if output_format == "json":
        payload = [{column: _json_value(value) for column, value in zip(columns, row)} for row in rows]
        json.dump(payload, output_stream, indent=2)
        output_stream.write("\n")
        return

    if not rows:
        print("No rows.", file=output_stream)
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if value is None else str(value) for value in row))
    _console(output_stream).print(table)


def _column_record(column_type: ColumnType) -> dict[str, Any]:
    length, has_length = column_type.length()
    precision, scale, has_decimal = column_type.decimal_size()
    nullable, _ = column_type.nullable()
    return {
        "name": column_type.name(),
        "database_type": column_type.database_type_name(),
        "scan_type": _type_label(column_type.scan_type()),
        "nullable": nullable,
        "length": length if has_length else None,
        "precision": precision if has_decimal else None,
        "scale": scale if has_decimal else None,
    }


def _type_label(scan_type: Any) -> str:
    args = getattr(scan_type, "__args__", None)
    if args:
        # Optional[X] is Union[X, None].
        base = next(arg for arg in args if arg is not type(None))
        return f"{base.__name__} | None"
    return getattr(scan_type, "__name__", str(scan_type))


def _optional(value: int | None) -> str:
    return "-" if value is None else str(value)


def _json_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, complex):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _console(stream: IO[str]) -> Console:
    return Console(file=stream, highlight=False, force_terminal=False, width=160)

"""Load mock result sets from YAML fixture files.

A fixture holds the dialect, the column specs and the rows::

    dialect: postgres
    columns:
      - name=ID;type=int64
      - name=TS;type=*timestamp
    rows:
      - {ID: 1, TS: 2024-01-01T00:00:00Z}
      - [2, null]

Rows given as mappings are added by name, rows given as lists by position.
Scalar values are coerced to the column's scan type so fixtures can spell
UUIDs, timestamps and complex numbers as plain strings.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import yaml

from sqlrows.shared.config import MockConfig
from sqlrows.shared.exceptions import FixtureError
from sqlrows.shared.logging import Logger

from .failures import FailureHandler, report_failure
from .registry import SemanticType
from .rowset import MockRowSet
from .types import ColumnDescriptor

_FIXTURE_KEYS = {"dialect", "columns", "rows"}


def load_fixture(
    path: str | Path,
    *,
    config: MockConfig | None = None,
    on_failure: FailureHandler | None = None,
    logger: Logger | None = None,
) -> MockRowSet | None:
    """Build a `MockRowSet` from the YAML fixture at *path*.

    Returns None only when a capturing failure handler swallowed a fixture error.
    """
    fixture_path = Path(path).expanduser()
    try:
        data = _read_fixture(fixture_path)
    except FixtureError as exc:
        report_failure(str(exc), on_failure)
        return None
    return build_fixture(data, config=config, on_failure=on_failure, logger=logger, source=str(fixture_path))


def build_fixture(
    data: Mapping[str, Any],
    *,
    config: MockConfig | None = None,
    on_failure: FailureHandler | None = None,
    logger: Logger | None = None,
    source: str = "<fixture>",
) -> MockRowSet | None:
    """Build a `MockRowSet` from an already-parsed fixture mapping."""
    try:
        dialect, columns, rows = _validate(data, config, source)
    except FixtureError as exc:
        report_failure(str(exc), on_failure)
        return None

    column_widening = config.mock.column_widening if config else "forbid"
    row_set = MockRowSet(
        columns,
        dialect,
        on_failure=on_failure,
        logger=logger,
        column_widening=column_widening,
    )
    descriptors = {descriptor.key: descriptor for descriptor in row_set.descriptors}
    ordered = list(row_set.descriptors)

    for index, row in enumerate(rows):
        try:
            if isinstance(row, Mapping):
                row_set.add(
                    {
                        str(name): _coerce_for(descriptors.get(str(name).lower()), value)
                        for name, value in row.items()
                    }
                )
            elif isinstance(row, Sequence) and not isinstance(row, (str, bytes)):
                row_set.add_row(
                    [
                        _coerce_for(ordered[position] if position < len(ordered) else None, value)
                        for position, value in enumerate(row)
                    ]
                )
            else:
                raise FixtureError(f"{source}: row {index} must be a mapping or a list")
        except FixtureError as exc:
            report_failure(str(exc), on_failure)
            break
    return row_set


def _read_fixture(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FixtureError(f"fixture not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise FixtureError(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise FixtureError(f"{path}: fixture must define a mapping root object")
    return data


def _validate(
    data: Mapping[str, Any], config: MockConfig | None, source: str
) -> tuple[str, list[str], list[Any]]:
    unknown = sorted(set(map(str, data)) - _FIXTURE_KEYS)
    if unknown:
        raise FixtureError(f"{source}: unknown fixture keys: {', '.join(unknown)}")

    dialect = data.get("dialect") or (config.mock.dialect if config else None)
    if not dialect:
        raise FixtureError(f"{source}: no dialect given and no default configured")

    columns = data.get("columns")
    if not isinstance(columns, list) or not all(isinstance(spec, str) for spec in columns):
        raise FixtureError(f"{source}: 'columns' must be a list of column spec strings")

    rows = data.get("rows") or []
    if not isinstance(rows, list):
        raise FixtureError(f"{source}: 'rows' must be a list")
    return str(dialect), list(columns), rows


def _coerce_for(descriptor: ColumnDescriptor | None, value: Any) -> Any:
    # Unknown columns pass through so the row store reports them.
    if descriptor is None or value is None:
        return value
    try:
        return coerce_value(descriptor.semantic_type, value)
    except (TypeError, ValueError) as exc:
        raise FixtureError(
            f"value {value!r} for column {descriptor.name} is not a valid "
            f"{descriptor.semantic_type.value}: {exc}"
        ) from exc


def coerce_value(semantic_type: SemanticType, value: Any) -> Any:
    """Convert a YAML scalar into the scan representation of *semantic_type*."""
    if semantic_type is SemanticType.BOOL:
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean")
    if semantic_type in (SemanticType.FLOAT32, SemanticType.FLOAT64):
        return float(value)
    if semantic_type in (SemanticType.COMPLEX64, SemanticType.COMPLEX128):
        return complex(str(value).replace(" ", "")) if isinstance(value, str) else complex(value)
    if semantic_type is SemanticType.STRING:
        return str(value)
    if semantic_type is SemanticType.RUNE and isinstance(value, str):
        if len(value) != 1:
            raise ValueError("expected a single character")
        return ord(value)
    if semantic_type is SemanticType.TIMESTAMP:
        return _coerce_timestamp(value)
    if semantic_type is SemanticType.UUID:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    # Remaining kinds are integers.
    if isinstance(value, bool):
        raise ValueError("expected integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("expected integer, got a fractional number")
    return int(value)


def _coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)

"""Parser for the column specification mini-language.

A column spec is a semicolon-separated list of ``key=value`` pairs:

    name        column name (required, unique ignoring case)
    type        semantic type, ``*`` prefix marks the column nullable (required)
    length      field length (optional)
    precision   decimal precision (optional)
    scale       decimal scale (optional)
    dbType      native database type name (optional)

Examples::

    "name=UPDATE_TS;type=*timestamp"
    "name=KEY;type=uuid"
    "name=NAME;type=string;length=64"
"""

from __future__ import annotations

import re

from sqlrows.shared.exceptions import ColumnSpecError

from . import registry
from .registry import Dialect, SemanticType
from .types import ColumnDescriptor

NULLABLE_MARKER = "*"
SPEC_KEYS = ("name", "type", "length", "precision", "scale", "dbType")
_INT_KEYS = ("length", "precision", "scale")
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_column_spec(spec: str, dialect: Dialect) -> ColumnDescriptor:
    """Parse one column spec for *dialect*, raising `ColumnSpecError` on bad input."""
    values, overrides = _split_pairs(spec)

    name = values.get("name", "")
    type_str = values.get("type", "")
    if not name:
        raise ColumnSpecError(f"column spec missing required 'name': {spec}")
    if not type_str:
        raise ColumnSpecError(f"column spec missing required 'type': {spec}")

    semantic_type, nullable = parse_type(type_str)

    native_type = values.get("dbType") or registry.native_type_name(dialect, semantic_type)
    defaults = registry.type_defaults(dialect, native_type)

    return ColumnDescriptor(
        name=name,
        semantic_type=semantic_type,
        nullable=nullable,
        length=overrides.get("length", defaults.length),
        precision=overrides.get("precision", defaults.precision),
        scale=overrides.get("scale", defaults.scale),
        native_type=native_type,
    )


def parse_type(type_str: str) -> tuple[SemanticType, bool]:
    """Split a ``type`` value into its semantic type and nullability."""
    cleaned = type_str.strip()
    nullable = cleaned.startswith(NULLABLE_MARKER)
    base = cleaned[len(NULLABLE_MARKER):] if nullable else cleaned
    semantic_type = SemanticType.lookup(base.strip())
    if semantic_type is None:
        raise ColumnSpecError(f"unsupported type: {type_str}")
    return semantic_type, nullable


def _split_pairs(spec: str) -> tuple[dict[str, str], dict[str, int]]:
    values: dict[str, str] = {}
    overrides: dict[str, int] = {}
    for part in spec.split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ColumnSpecError(f"invalid key=value pair in column spec: {part}")
        key, value = (piece.strip() for piece in part.split("=", 1))
        if key not in SPEC_KEYS:
            raise ColumnSpecError(f"unknown keyword in column spec: {key}")
        if key in _INT_KEYS:
            overrides[key] = _parse_int(key, value)
        values[key] = value
    return values, overrides


def _parse_int(key: str, raw: str) -> int:
    # Optional sign and ASCII digits only; no "1_000" or non-ASCII digits.
    if not _INT_PATTERN.fullmatch(raw):
        raise ColumnSpecError(f"invalid {key} in column spec: {raw}")
    return int(raw)

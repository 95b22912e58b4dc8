"""Semantic types, database dialects and the tables that connect them.

Three kinds of table live here:

* semantic type -> Python scan type,
* per dialect: semantic type -> native type name,
* per dialect: native type name -> default (length, precision, scale).

Defaults are keyed by native name rather than semantic type because several
semantic types share one native name (every Snowflake integer is ``INTEGER``
or ``BIGINT``, for example).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlrows.shared.exceptions import RegistryError, UnknownDialectError


class SemanticType(str, Enum):
    """Closed set of value kinds a mock column can hold."""

    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    STRING = "string"
    BYTE = "byte"
    RUNE = "rune"
    UINTPTR = "uintptr"
    TIMESTAMP = "timestamp"
    UUID = "uuid"

    @classmethod
    def lookup(cls, name: str) -> SemanticType | None:
        try:
            return cls(name)
        except ValueError:
            return None


class Dialect(str, Enum):
    """Database flavours with their own type names and defaults."""

    SNOWFLAKE = "snowflake"
    POSTGRES = "postgres"
    MSSQL = "mssql"

    @classmethod
    def parse(cls, value: Dialect | str) -> Dialect:
        """Resolve *value* (member, name or alias) to a dialect."""
        if isinstance(value, Dialect):
            return value
        key = str(value).strip().lower()
        dialect = _DIALECT_ALIASES.get(key)
        if dialect is None:
            raise UnknownDialectError(f"unknown database dialect: {value}")
        return dialect


_DIALECT_ALIASES: dict[str, Dialect] = {
    "snowflake": Dialect.SNOWFLAKE,
    "postgres": Dialect.POSTGRES,
    "postgresql": Dialect.POSTGRES,
    "pg": Dialect.POSTGRES,
    "mssql": Dialect.MSSQL,
    "sqlserver": Dialect.MSSQL,
}


@dataclass(frozen=True, slots=True)
class TypeDefaults:
    """Default length, precision and scale for a native type; 0 means not applicable."""

    length: int = 0
    precision: int = 0
    scale: int = 0


_NO_DEFAULTS = TypeDefaults()

_SCAN_TYPES: dict[SemanticType, type] = {
    SemanticType.BOOL: bool,
    SemanticType.INT: int,
    SemanticType.INT8: int,
    SemanticType.INT16: int,
    SemanticType.INT32: int,
    SemanticType.INT64: int,
    SemanticType.UINT: int,
    SemanticType.UINT8: int,
    SemanticType.UINT16: int,
    SemanticType.UINT32: int,
    SemanticType.UINT64: int,
    SemanticType.FLOAT32: float,
    SemanticType.FLOAT64: float,
    SemanticType.COMPLEX64: complex,
    SemanticType.COMPLEX128: complex,
    SemanticType.STRING: str,
    SemanticType.BYTE: int,
    SemanticType.RUNE: int,
    SemanticType.UINTPTR: int,
    SemanticType.TIMESTAMP: datetime,
    SemanticType.UUID: uuid.UUID,
}

_NATIVE_NAMES: dict[Dialect, dict[SemanticType, str]] = {
    Dialect.SNOWFLAKE: {
        SemanticType.BOOL: "BOOLEAN",
        SemanticType.INT: "INTEGER",
        # No TINYINT/SMALLINT; everything narrow is INTEGER.
        SemanticType.INT8: "INTEGER",
        SemanticType.INT16: "INTEGER",
        SemanticType.INT32: "INTEGER",
        SemanticType.INT64: "BIGINT",
        # No unsigned types; widen where the range needs it.
        SemanticType.UINT: "INTEGER",
        SemanticType.UINT8: "INTEGER",
        SemanticType.UINT16: "INTEGER",
        SemanticType.UINT32: "BIGINT",
        SemanticType.UINT64: "BIGINT",
        SemanticType.FLOAT32: "FLOAT",
        SemanticType.FLOAT64: "DOUBLE",
        SemanticType.COMPLEX64: "VARCHAR",
        SemanticType.COMPLEX128: "VARCHAR",
        SemanticType.STRING: "VARCHAR",
        SemanticType.BYTE: "INTEGER",
        SemanticType.RUNE: "INTEGER",
        SemanticType.UINTPTR: "BIGINT",
        SemanticType.TIMESTAMP: "TIMESTAMP",
        SemanticType.UUID: "VARCHAR",
    },
    Dialect.POSTGRES: {
        SemanticType.BOOL: "BOOLEAN",
        SemanticType.INT: "INTEGER",
        SemanticType.INT8: "SMALLINT",
        SemanticType.INT16: "SMALLINT",
        SemanticType.INT32: "INTEGER",
        SemanticType.INT64: "BIGINT",
        SemanticType.UINT: "INTEGER",
        SemanticType.UINT8: "SMALLINT",
        SemanticType.UINT16: "INTEGER",
        SemanticType.UINT32: "BIGINT",
        SemanticType.UINT64: "NUMERIC(20)",
        SemanticType.FLOAT32: "REAL",
        SemanticType.FLOAT64: "DOUBLE PRECISION",
        SemanticType.COMPLEX64: "TEXT",
        SemanticType.COMPLEX128: "TEXT",
        SemanticType.STRING: "TEXT",
        SemanticType.BYTE: "SMALLINT",
        SemanticType.RUNE: "INTEGER",
        SemanticType.UINTPTR: "BIGINT",
        SemanticType.TIMESTAMP: "TIMESTAMP WITH TIME ZONE",
        SemanticType.UUID: "UUID",
    },
    Dialect.MSSQL: {
        SemanticType.BOOL: "BIT",
        SemanticType.INT: "INT",
        SemanticType.INT8: "TINYINT",
        SemanticType.INT16: "SMALLINT",
        SemanticType.INT32: "INT",
        SemanticType.INT64: "BIGINT",
        SemanticType.UINT: "INT",
        SemanticType.UINT8: "TINYINT",
        # SMALLINT stops at 32767.
        SemanticType.UINT16: "INT",
        SemanticType.UINT32: "BIGINT",
        SemanticType.UINT64: "DECIMAL(20)",
        SemanticType.FLOAT32: "REAL",
        SemanticType.FLOAT64: "FLOAT",
        SemanticType.COMPLEX64: "NVARCHAR(MAX)",
        SemanticType.COMPLEX128: "NVARCHAR(MAX)",
        SemanticType.STRING: "NVARCHAR(MAX)",
        SemanticType.BYTE: "TINYINT",
        SemanticType.RUNE: "INT",
        SemanticType.UINTPTR: "BIGINT",
        SemanticType.TIMESTAMP: "DATETIME2",
        SemanticType.UUID: "UNIQUEIDENTIFIER",
    },
}

_DEFAULTS: dict[Dialect, dict[str, TypeDefaults]] = {
    Dialect.SNOWFLAKE: {
        "VARCHAR": TypeDefaults(length=16777216),  # 16 MB
        "NUMBER": TypeDefaults(precision=38),
        "DECIMAL": TypeDefaults(precision=38),
        "INTEGER": _NO_DEFAULTS,
        "BIGINT": _NO_DEFAULTS,
        "FLOAT": _NO_DEFAULTS,
        "DOUBLE": _NO_DEFAULTS,
        "BOOLEAN": _NO_DEFAULTS,
        "TIMESTAMP": _NO_DEFAULTS,
    },
    Dialect.POSTGRES: {
        "TEXT": TypeDefaults(length=1073741824),  # 1 GB
        "VARCHAR": TypeDefaults(length=1073741824),
        "NUMERIC": _NO_DEFAULTS,
        "DECIMAL": _NO_DEFAULTS,
        "NUMERIC(20)": TypeDefaults(precision=20),
        "INTEGER": _NO_DEFAULTS,
        "BIGINT": _NO_DEFAULTS,
        "SMALLINT": _NO_DEFAULTS,
        "REAL": TypeDefaults(precision=6),
        "DOUBLE PRECISION": TypeDefaults(precision=15),
        "BOOLEAN": _NO_DEFAULTS,
        "TIMESTAMP WITH TIME ZONE": _NO_DEFAULTS,
        "UUID": _NO_DEFAULTS,
    },
    Dialect.MSSQL: {
        "NVARCHAR(MAX)": TypeDefaults(length=2147483647),
        "VARCHAR(MAX)": TypeDefaults(length=2147483647),
        "DECIMAL": TypeDefaults(precision=18),
        "NUMERIC": TypeDefaults(precision=18),
        "DECIMAL(20)": TypeDefaults(precision=20),
        "INT": _NO_DEFAULTS,
        "BIGINT": _NO_DEFAULTS,
        "SMALLINT": _NO_DEFAULTS,
        "TINYINT": _NO_DEFAULTS,
        "REAL": TypeDefaults(precision=7),
        "FLOAT": TypeDefaults(precision=15),
        "BIT": _NO_DEFAULTS,
        "DATETIME2": _NO_DEFAULTS,
        "UNIQUEIDENTIFIER": _NO_DEFAULTS,
    },
}


def scan_type(semantic_type: SemanticType, *, nullable: bool = False) -> Any:
    """Return the Python type a scanned value of *semantic_type* has."""
    base = _SCAN_TYPES.get(semantic_type)
    if base is None:
        raise RegistryError(f"no scan type registered for semantic type {semantic_type.value}")
    if nullable:
        return Optional[base]
    return base


def native_type_name(dialect: Dialect, semantic_type: SemanticType) -> str:
    """Return the dialect's native type name for *semantic_type*."""
    table = _NATIVE_NAMES.get(dialect)
    if table is None:
        raise UnknownDialectError(f"unknown database dialect: {dialect}")
    name = table.get(semantic_type)
    if not name:
        raise RegistryError(
            f"database type table out of sync with base type table for base type {semantic_type.value}"
        )
    if name not in _DEFAULTS[dialect]:
        raise RegistryError(
            f"no defaults registered for {dialect.value} type {name} (base type {semantic_type.value})"
        )
    return name


def type_defaults(dialect: Dialect, native_name: str) -> TypeDefaults:
    """Return defaults for *native_name*; unknown names (explicit overrides) get zeros."""
    table = _DEFAULTS.get(dialect)
    if table is None:
        raise UnknownDialectError(f"unknown database dialect: {dialect}")
    return table.get(native_name, _NO_DEFAULTS)


def verify_registry() -> None:
    """Check every semantic type resolves in every dialect, raising `RegistryError` if not."""
    for semantic_type in SemanticType:
        scan_type(semantic_type)
        for dialect in Dialect:
            native_type_name(dialect, semantic_type)

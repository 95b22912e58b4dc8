"""Data structures shared across the mock engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import registry
from .registry import SemanticType


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Immutable metadata for one mock column, produced by the spec parser."""

    name: str
    semantic_type: SemanticType
    nullable: bool
    length: int
    precision: int
    scale: int
    native_type: str

    @property
    def key(self) -> str:
        """Case-insensitive lookup key for the column name."""
        return self.name.lower()


class MockColumnType:
    """`ColumnType` view over a `ColumnDescriptor`."""

    __slots__ = ("descriptor",)

    def __init__(self, descriptor: ColumnDescriptor) -> None:
        self.descriptor = descriptor

    def database_type_name(self) -> str:
        return self.descriptor.native_type

    def decimal_size(self) -> tuple[int, int, bool]:
        precision, scale = self.descriptor.precision, self.descriptor.scale
        return precision, scale, precision != 0 or scale != 0

    def length(self) -> tuple[int, bool]:
        return self.descriptor.length, self.descriptor.length != 0

    def name(self) -> str:
        return self.descriptor.name

    def nullable(self) -> tuple[bool, bool]:
        return self.descriptor.nullable, True

    def scan_type(self) -> Any:
        return registry.scan_type(self.descriptor.semantic_type, nullable=self.descriptor.nullable)

    def __repr__(self) -> str:
        return f"MockColumnType({self.descriptor!r})"

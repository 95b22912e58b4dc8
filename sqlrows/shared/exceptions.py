"""Project-wide custom exceptions."""

from __future__ import annotations


class SqlRowsError(Exception):
    """Base exception for the sqlrows package."""


class ConfigurationError(SqlRowsError):
    """Raised when configuration loading or validation fails."""


class SetupError(SqlRowsError):
    """Raised when a mock result set is set up incorrectly.

    These are test-authoring mistakes. They are routed through the failure
    channel (see `sqlrows.mock.failures`) rather than returned to the caller.
    """


class ColumnSpecError(SetupError):
    """Raised when a column specification string cannot be parsed."""


class RegistryError(SetupError):
    """Raised when the dialect type tables are inconsistent with each other."""


class UnknownDialectError(SetupError):
    """Raised when a dialect selector does not name a supported dialect."""


class UnknownColumnError(SetupError):
    """Raised when a row references a column that was never declared."""


class ColumnWideningError(SetupError):
    """Raised when a column is appended after rows have been added."""


class FixtureError(SetupError):
    """Raised when a YAML fixture file is malformed."""


class ScanError(SqlRowsError):
    """Raised when a row cannot be scanned into the supplied destinations."""


class ScanNotPositionedError(ScanError):
    """Raised when `scan` is called before the first `next`."""


class NoMoreRowsError(ScanError):
    """Raised when `scan` is called after the rows are exhausted."""


class DestinationCountError(ScanError):
    """Raised when the number of destinations differs from the row width."""


class DestinationTypeError(ScanError):
    """Raised when a destination cannot receive the column's value."""

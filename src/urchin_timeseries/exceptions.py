"""
Exceptions raised by the download -> parse -> normalize pipeline.

Hierarchy::

    UrchinTimeseriesError
    ├── TransferError        every download strategy failed
    ├── ParseError           malformed, empty or header-only CSV
    ├── SchemaMismatch       wrong column count or a missing column
    └── DateCoercionError    unparseable date (also a ValueError)

The CLI catches the base class and turns it into a one-line message
with exit code 1.
"""

from __future__ import annotations


class UrchinTimeseriesError(Exception):
    """Base class for all pipeline errors."""


class TransferError(UrchinTimeseriesError):
    """A download attempt failed or produced no bytes."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ParseError(UrchinTimeseriesError):
    """The downloaded file could not be parsed as CSV."""


class SchemaMismatch(UrchinTimeseriesError):
    """The table does not have the columns the pipeline expects."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class DateCoercionError(UrchinTimeseriesError, ValueError):
    """A value in a date column is not a valid calendar date."""

    def __init__(self, column: str, value: object) -> None:
        super().__init__(f"Cannot parse {value!r} in column {column!r} as a date")
        self.column = column
        self.value = value

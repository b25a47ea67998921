"""
Error taxonomy for the availability and matching core.

Malformed input always fails fast with the offending field named.
Missing optional input is never an error and has no exception here.
"""

from __future__ import annotations


class DoctorFinderError(Exception):
    """Base class for every error raised by this package."""


class MalformedInputError(DoctorFinderError, ValueError):
    """Caller supplied data that violates the input contract."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class CalendarParseError(MalformedInputError):
    """An availability date key or time-of-day string could not be parsed."""


class CoordinateError(MalformedInputError):
    """A coordinate component is not a finite number."""


class RecordShapeError(MalformedInputError):
    """A doctor record is missing where one is required."""


class DataSourceError(DoctorFinderError):
    """The document store could not be read."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")

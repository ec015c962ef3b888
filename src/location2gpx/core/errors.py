"""Error types raised by the track-building pipeline.

Every error is fail-fast: the whole conversion aborts and no partial output is
produced. Record errors carry the offending field and, when known, the 0-based
position of the record in the input.
"""

from typing import Any


class Location2GpxError(Exception):
    """Base class for all errors raised by location2gpx."""


class RecordError(Location2GpxError, ValueError):
    def __init__(self, field: str, position: int | None = None):
        self.field = field
        self.position = position
        super().__init__(self._message())

    def _where(self) -> str:
        return f" (record {self.position})" if self.position is not None else ""

    def _message(self) -> str:
        return f"Invalid field `{self.field}`{self._where()}"

    def at(self, position: int) -> "RecordError":
        """Returns a copy of this error tagged with the record position."""
        return type(self)(self.field, position)


class MissingField(RecordError):
    """A required field is absent (or empty) in a raw record."""

    def _message(self) -> str:
        return f"Missing required field `{self.field}`{self._where()}"


class MalformedValue(RecordError):
    """A field is present but does not parse as its expected type."""

    def __init__(self, field: str, expected: str, value: Any = None, position: int | None = None):
        self.expected = expected
        self.value = value
        super().__init__(field, position)

    def _message(self) -> str:
        return f"Malformed value for `{self.field}`{self._where()}: expected {self.expected}, got {self.value!r}"

    def at(self, position: int) -> "MalformedValue":
        return MalformedValue(self.field, self.expected, self.value, position)


class InvalidConfiguration(Location2GpxError, ValueError):
    """A configuration value is missing, non-numeric or out of range."""

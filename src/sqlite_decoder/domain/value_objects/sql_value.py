"""Typed column values produced by the record decoder.

SQLite's record format stores each column under one of a handful of
storage classes. :class:`SqlValue` is the tagged variant for those
classes, plus ``UNDECODED`` for serial types whose byte length is known
but whose value this decoder does not materialize (floats, 48/64-bit
integers, blobs).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Storage class of a decoded column value."""

    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"
    UNDECODED = "undecoded"


@dataclass(frozen=True, slots=True)
class SqlValue:
    """A single column value.

    Attributes:
        kind: Storage class of the value
        value: The Python value (None for NULL and UNDECODED)
        serial_type: Serial type the value was decoded from, when known
        length: Byte length of the value in the record body

    Example:
        >>> SqlValue.integer(42).value
        42
        >>> SqlValue.undecoded(7, 8).is_decoded
        False
    """

    kind: ValueKind
    value: int | float | str | bytes | None = None
    serial_type: int | None = None
    length: int = 0

    @classmethod
    def null(cls, serial_type: int | None = 0) -> SqlValue:
        return cls(ValueKind.NULL, None, serial_type, 0)

    @classmethod
    def integer(cls, value: int, serial_type: int | None = None, length: int = 0) -> SqlValue:
        return cls(ValueKind.INTEGER, value, serial_type, length)

    @classmethod
    def real(cls, value: float, serial_type: int | None = 7) -> SqlValue:
        return cls(ValueKind.REAL, value, serial_type, 8)

    @classmethod
    def text(cls, value: str, serial_type: int | None = None, length: int = 0) -> SqlValue:
        return cls(ValueKind.TEXT, value, serial_type, length)

    @classmethod
    def blob(cls, value: bytes, serial_type: int | None = None) -> SqlValue:
        return cls(ValueKind.BLOB, value, serial_type, len(value))

    @classmethod
    def undecoded(cls, serial_type: int, length: int) -> SqlValue:
        """A recognized serial type whose value was not materialized."""
        return cls(ValueKind.UNDECODED, None, serial_type, length)

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    @property
    def is_decoded(self) -> bool:
        """False only for values the decoder recognized but did not decode."""
        return self.kind is not ValueKind.UNDECODED

    def as_python(self) -> Any:
        """Return the plain Python value (None for NULL and undecoded values)."""
        return self.value

    def __eq__(self, other: object) -> bool:
        # Equality is by storage class and value; where a value came from
        # in the record body does not matter.
        if not isinstance(other, SqlValue):
            return NotImplemented
        if self.kind is ValueKind.UNDECODED or other.kind is ValueKind.UNDECODED:
            return (
                self.kind is other.kind
                and self.serial_type == other.serial_type
                and self.length == other.length
            )
        return self.kind is other.kind and self.value == other.value

    def __hash__(self) -> int:
        if self.kind is ValueKind.UNDECODED:
            return hash((self.kind, self.serial_type, self.length))
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "NULL"
        if self.kind is ValueKind.UNDECODED:
            return f"<undecoded serial_type={self.serial_type} length={self.length}>"
        return f"{self.kind.value.upper()}({self.value!r})"

"""SQLite record format decoding.

A record is the payload of a table b-tree cell:

    ┌──────────────────────────────────────┬───────────────────────────┐
    │ Header                               │ Body                      │
    │ ┌─────────────┬──────┬──────┬─────┐  │ ┌───────┬───────┬─────┐   │
    │ │ header size │ st 0 │ st 1 │ ... │  │ │ col 0 │ col 1 │ ... │   │
    │ │  (varint)   │(vint)│(vint)│     │  │ │       │       │     │   │
    │ └─────────────┴──────┴──────┴─────┘  │ └───────┴───────┴─────┘   │
    └──────────────────────────────────────┴───────────────────────────┘

The header size counts its own varint. Each serial type ("st") fixes
both the storage class and the byte length of one body column, so the
body cursor can always be advanced exactly, even for columns whose value
this decoder leaves undecoded.

Serial types:
    0       NULL                          0 bytes
    1..4    signed int, 1/2/3/4 bytes     decoded
    5, 6    signed int, 6/8 bytes         length only
    7       IEEE 754 float64              length only
    8, 9    integer constants 0 and 1     0 bytes
    10, 11  reserved                      0 bytes, length only
    N>=12   even: BLOB of (N-12)/2 bytes  length only
    N>=13   odd: TEXT of (N-13)/2 bytes   decoded

References:
    - https://www.sqlite.org/fileformat2.html#record_format
"""

from __future__ import annotations

from collections.abc import Container
from dataclasses import dataclass

from sqlite_decoder.domain.codec import decode_varint, read_signed
from sqlite_decoder.domain.errors import TruncatedRecordError
from sqlite_decoder.domain.value_objects import SqlValue, TextEncoding, ValueKind

_FIXED_LENGTHS = (0, 1, 2, 3, 4, 6, 8, 8, 0, 0, 0, 0)


def serial_type_length(serial_type: int) -> int:
    """Return the number of body bytes a serial type occupies."""
    if serial_type < 0:
        raise ValueError(f"serial type must be non-negative, got {serial_type}")
    if serial_type < len(_FIXED_LENGTHS):
        return _FIXED_LENGTHS[serial_type]
    if serial_type % 2 == 0:
        return (serial_type - 12) // 2
    return (serial_type - 13) // 2


def serial_type_kind(serial_type: int) -> ValueKind:
    """Return the storage class a serial type encodes."""
    if serial_type == 0:
        return ValueKind.NULL
    if 1 <= serial_type <= 6 or serial_type in (8, 9):
        return ValueKind.INTEGER
    if serial_type == 7:
        return ValueKind.REAL
    if serial_type in (10, 11):
        return ValueKind.UNDECODED
    if serial_type % 2 == 0:
        return ValueKind.BLOB
    return ValueKind.TEXT


def decode_integer(serial_type: int, data: bytes | memoryview, offset: int) -> int | None:
    """Decode any integer serial type, including the 48 and 64-bit widths.

    Returns:
        The integer value, or None if the serial type is not an integer class.
    """
    if serial_type == 8:
        return 0
    if serial_type == 9:
        return 1
    if 1 <= serial_type <= 6:
        return read_signed(data, offset, serial_type_length(serial_type))
    return None


def decode_value(
    serial_type: int,
    data: bytes | memoryview,
    offset: int,
    encoding: TextEncoding = TextEncoding.UTF8,
) -> SqlValue:
    """Decode one column value starting at offset.

    Raises:
        TruncatedRecordError: If the value runs past the end of data.
    """
    length = serial_type_length(serial_type)
    if offset + length > len(data):
        raise TruncatedRecordError(
            f"Serial type {serial_type} needs {length} bytes at offset {offset}, "
            f"record has {len(data)}"
        )

    if serial_type == 0:
        return SqlValue.null()
    if 1 <= serial_type <= 4:
        return SqlValue.integer(read_signed(data, offset, length), serial_type, length)
    if serial_type in (8, 9):
        return SqlValue.integer(serial_type - 8, serial_type, 0)
    if serial_type >= 13 and serial_type % 2 == 1:
        raw = bytes(data[offset : offset + length])
        return SqlValue.text(raw.decode(encoding.codec, errors="replace"), serial_type, length)

    # 5, 6 (wide ints), 7 (float), 10, 11 (reserved), even >= 12 (blob)
    return SqlValue.undecoded(serial_type, length)


@dataclass(frozen=True)
class Record:
    """A decoded record: one serial type and one value per column.

    Example:
        >>> record = Record.decode(bytes([3, 1, 15, 7, ord("h")]))
        >>> [v.value for v in record.values]
        [7, 'h']
    """

    serial_types: tuple[int, ...]
    values: tuple[SqlValue, ...]
    header_size: int
    body_size: int

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> SqlValue:
        return self.values[index]

    @classmethod
    def decode(
        cls,
        payload: bytes | memoryview,
        encoding: TextEncoding = TextEncoding.UTF8,
        *,
        max_columns: int | None = None,
        integer_columns: Container[int] = (),
    ) -> Record:
        """Decode a record payload.

        Args:
            payload: The record bytes (cell payload, after the rowid varint)
            encoding: Database text encoding for TEXT columns
            max_columns: Stop after this many columns
            integer_columns: Column indexes decoded as integers of any width
                (48 and 64-bit included) instead of following the default
                partial-support policy

        Raises:
            MalformedVarintError: If a header varint is truncated.
            TruncatedRecordError: If the header size or a column runs past
                the payload.
        """
        view = memoryview(payload)
        header_size, consumed = decode_varint(view, 0)
        if header_size < consumed or header_size > len(view):
            raise TruncatedRecordError(
                f"Record header size {header_size} invalid for payload of {len(view)} bytes"
            )

        header = view[:header_size]
        cursor = consumed
        body_offset = header_size
        serial_types: list[int] = []
        values: list[SqlValue] = []

        while cursor < header_size:
            if max_columns is not None and len(values) >= max_columns:
                break

            serial_type, used = decode_varint(header, cursor)
            cursor += used

            column = len(values)
            if column in integer_columns and serial_type_kind(serial_type) is ValueKind.INTEGER:
                length = serial_type_length(serial_type)
                if body_offset + length > len(view):
                    raise TruncatedRecordError(
                        f"Integer column {column} runs past the record body"
                    )
                value = SqlValue.integer(
                    decode_integer(serial_type, view, body_offset), serial_type, length
                )
            else:
                value = decode_value(serial_type, view, body_offset, encoding)

            serial_types.append(serial_type)
            values.append(value)
            body_offset += serial_type_length(serial_type)

        return cls(
            serial_types=tuple(serial_types),
            values=tuple(values),
            header_size=header_size,
            body_size=body_offset - header_size,
        )

"""Fixed-width big-endian field reads with bounds checking."""

from __future__ import annotations

import struct

from sqlite_decoder.domain.errors import TruncatedRecordError

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


def _check_bounds(data: bytes, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(data):
        raise TruncatedRecordError(
            f"Read of {width} bytes at offset {offset} exceeds buffer of {len(data)} bytes"
        )


def read_u8(data: bytes, offset: int) -> int:
    """Read an unsigned byte."""
    _check_bounds(data, offset, 1)
    return data[offset]


def read_u16(data: bytes, offset: int) -> int:
    """Read a big-endian unsigned 16-bit integer."""
    _check_bounds(data, offset, 2)
    return _U16.unpack_from(data, offset)[0]


def read_u32(data: bytes, offset: int) -> int:
    """Read a big-endian unsigned 32-bit integer."""
    _check_bounds(data, offset, 4)
    return _U32.unpack_from(data, offset)[0]


def read_signed(data: bytes, offset: int, width: int) -> int:
    """Read a big-endian two's complement integer of 1-8 bytes.

    The sign is taken from the top bit of the first byte, so a 3-byte
    field sign-extends from bit 23.

    Raises:
        ValueError: If width is outside 1-8.
        TruncatedRecordError: If the field runs past the buffer.
    """
    if not 1 <= width <= 8:
        raise ValueError(f"width must be between 1 and 8, got {width}")
    _check_bounds(data, offset, width)
    return int.from_bytes(data[offset : offset + width], byteorder="big", signed=True)

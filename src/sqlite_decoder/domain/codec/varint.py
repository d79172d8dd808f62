"""SQLite variable-length integer codec.

A varint is 1-9 bytes, big-endian. Each of the first 8 bytes contributes
its low 7 bits and uses the high bit as a continuation flag. If the first
8 bytes all have the flag set, a 9th byte contributes all 8 of its bits.
That gives a full 64-bit range in at most 9 bytes.

    value        bytes
    0..127       1   0xxxxxxx
    128..16383   2   1xxxxxxx 0xxxxxxx
    ...
    >= 2**56     9   1xxxxxxx x8 then xxxxxxxx

References:
    - https://www.sqlite.org/fileformat2.html#varint
"""

from __future__ import annotations

from sqlite_decoder.domain.errors import MalformedVarintError

MAX_VARINT_LENGTH = 9
MAX_VARINT_VALUE = (1 << 64) - 1

# Values above this need the 9-byte form (8 x 7 bits = 56 bits)
_NINE_BYTE_THRESHOLD = (1 << 56) - 1


def _decode(data: bytes, offset: int) -> tuple[int, int, bool]:
    """Decode a varint, returning (value, bytes_consumed, complete)."""
    result = 0
    consumed = 0

    for i in range(MAX_VARINT_LENGTH):
        if offset + i >= len(data):
            return result, consumed, False

        byte = data[offset + i]
        consumed += 1

        if i < MAX_VARINT_LENGTH - 1:
            result = (result << 7) | (byte & 0x7F)
            if byte < 0x80:
                return result, consumed, True
        else:
            result = (result << 8) | byte

    return result, consumed, True


def read_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Read a varint leniently.

    If the buffer ends before the varint does, decoding stops and the
    number of bytes actually available is reported. Callers that need to
    detect that case should use :func:`decode_varint`.

    Args:
        data: Buffer to read from
        offset: Position of the first varint byte

    Returns:
        Tuple of (value, bytes_consumed). bytes_consumed is 0 when offset
        is at or past the end of the buffer.

    Example:
        >>> read_varint(bytes([0x81, 0x00]))
        (128, 2)
    """
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    value, consumed, _ = _decode(data, offset)
    return value, consumed


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Read a varint, raising if it runs off the end of the buffer.

    Args:
        data: Buffer to read from
        offset: Position of the first varint byte

    Returns:
        Tuple of (value, bytes_consumed)

    Raises:
        MalformedVarintError: If the buffer ends before the varint does.
    """
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    value, consumed, complete = _decode(data, offset)
    if not complete:
        raise MalformedVarintError(offset, consumed)
    return value, consumed


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit value in SQLite's canonical varint form.

    Raises:
        ValueError: If value is negative or does not fit in 64 bits.
    """
    if value < 0 or value > MAX_VARINT_VALUE:
        raise ValueError(f"varint value out of range: {value}")

    if value > _NINE_BYTE_THRESHOLD:
        out = bytearray(MAX_VARINT_LENGTH)
        out[8] = value & 0xFF
        value >>= 8
        for i in range(7, -1, -1):
            out[i] = (value & 0x7F) | 0x80
            value >>= 7
        return bytes(out)

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def varint_length(value: int) -> int:
    """Return the number of bytes :func:`encode_varint` produces for value."""
    if value < 0 or value > MAX_VARINT_VALUE:
        raise ValueError(f"varint value out of range: {value}")
    if value > _NINE_BYTE_THRESHOLD:
        return MAX_VARINT_LENGTH
    return max(1, (value.bit_length() + 6) // 7)

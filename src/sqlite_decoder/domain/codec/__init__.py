"""Low-level byte codecs shared by the entities.

Exports:
    Varint:
        - read_varint: Lenient decode, reports bytes actually consumed
        - decode_varint: Strict decode, raises on truncation
        - encode_varint: Canonical 1-9 byte encoding
        - varint_length: Encoded length of a value

    Big-endian fields:
        - read_u8, read_u16, read_u32: Unsigned fixed-width reads
        - read_signed: Two's complement read of 1-8 bytes
"""

from sqlite_decoder.domain.codec.fields import read_signed, read_u8, read_u16, read_u32
from sqlite_decoder.domain.codec.varint import (
    MAX_VARINT_LENGTH,
    decode_varint,
    encode_varint,
    read_varint,
    varint_length,
)

__all__ = [
    "MAX_VARINT_LENGTH",
    "read_varint",
    "decode_varint",
    "encode_varint",
    "varint_length",
    "read_u8",
    "read_u16",
    "read_u32",
    "read_signed",
]

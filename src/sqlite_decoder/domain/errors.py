"""Error taxonomy for the decoder.

Every failure the decoding pipeline can detect is raised as a subclass of
:class:`DecoderError` carrying an :class:`ErrorCode`. Opening a database
lets these propagate; the query layer converts them into a status on the
returned result instead.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable failure categories."""

    FILE_NOT_FOUND = "file_not_found"
    IO_ERROR = "io_error"
    INVALID_HEADER = "invalid_header"
    INVALID_PAGE_SIZE = "invalid_page_size"
    INVALID_PAGE_NUMBER = "invalid_page_number"
    TRUNCATED_PAGE = "truncated_page"
    UNSUPPORTED_PAGE_TYPE = "unsupported_page_type"
    TRUNCATED_RECORD = "truncated_record"
    MALFORMED_VARINT = "malformed_varint"


class DecoderError(Exception):
    """Base class for all decoder failures."""

    code: ErrorCode = ErrorCode.IO_ERROR


class DatabaseFileNotFoundError(DecoderError, FileNotFoundError):
    """The database file does not exist."""

    code = ErrorCode.FILE_NOT_FOUND


class DatabaseIOError(DecoderError, OSError):
    """A read against the database file failed or came up short."""

    code = ErrorCode.IO_ERROR


class TruncatedHeaderError(DatabaseIOError):
    """Fewer than 100 bytes were available for the file header."""


class TruncatedPageError(DatabaseIOError):
    """Fewer than page_size bytes were available for a page."""

    code = ErrorCode.TRUNCATED_PAGE

    def __init__(self, page_number: int, expected: int, actual: int) -> None:
        self.page_number = page_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Short read on page {page_number}: got {actual} bytes, expected {expected}"
        )


class InvalidHeaderError(DecoderError):
    """The first 16 bytes are not the SQLite magic string."""

    code = ErrorCode.INVALID_HEADER


class InvalidPageSizeError(DecoderError):
    """The raw page-size field is not a legal page size."""

    code = ErrorCode.INVALID_PAGE_SIZE

    def __init__(self, raw_page_size: int) -> None:
        self.raw_page_size = raw_page_size
        super().__init__(f"Invalid page size field: {raw_page_size}")


class InvalidPageNumberError(DecoderError):
    """A page number below 1 was requested."""

    code = ErrorCode.INVALID_PAGE_NUMBER

    def __init__(self, page_number: int) -> None:
        self.page_number = page_number
        super().__init__(f"Invalid page number: {page_number} (pages start at 1)")


class UnsupportedPageTypeError(DecoderError):
    """A page other than a leaf table b-tree page was found where one is required."""

    code = ErrorCode.UNSUPPORTED_PAGE_TYPE

    def __init__(self, page_number: int, page_type: int) -> None:
        self.page_number = page_number
        self.page_type = page_type
        super().__init__(
            f"Page {page_number} has type 0x{page_type:02x}, expected leaf table page 0x0d"
        )


class TruncatedRecordError(DecoderError):
    """Decoding ran past the bounds of a record, cell or page."""

    code = ErrorCode.TRUNCATED_RECORD


class MalformedVarintError(TruncatedRecordError):
    """A varint ran off the end of its buffer."""

    code = ErrorCode.MALFORMED_VARINT

    def __init__(self, offset: int, available: int) -> None:
        self.offset = offset
        self.available = available
        super().__init__(
            f"Truncated varint at offset {offset} ({available} bytes available)"
        )

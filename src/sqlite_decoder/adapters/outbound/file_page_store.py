"""File-based Page Store implementation.

This adapter implements the PageStore protocol over a SQLite database
file opened read-only.

File Format:
    - Bytes 0..99: database file header (inside page 1)
    - Page N (1-based) occupies bytes (N - 1) * page_size .. N * page_size

Thread Safety:
    Reads use os.pread, so concurrent readers never share a file cursor.
    On platforms without pread, a lock serializes seek+read pairs.
    Each read holds the descriptor through a reader count; close()
    refuses new reads and waits for running ones before closing it.

References:
    - https://www.sqlite.org/fileformat2.html#pages
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlite_decoder.domain.entities import FileHeader
from sqlite_decoder.domain.errors import (
    DatabaseFileNotFoundError,
    DatabaseIOError,
    InvalidPageNumberError,
    TruncatedPageError,
)
from sqlite_decoder.domain.value_objects import FILE_HEADER_SIZE, PageNumber
from sqlite_decoder.infrastructure.logging import get_logger
from sqlite_decoder.infrastructure.metrics import MetricsRegistry, get_metrics

_HAS_PREAD = hasattr(os, "pread")


class FilePageStore:
    """File-based implementation of the PageStore protocol.

    Opening the store reads and validates the file header; an invalid
    header or page size leaves no open handle behind.

    Attributes:
        file_path: Path to the database file.
        page_size: Effective page size derived from the header.
    """

    def __init__(
        self,
        file_path: str | Path,
        *,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Open a database file and validate its header.

        Args:
            file_path: Path to the database file.
            metrics: Metrics registry (defaults to the global one).

        Raises:
            DatabaseFileNotFoundError: If the file does not exist.
            DatabaseIOError: If the file cannot be read, or holds fewer
                than 100 bytes.
            InvalidHeaderError: If the magic string does not match.
            InvalidPageSizeError: If the page-size field is illegal.
        """
        self._file_path = Path(file_path)
        self._metrics = metrics or get_metrics()
        self._log = get_logger(__name__, path=str(self._file_path))
        self._state = threading.Condition()
        self._seek_lock = threading.Lock()
        self._fd: int | None = None
        self._closed = False
        self._readers = 0

        try:
            self._fd = os.open(self._file_path, os.O_RDONLY | getattr(os, "O_BINARY", 0))
        except FileNotFoundError as e:
            raise DatabaseFileNotFoundError(f"Database file not found: {self._file_path}") from e
        except OSError as e:
            raise DatabaseIOError(f"Cannot open database file {self._file_path}: {e}") from e

        try:
            self._header = FileHeader.from_bytes(self._pread(FILE_HEADER_SIZE, 0))
        except BaseException:
            self.close()
            raise

        self._log.debug(
            "page_store_opened",
            page_size=self._header.page_size,
            text_encoding=self._header.text_encoding.name,
        )

    @contextmanager
    def _descriptor(self) -> Iterator[int]:
        """Hold the file descriptor open for the duration of one read.

        close() waits until every holder has released it, so the number
        cannot be closed and reused by the OS under a running read.
        """
        with self._state:
            if self._closed or self._fd is None:
                raise DatabaseIOError("Page store is closed")
            fd = self._fd
            self._readers += 1
        try:
            yield fd
        finally:
            with self._state:
                self._readers -= 1
                if self._readers == 0:
                    self._state.notify_all()

    def _pread(self, size: int, offset: int) -> bytes:
        """Read up to size bytes at offset; shorter only at end of file."""
        chunks: list[bytes] = []
        remaining = size
        with self._descriptor() as fd:
            try:
                while remaining > 0:
                    if _HAS_PREAD:
                        chunk = os.pread(fd, remaining, offset)
                    else:
                        with self._seek_lock:
                            os.lseek(fd, offset, os.SEEK_SET)
                            chunk = os.read(fd, remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
                    offset += len(chunk)
            except (OSError, OverflowError) as e:
                raise DatabaseIOError(f"Read of {size} bytes at offset {offset} failed: {e}") from e
        return b"".join(chunks)

    def _file_size(self) -> int:
        with self._descriptor() as fd:
            try:
                return os.fstat(fd).st_size
            except OSError as e:
                raise DatabaseIOError(f"Cannot stat database file: {e}") from e

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def header(self) -> FileHeader:
        """The validated file header."""
        return self._header

    @property
    def page_size(self) -> int:
        """Return the effective page size in bytes."""
        return self._header.page_size

    def read_page(self, page_number: PageNumber) -> bytes:
        """Read a page from disk.

        Args:
            page_number: The page to read (1-based).

        Returns:
            Raw page data as bytes (exactly page_size bytes).

        Raises:
            InvalidPageNumberError: If page_number is below 1.
            TruncatedPageError: If the file ends inside the page.
            DatabaseIOError: If the store is closed or the read fails.
        """
        if page_number < 1:
            raise InvalidPageNumberError(page_number)

        offset = (page_number - 1) * self.page_size
        if offset >= self._file_size():
            raise TruncatedPageError(page_number, self.page_size, 0)
        data = self._pread(self.page_size, offset)

        if len(data) != self.page_size:
            raise TruncatedPageError(page_number, self.page_size, len(data))

        self._metrics.pages_read_total.inc()
        self._metrics.page_bytes_read_total.inc(len(data))
        return data

    def get_num_pages(self) -> int:
        """Return the number of whole pages currently in the file."""
        return self._file_size() // self.page_size

    def close(self) -> None:
        """Close the file descriptor. Safe to call more than once.

        Reads that start after close() raise DatabaseIOError; reads
        already running finish before the descriptor is released.
        """
        with self._state:
            if self._closed:
                return
            self._closed = True
            while self._readers:
                self._state.wait()
            fd, self._fd = self._fd, None

        if fd is not None:
            os.close(fd)

    def __enter__(self) -> FilePageStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __del__(self) -> None:
        """Destructor - ensure the descriptor is closed."""
        if getattr(self, "_state", None) is not None:
            self.close()

    def __repr__(self) -> str:
        return f"FilePageStore(path={str(self._file_path)!r}, page_size={self.page_size})"

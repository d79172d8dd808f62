"""Page Store port for random-access page reads.

This outbound port defines the contract for fetching fixed-size pages
from a SQLite database file. The store is read-only and keeps no cache:
every read goes back to storage.

References:
    - https://www.sqlite.org/fileformat2.html#pages
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from sqlite_decoder.domain.entities import FileHeader
from sqlite_decoder.domain.value_objects import PageNumber


class PageStore(Protocol):
    """Protocol for positioned page reads.

    Thread Safety:
        Implementations must be safe for concurrent reads: reads are
        offset-qualified and share no cursor.
    """

    @property
    @abstractmethod
    def header(self) -> FileHeader:
        """The file header validated when the store was opened."""
        ...

    @property
    @abstractmethod
    def page_size(self) -> int:
        """Effective page size in bytes (512..65536)."""
        ...

    @abstractmethod
    def read_page(self, page_number: PageNumber) -> bytes:
        """Read one page.

        Args:
            page_number: 1-based page number.

        Returns:
            Exactly page_size bytes. Page 1 includes the file header.

        Raises:
            InvalidPageNumberError: If page_number is below 1.
            TruncatedPageError: If the file ends inside the page.
            DatabaseIOError: If the read fails.
        """
        ...

    @abstractmethod
    def get_num_pages(self) -> int:
        """Return the number of whole pages in the file."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying file. Further reads fail."""
        ...

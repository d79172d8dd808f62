"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (file-backed page reads)
"""

from sqlite_decoder.adapters.outbound import FilePageStore

__all__ = [
    # Outbound adapters
    "FilePageStore",
]

"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (e.g., PageStore)

Adapters implement these ports with concrete functionality.
"""

from sqlite_decoder.ports.outbound import PageStore

__all__ = [
    # Outbound ports
    "PageStore",
]

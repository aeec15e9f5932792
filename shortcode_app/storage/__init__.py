"""
Key-value collections for users, shortcodes and their audit entries.
Implements Strategy Pattern for flexible storage backends.
"""

from .strategies import (
    CollectionStrategy,
    SQLCollection,
    InMemoryCollection,
    StoredRecord,
    matches,
)
from .factory import CollectionFactory, CollectionBackend, CollectionSet

__all__ = [
    "CollectionStrategy",
    "SQLCollection",
    "InMemoryCollection",
    "StoredRecord",
    "matches",
    "CollectionFactory",
    "CollectionBackend",
    "CollectionSet",
]

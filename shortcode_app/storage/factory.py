"""
Factory for creating the service's key-value collections.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.orm import sessionmaker

from .strategies import CollectionStrategy, SQLCollection, InMemoryCollection


class CollectionBackend(Enum):
    """Available collection backends"""
    SQL = "sql"
    MEMORY = "memory"


class CollectionFactory:
    """Creates a collection of the configured backend type."""

    @classmethod
    def create(
        cls,
        backend: CollectionBackend,
        name: str,
        session_factory: Optional[sessionmaker] = None
    ) -> CollectionStrategy:
        """
        Create a collection instance.
        
        Args:
            backend: Type of collection backend (from enum)
            name: Collection namespace, e.g. "shortcodes"
            session_factory: Required for the SQL backend
        
        Raises:
            ValueError: If backend is unknown or misconfigured
        """
        if backend == CollectionBackend.SQL:
            if session_factory is None:
                raise ValueError("SQL collections need a session factory")
            return SQLCollection(name, session_factory)
        elif backend == CollectionBackend.MEMORY:
            return InMemoryCollection(name)
        raise ValueError(f"Unknown collection backend: {backend}")


@dataclass
class CollectionSet:
    """The four namespaces the service reads and writes."""

    users: CollectionStrategy
    shortcodes: CollectionStrategy
    shortcode_creations: CollectionStrategy
    shortcode_invocations: CollectionStrategy

    @classmethod
    def create(
        cls,
        backend: CollectionBackend,
        session_factory: Optional[sessionmaker] = None
    ) -> "CollectionSet":
        def make(name: str) -> CollectionStrategy:
            return CollectionFactory.create(backend, name, session_factory)

        return cls(
            users=make("users"),
            shortcodes=make("shortcodes"),
            shortcode_creations=make("shortcodeCreations"),
            shortcode_invocations=make("shortcodeInvocations"),
        )

"""
Key-value collection strategies using Strategy Pattern.
Allows switching between storage backends (SQL database, In-Memory)
without changing the service layer.
"""

import copy
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from shortcode_app.models.record import CollectionRecord


Predicate = Callable[[Dict[str, Any]], bool]


class StoredRecord(BaseModel):
    """A record as returned by a collection: its key plus the stored props."""

    collection: str
    key: str
    props: Dict[str, Any] = Field(default_factory=dict)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


def matches(criteria: Dict[str, Any]) -> Predicate:
    """
    Build a predicate that partially matches nested ``criteria`` against props.

    ``matches({"profile": {"id": 7}})`` accepts ``{"profile": {"id": 7, "login": "x"}}``.
    """
    def _match(expected: Any, actual: Any) -> bool:
        if isinstance(expected, dict):
            if not isinstance(actual, dict):
                return False
            return all(
                k in actual and _match(v, actual[k])
                for k, v in expected.items()
            )
        return expected == actual

    return lambda props: _match(criteria, props)


class CollectionStrategy(ABC):
    """
    Abstract base class for a named key-value collection.
    
    All methods are async because storage operations involve I/O.
    Every get/set is atomic per key; nothing spans multiple keys.
    """

    def __init__(self, name: str):
        self.name = name
    
    @abstractmethod
    async def get(self, key: str) -> Optional[StoredRecord]:
        """Return the record stored under ``key`` or None."""
        pass
    
    @abstractmethod
    async def set(self, key: str, props: Dict[str, Any]) -> StoredRecord:
        """Create or replace the record stored under ``key``."""
        pass
    
    @abstractmethod
    async def filter(self, predicate: Predicate) -> List[StoredRecord]:
        """Return every record whose props satisfy ``predicate``."""
        pass


class SQLCollection(CollectionStrategy):
    """
    Collection stored in the ``collection_records`` table.

    Each operation opens a short-lived session from ``session_factory``,
    so one instance can be shared across requests.
    """
    
    def __init__(self, name: str, session_factory: sessionmaker):
        super().__init__(name)
        self.session_factory = session_factory

    def _to_record(self, row: CollectionRecord) -> StoredRecord:
        return StoredRecord(
            collection=row.collection,
            key=row.key,
            props=row.props or {},
            created=row.created,
            updated=row.updated,
        )
    
    async def get(self, key: str) -> Optional[StoredRecord]:
        with self.session_factory() as db:
            row = db.get(CollectionRecord, (self.name, key))
            return self._to_record(row) if row else None
    
    async def set(self, key: str, props: Dict[str, Any]) -> StoredRecord:
        with self.session_factory() as db:
            row = db.get(CollectionRecord, (self.name, key))
            if row is None:
                row = CollectionRecord(collection=self.name, key=key, props=props)
                db.add(row)
            else:
                row.props = props
            db.commit()
            db.refresh(row)
            return self._to_record(row)
    
    async def filter(self, predicate: Predicate) -> List[StoredRecord]:
        # Props are opaque JSON, so matching happens in Python
        with self.session_factory() as db:
            rows = db.scalars(
                select(CollectionRecord).where(CollectionRecord.collection == self.name)
            ).all()
            return [self._to_record(row) for row in rows if predicate(row.props or {})]


class InMemoryCollection(CollectionStrategy):
    """
    Collection backed by a Python dict.
    
    Good for development and testing; lost on restart and not shared
    between processes.
    """
    
    def __init__(self, name: str):
        super().__init__(name)
        self._records: Dict[str, StoredRecord] = {}
    
    async def get(self, key: str) -> Optional[StoredRecord]:
        record = self._records.get(key)
        return record.model_copy(deep=True) if record else None
    
    async def set(self, key: str, props: Dict[str, Any]) -> StoredRecord:
        now = datetime.now(timezone.utc)
        existing = self._records.get(key)
        record = StoredRecord(
            collection=self.name,
            key=key,
            props=copy.deepcopy(props),
            created=existing.created if existing else now,
            updated=now,
        )
        self._records[key] = record
        return record.model_copy(deep=True)
    
    async def filter(self, predicate: Predicate) -> List[StoredRecord]:
        return [
            record.model_copy(deep=True)
            for record in self._records.values()
            if predicate(record.props)
        ]

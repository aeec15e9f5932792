from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from shortcode_app.database.connection import Base


class CollectionRecord(Base):
    """
    One key-value entry in a named collection.

    The ``(collection, key)`` pair is the primary key, so a set on an existing
    key replaces its props instead of adding a second row.
    """
    __tablename__ = "collection_records"

    collection = Column(String(64), primary_key=True)
    key = Column(String(128), primary_key=True)
    props = Column(JSON, nullable=False, default=dict)
    created = Column(DateTime(timezone=True), server_default=func.now())
    updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

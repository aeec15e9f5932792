"""
Database models for the shortcode service.

Every collection (users, shortcodes, audit entries) shares one key-value
table; the collection name is part of the primary key.
"""

from .record import CollectionRecord

__all__ = ["CollectionRecord"]

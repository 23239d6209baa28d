"""
SQLAlchemy models for the object store.
"""

from .base import Base, TimestampMixin, utcnow
from .stored_object import StoredObject, ObjectMeta, ObjectTerm

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "StoredObject",
    "ObjectMeta",
    "ObjectTerm",
]

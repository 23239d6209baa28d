"""
Stored object models: one table for every resource type, plus meta and terms.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import ObjectStatus
from .base import Base, TimestampMixin


class StoredObject(Base, TimestampMixin):
    """
    A domain object of any resource type.

    ``object_type`` partitions the table per resource; ``parent_id`` is only
    meaningful for hierarchical types. An ``id`` of 0 marks an object that
    has been permanently deleted.
    """

    __tablename__ = "stored_object"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    object_type: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    parent_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ObjectStatus.PUBLISH, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), default="", nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    author_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    menu_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sticky: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    meta: Mapped[list["ObjectMeta"]] = relationship(
        back_populates="stored_object",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    terms: Mapped[list["ObjectTerm"]] = relationship(
        back_populates="stored_object",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_stored_object_type_status_date", "object_type", "status", "date"),
    )

    def get_meta(self, key: str, default: str | None = None) -> str | None:
        for item in self.meta:
            if item.meta_key == key:
                return item.meta_value
        return default

    def set_meta(self, key: str, value: str | None) -> None:
        """Set, replace, or (with None) remove a meta value."""
        existing = [item for item in self.meta if item.meta_key == key]
        for item in existing:
            self.meta.remove(item)
        if value is not None:
            self.meta.append(ObjectMeta(meta_key=key, meta_value=str(value)))

    def get_terms(self, taxonomy: str) -> list[str]:
        return [term.term for term in self.terms if term.taxonomy == taxonomy]

    def set_terms(self, taxonomy: str, terms: list[str]) -> None:
        for item in [t for t in self.terms if t.taxonomy == taxonomy]:
            self.terms.remove(item)
        for term in dict.fromkeys(terms):
            self.terms.append(ObjectTerm(taxonomy=taxonomy, term=term))

    def __repr__(self) -> str:
        return f"<StoredObject {self.object_type}#{self.id} status={self.status}>"


class ObjectMeta(Base):
    """Key/value metadata attached to a stored object."""

    __tablename__ = "object_meta"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    object_id: Mapped[int] = mapped_column(
        ForeignKey("stored_object.id", ondelete="CASCADE"), nullable=False, index=True
    )
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    meta_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    stored_object: Mapped[StoredObject] = relationship(back_populates="meta")


class ObjectTerm(Base):
    """Taxonomy term assigned to a stored object."""

    __tablename__ = "object_term"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    object_id: Mapped[int] = mapped_column(
        ForeignKey("stored_object.id", ondelete="CASCADE"), nullable=False, index=True
    )
    taxonomy: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    term: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    stored_object: Mapped[StoredObject] = relationship(back_populates="terms")

"""
Base class and timestamp mixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, the storage convention for every date column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """
    Creation and modification timestamps, local and GMT.

    Local columns hold the site time; the service runs in UTC so both
    pairs carry the same instant unless a client supplies a local date.
    """

    date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)
    date_gmt: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    modified: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)
    modified_gmt: Mapped[Optional[datetime]] = mapped_column(DateTime, default=utcnow, nullable=True)

    def touch(self) -> None:
        """Refresh modification timestamps."""
        now = utcnow()
        self.modified = now
        self.modified_gmt = now

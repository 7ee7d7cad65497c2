"""
Naija Tax Calculator - Base Model

Shared columns for stored records: a UUID primary key that works on both
PostgreSQL and SQLite, and database-side created/updated timestamps.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    created_at and updated_at timestamps.

    created_at is stamped in Python with microseconds; SQLite CURRENT_TIMESTAMP
    only has whole seconds and history is ordered by this column.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utc_now,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class BaseModel(Base, TimestampMixin):
    """Abstract base for persisted records: UUID id plus timestamps."""

    __abstract__ = True

    # Generic Uuid: native UUID on PostgreSQL, CHAR(32) elsewhere
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

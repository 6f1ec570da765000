"""
Database model mixins for common functionality.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, String


def utcnow() -> datetime:
    """Timezone-aware current time with microsecond precision."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Opaque string identifier for a new record."""
    return str(uuid.uuid4())


class IdMixin:
    """String primary key assigned on insert."""
    id = Column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """
    Mixin for creation/update timestamps.

    Timestamps are set in Python rather than by the database so that rows
    written within the same second still order deterministically.
    """
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.updated_at = utcnow()

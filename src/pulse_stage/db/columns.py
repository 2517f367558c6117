"""Timestamp columns shared by the ORM models."""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import MappedColumn, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


def created_at_column() -> MappedColumn[datetime]:
    """Timezone-aware creation time stamped by the application on insert."""
    return mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


def updated_at_column() -> MappedColumn[datetime]:
    """Like :func:`created_at_column`, refreshed on every ORM update."""
    return mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

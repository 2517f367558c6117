"""Persisted error reports from the API and its clients."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pulse_stage.db.columns import created_at_column
from pulse_stage.db.session import Base

ERROR_SOURCE_BACKEND = "backend"
ERROR_SOURCE_FRONTEND = "frontend"


class ErrorLog(Base):
    """One reported error, either raised server-side or posted by a client."""

    __tablename__ = "error_log"
    __table_args__ = (
        CheckConstraint("service IN ('backend', 'frontend')", name="ck_error_log_service"),
        Index("ix_error_log_service_time", "service", "error_occurred_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    api_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    service: Mapped[str] = mapped_column(String(16), nullable=False, default=ERROR_SOURCE_BACKEND)
    error_detail: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    error_occurred_time: Mapped[datetime] = created_at_column()

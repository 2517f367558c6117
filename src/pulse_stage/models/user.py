"""SQLAlchemy model for registered accounts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pulse_stage.db.columns import created_at_column, updated_at_column
from pulse_stage.db.session import Base


class User(Base):
    """Account identified by a lowercased email address.

    Accounts are never removed; ``is_deleted`` deactivates them and a later
    registration with the same email reactivates the row.
    """

    __tablename__ = "user_account"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    # bcrypt hash; plaintext passwords are never stored.
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="user")
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

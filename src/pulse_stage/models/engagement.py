"""Models backing the per-post like sets and comment lists.

Each post owns at most one ``PostLikeSet`` and one ``PostCommentList``. The
aggregate rows carry the denormalized counters; membership and entries live in
their own tables so that every mutation is a single-row insert or delete plus
a server-side counter update.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from pulse_stage.db.columns import created_at_column
from pulse_stage.db.session import Base


class PostLikeSet(Base):
    """Like aggregate for a post; ``like_count`` tracks ``PostLike`` rows."""

    __tablename__ = "post_like_set"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_post_like_set_count"),
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PostLike(Base):
    """Membership of one user in a post's like set."""

    __tablename__ = "post_like"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post_like_set.post_id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Composite primary key keeps a user in the set at most once.
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_account.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = created_at_column()


class PostCommentList(Base):
    """Comment aggregate for a post."""

    __tablename__ = "post_comment_list"
    __table_args__ = (
        CheckConstraint("comment_count >= 0", name="ck_post_comment_list_count"),
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Next position handed out to an appended comment; never reused.
    next_order_index: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class PostComment(Base):
    """Immutable comment entry. Insertion order is ``order_index``."""

    __tablename__ = "post_comment"
    __table_args__ = (
        UniqueConstraint("post_id", "order_index", name="uq_post_comment_order"),
        Index("ix_post_comment_post_id", "post_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post_comment_list.post_id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    order_index: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = created_at_column()

"""SQLAlchemy models for posts and their attached images."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse_stage.db.columns import created_at_column, updated_at_column
from pulse_stage.db.session import Base

from .user import User


class Post(Base):
    """Text post written by a user.

    Posts are soft-deleted only. Every read path filters ``is_deleted``.
    """

    __tablename__ = "post"
    __table_args__ = (Index("ix_post_created_at", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    author: Mapped[User] = relationship("User", lazy="joined")
    images: Mapped[list[PostImage]] = relationship(
        "PostImage",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostImage.position",
    )

    @property
    def image_urls(self) -> list[str]:
        """Return image URLs in upload order."""
        return [image.url for image in self.images]


class PostImage(Base):
    """Object-store reference attached to a post."""

    __tablename__ = "post_image"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    post: Mapped[Post] = relationship("Post", back_populates="images")

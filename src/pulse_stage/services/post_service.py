"""Service-level helpers for creating, listing and editing posts."""
from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pulse_stage.core.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StorageFailureError,
)
from pulse_stage.core.settings import settings
from pulse_stage.models import Post, PostImage, User
from pulse_stage.services.engagement import parse_identifier

logger = logging.getLogger(__name__)

__all__ = [
    "PostPage",
    "create_post",
    "delete_post",
    "get_editable_post",
    "get_post",
    "list_posts",
    "normalize_post_content",
    "update_post",
]


@dataclass(frozen=True)
class PostPage:
    """One page of the feed plus pagination totals."""

    posts: list[Post]
    total: int
    pages: int


def normalize_post_content(content: str | None) -> str:
    """Trim post content and enforce the configured length bounds."""
    if not isinstance(content, str) or not content.strip():
        raise InvalidInputError("Post content is required")
    trimmed = content.strip()
    if len(trimmed) > settings.post_content_max_length:
        raise InvalidInputError(
            f"Post content must be at most {settings.post_content_max_length} characters"
        )
    return trimmed


def _check_image_count(image_urls: Sequence[str]) -> None:
    if len(image_urls) > settings.post_images_max:
        raise InvalidInputError(f"A post can have at most {settings.post_images_max} images")


def _visible_posts():
    return (
        select(Post)
        .join(User, Post.author_id == User.id)
        .where(Post.is_deleted.is_(False), User.is_deleted.is_(False))
    )


def _get_owned_post(db: Session, post_id: uuid.UUID, user_id: uuid.UUID, action: str) -> Post:
    post = db.scalars(
        select(Post).where(Post.id == post_id, Post.is_deleted.is_(False))
    ).first()
    if post is None:
        raise NotFoundError.for_resource("Post")
    if post.author_id != user_id:
        raise ForbiddenError(f"You can only {action} your own posts")
    return post


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Post operation %s failed: %s", operation, exc, exc_info=True)
        raise StorageFailureError(f"Failed to {operation}") from exc


def create_post(
    db: Session,
    author_id: str | uuid.UUID,
    content: str | None,
    image_urls: Sequence[str] = (),
) -> Post:
    """Persist a new post authored by ``author_id``.

    Args:
        db: Database session.
        author_id: Identifier of the authenticated author.
        content: Raw post text; trimmed before storage.
        image_urls: Object-store URLs already uploaded for this post.

    Returns:
        The persisted post.
    """
    author_uuid = parse_identifier(author_id, "user ID")
    text = normalize_post_content(content)
    _check_image_count(image_urls)

    post = Post(id=uuid.uuid4(), author_id=author_uuid, content=text)
    post.images = [PostImage(url=url, position=i) for i, url in enumerate(image_urls)]
    db.add(post)
    _commit(db, "create post")
    db.refresh(post)
    logger.info("Post %s created by %s", post.id, author_uuid)
    return post


def list_posts(db: Session, page: int = 1, limit: int | None = None) -> PostPage:
    """Return a page of visible posts, newest first."""
    if limit is None:
        limit = settings.posts_page_size_default
    if page < 1:
        raise InvalidInputError("Page must be a positive integer")
    if limit < 1:
        raise InvalidInputError("Limit must be a positive integer")
    if limit > settings.posts_page_size_max:
        raise InvalidInputError(
            f"Limit cannot exceed {settings.posts_page_size_max} posts per page"
        )

    try:
        total = db.scalar(select(func.count()).select_from(_visible_posts().subquery())) or 0
        posts = list(
            db.scalars(
                _visible_posts()
                .order_by(Post.created_at.desc(), Post.id)
                .offset((page - 1) * limit)
                .limit(limit)
            ).unique()
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to retrieve posts: %s", exc, exc_info=True)
        raise StorageFailureError("Failed to retrieve posts") from exc

    return PostPage(posts=posts, total=int(total), pages=math.ceil(total / limit))


def get_editable_post(db: Session, post_id: str | uuid.UUID, user_id: str | uuid.UUID) -> Post:
    """Return a post the caller may edit, or raise ``NotFoundError``/``ForbiddenError``."""
    post_uuid = parse_identifier(post_id, "post ID")
    user_uuid = parse_identifier(user_id, "user ID")
    return _get_owned_post(db, post_uuid, user_uuid, "edit")


def get_post(db: Session, post_id: str | uuid.UUID) -> Post:
    """Return one visible post or raise ``NotFoundError``."""
    post_uuid = parse_identifier(post_id, "post ID")
    post = db.scalars(_visible_posts().where(Post.id == post_uuid)).first()
    if post is None:
        raise NotFoundError.for_resource("Post")
    return post


def update_post(
    db: Session,
    post_id: str | uuid.UUID,
    user_id: str | uuid.UUID,
    content: str | None,
    image_urls: Sequence[str] | None = None,
) -> Post:
    """Edit a post's content (and optionally replace its images); author only."""
    post_uuid = parse_identifier(post_id, "post ID")
    user_uuid = parse_identifier(user_id, "user ID")
    text = normalize_post_content(content)
    if image_urls is not None:
        _check_image_count(image_urls)

    post = _get_owned_post(db, post_uuid, user_uuid, "edit")
    post.content = text
    if image_urls is not None:
        post.images = [PostImage(url=url, position=i) for i, url in enumerate(image_urls)]
    _commit(db, "update post")
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: str | uuid.UUID, user_id: str | uuid.UUID) -> Post:
    """Soft-delete a post; author only. Engagement data is left in place."""
    post_uuid = parse_identifier(post_id, "post ID")
    user_uuid = parse_identifier(user_id, "user ID")

    post = _get_owned_post(db, post_uuid, user_uuid, "delete")
    post.is_deleted = True
    _commit(db, "delete post")
    logger.info("Post %s soft-deleted by %s", post_uuid, user_uuid)
    return post

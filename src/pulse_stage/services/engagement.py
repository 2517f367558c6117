"""Engagement ledger: likes and comments attached to posts.

The ledger validates identifiers and content, checks that the post is active
and that the caller may act, and only then issues the repository's atomic
primitives. Each mutating operation commits once; any failure rolls the
session back so no partial state is written.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from pulse_stage.core.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PulseError,
    StorageFailureError,
)
from pulse_stage.models import Post, PostComment
from pulse_stage.repositories.engagement_repo import EngagementRepository

logger = logging.getLogger(__name__)

COMMENT_MIN_LENGTH = 1
COMMENT_MAX_LENGTH = 500


@dataclass(frozen=True)
class CommentEntry:
    """Read-only view of a single comment."""

    id: uuid.UUID
    post_id: uuid.UUID
    author_id: uuid.UUID
    content: str
    created_at: datetime

    @classmethod
    def from_model(cls, comment: PostComment) -> CommentEntry:
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            content=comment.content,
            created_at=comment.created_at,
        )


@dataclass(frozen=True)
class LikeToggleResult:
    """Like count and caller membership after a toggle."""

    count: int
    liked_by_caller: bool


@dataclass(frozen=True)
class CommentAdded:
    """Newly appended comment and the list size after the append."""

    comment: CommentEntry
    comment_count: int


@dataclass(frozen=True)
class CommentRemoved:
    """List size after a comment was removed."""

    remaining_count: int


@dataclass(frozen=True)
class EngagementState:
    """Display projection of a post's like set and comment list."""

    like_count: int
    liked_by_caller: bool
    comment_count: int
    comments: list[CommentEntry] = field(default_factory=list)


def parse_identifier(value: str | uuid.UUID | None, field_name: str) -> uuid.UUID:
    """Return ``value`` as a UUID.

    Raises:
        InvalidInputError: If the value is missing or not a well-formed UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not value or not isinstance(value, str):
        raise InvalidInputError(f"{field_name} is required")
    try:
        return uuid.UUID(value)
    except ValueError as err:
        raise InvalidInputError(f"Invalid {field_name}") from err


def normalize_comment_content(content: str | None, max_length: int = COMMENT_MAX_LENGTH) -> str:
    """Trim ``content`` and enforce the comment length bounds."""
    if not isinstance(content, str):
        raise InvalidInputError("Comment content is required")
    trimmed = content.strip()
    if len(trimmed) < COMMENT_MIN_LENGTH:
        raise InvalidInputError("Comment content is required")
    if len(trimmed) > max_length:
        raise InvalidInputError(f"Comment content must be at most {max_length} characters")
    return trimmed


class EngagementLedger:
    """Owns like membership and comment lists for posts."""

    def __init__(
        self,
        repository: EngagementRepository,
        *,
        comment_max_length: int = COMMENT_MAX_LENGTH,
    ) -> None:
        """Initialize the ledger.

        Args:
            repository: Store handle exposing the atomic engagement primitives.
            comment_max_length: Upper bound on trimmed comment length.
        """
        self.repository = repository
        self.comment_max_length = comment_max_length

    @contextmanager
    def _unit_of_work(self, operation: str, *, commit: bool = True) -> Iterator[None]:
        try:
            yield
            if commit:
                self.repository.commit()
        except PulseError:
            self.repository.rollback()
            raise
        except SQLAlchemyError as exc:
            self.repository.rollback()
            logger.error("Engagement operation %s failed: %s", operation, exc, exc_info=True)
            raise StorageFailureError(f"Failed to {operation}") from exc

    def _require_active_post(self, post_id: uuid.UUID) -> Post:
        post = self.repository.get_active_post(post_id)
        if post is None:
            raise NotFoundError.for_resource("Post")
        return post

    def toggle_like(
        self, post_id: str | uuid.UUID, user_id: str | uuid.UUID | None
    ) -> LikeToggleResult:
        """Flip ``user_id``'s membership in the post's like set.

        Raises:
            InvalidInputError: If either identifier is missing or malformed.
            NotFoundError: If the post does not exist or is soft-deleted.
            StorageFailureError: If the store fails.
        """
        post_uuid = parse_identifier(post_id, "post ID")
        user_uuid = parse_identifier(user_id, "user ID")

        with self._unit_of_work("toggle like"):
            self._require_active_post(post_uuid)
            if self.repository.remove_like(post_uuid, user_uuid):
                liked = False
            else:
                # A concurrent like by the same user may win the insert; either
                # way the caller is a member afterwards.
                self.repository.add_like(post_uuid, user_uuid)
                liked = True
            count = self.repository.like_count(post_uuid)

        logger.debug("User %s %s post %s (count=%d)",
                     user_uuid, "liked" if liked else "unliked", post_uuid, count)
        return LikeToggleResult(count=count, liked_by_caller=liked)

    def add_comment(
        self,
        post_id: str | uuid.UUID,
        user_id: str | uuid.UUID | None,
        content: str | None,
    ) -> CommentAdded:
        """Append a comment authored by ``user_id`` to the post.

        Raises:
            InvalidInputError: For malformed ids or empty/oversized content.
            NotFoundError: If the post does not exist or is soft-deleted.
            StorageFailureError: If the store fails.
        """
        post_uuid = parse_identifier(post_id, "post ID")
        user_uuid = parse_identifier(user_id, "user ID")
        text = normalize_comment_content(content, self.comment_max_length)

        with self._unit_of_work("add comment"):
            self._require_active_post(post_uuid)
            comment = self.repository.append_comment(post_uuid, user_uuid, text)
            entry = CommentEntry.from_model(comment)
            count = self.repository.comment_count(post_uuid)

        logger.debug("User %s commented %s on post %s", user_uuid, entry.id, post_uuid)
        return CommentAdded(comment=entry, comment_count=count)

    def delete_comment(
        self,
        post_id: str | uuid.UUID,
        comment_id: str | uuid.UUID,
        caller_id: str | uuid.UUID | None,
    ) -> CommentRemoved:
        """Remove one comment; only its author or the post's author may do so.

        Raises:
            InvalidInputError: For malformed ids.
            NotFoundError: If the post or the comment does not exist.
            ForbiddenError: If the caller is neither author.
            StorageFailureError: If the store fails.
        """
        post_uuid = parse_identifier(post_id, "post ID")
        comment_uuid = parse_identifier(comment_id, "comment ID")
        caller_uuid = parse_identifier(caller_id, "user ID")

        with self._unit_of_work("delete comment"):
            post = self._require_active_post(post_uuid)
            comment = self.repository.get_comment(post_uuid, comment_uuid)
            if comment is None:
                raise NotFoundError.for_resource("Comment")

            if caller_uuid not in (comment.author_id, post.author_id):
                raise ForbiddenError(
                    "You can only delete your own comment or comments on your post"
                )

            if not self.repository.remove_comment(post_uuid, comment_uuid):
                # Removed by a concurrent request between lookup and delete.
                raise NotFoundError.for_resource("Comment")
            remaining = self.repository.comment_count(post_uuid)

        logger.debug("User %s deleted comment %s on post %s", caller_uuid, comment_uuid, post_uuid)
        return CommentRemoved(remaining_count=remaining)

    def get_engagement_state(
        self,
        post_id: str | uuid.UUID,
        caller_id: str | uuid.UUID | None = None,
    ) -> EngagementState:
        """Return like and comment data for display without mutating anything."""
        post_uuid = parse_identifier(post_id, "post ID")
        caller_uuid = parse_identifier(caller_id, "user ID") if caller_id else None

        with self._unit_of_work("read engagement", commit=False):
            self._require_active_post(post_uuid)
            like_count = self.repository.like_count(post_uuid)
            liked = (
                self.repository.is_liked(post_uuid, caller_uuid)
                if caller_uuid is not None
                else False
            )
            comments = [
                CommentEntry.from_model(c) for c in self.repository.list_comments(post_uuid)
            ]
            comment_count = self.repository.comment_count(post_uuid)

        return EngagementState(
            like_count=like_count,
            liked_by_caller=liked,
            comment_count=comment_count,
            comments=comments,
        )

    def get_engagement_states(
        self,
        post_ids: Iterable[uuid.UUID],
        caller_id: str | uuid.UUID | None = None,
    ) -> dict[uuid.UUID, EngagementState]:
        """Batch form of :meth:`get_engagement_state` for feed pages.

        Deleted or unknown posts are omitted from the result.
        """
        caller_uuid = parse_identifier(caller_id, "user ID") if caller_id else None

        with self._unit_of_work("read engagement", commit=False):
            active = self.repository.active_post_ids(post_ids)
            like_counts = self.repository.like_counts(active)
            comment_counts = self.repository.comment_counts(active)
            comments = self.repository.comments_for_posts(active)
            liked = (
                self.repository.liked_post_ids(active, caller_uuid)
                if caller_uuid is not None
                else set()
            )

        return {
            post_id: EngagementState(
                like_count=like_counts.get(post_id, 0),
                liked_by_caller=post_id in liked,
                comment_count=comment_counts.get(post_id, 0),
                comments=[CommentEntry.from_model(c) for c in comments.get(post_id, [])],
            )
            for post_id in active
        }

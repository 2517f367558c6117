"""Data access for like sets and comment lists.

Every mutating helper is a single-row insert or delete paired with a
server-side counter expression (``count = count + 1``), so concurrent writers
on the same post never overwrite each other's changes. Callers own the
transaction and decide when to commit.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy import Select, Table, delete, func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pulse_stage.models import Post, PostComment, PostCommentList, PostLike, PostLikeSet, User

__all__ = ["EngagementRepository"]

# Dialects with a native "insert, ignore duplicate key" statement.
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class EngagementRepository:
    """Thin wrapper around database access for engagement aggregates."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # -- transaction control -------------------------------------------------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # -- posts ---------------------------------------------------------------

    def _visible_posts(self, *columns: Any) -> Select:
        return (
            select(*columns)
            .join(User, Post.author_id == User.id)
            .where(Post.is_deleted.is_(False), User.is_deleted.is_(False))
        )

    def get_active_post(self, post_id: uuid.UUID) -> Post | None:
        """Return the post unless it, or its author, is missing or soft-deleted."""
        return self.session.scalars(
            self._visible_posts(Post).where(Post.id == post_id)
        ).first()

    def active_post_ids(self, post_ids: Iterable[uuid.UUID]) -> set[uuid.UUID]:
        """Return the subset of ``post_ids`` that reference visible posts."""
        ids = list(post_ids)
        if not ids:
            return set()
        rows = self.session.scalars(self._visible_posts(Post.id).where(Post.id.in_(ids)))
        return set(rows)

    def _insert_ignoring_conflict(self, table: Table, **values: Any) -> bool:
        """Insert one row unless its primary key already exists.

        Returns:
            True if the row was inserted, False if a conflicting row was present.
        """
        dialect = self.session.get_bind().dialect.name
        if dialect in _UPSERT_INSERTS:
            stmt = _UPSERT_INSERTS[dialect](table).values(**values).on_conflict_do_nothing()
            return self.session.execute(stmt).rowcount == 1

        try:
            with self.session.begin_nested():
                self.session.execute(insert(table).values(**values))
        except IntegrityError:
            return False
        return True

    # -- likes ---------------------------------------------------------------

    def add_like(self, post_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Add ``user_id`` to the like set, creating the set on first use.

        Returns:
            True if the membership row was inserted, False if it already existed.
        """
        self._insert_ignoring_conflict(PostLikeSet.__table__, post_id=post_id, like_count=0)
        if not self._insert_ignoring_conflict(
            PostLike.__table__, post_id=post_id, user_id=user_id
        ):
            return False

        self.session.execute(
            update(PostLikeSet)
            .where(PostLikeSet.post_id == post_id)
            .values(like_count=PostLikeSet.like_count + 1)
            .execution_options(synchronize_session=False)
        )
        return True

    def remove_like(self, post_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Remove ``user_id`` from the like set.

        Returns:
            True if a membership row was deleted, False if there was none.
        """
        result = self.session.execute(
            delete(PostLike)
            .where(PostLike.post_id == post_id, PostLike.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        self.session.execute(
            update(PostLikeSet)
            .where(PostLikeSet.post_id == post_id)
            .values(like_count=PostLikeSet.like_count - 1)
            .execution_options(synchronize_session=False)
        )
        return True

    def is_liked(self, post_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        found = self.session.scalar(
            select(PostLike.user_id).where(
                PostLike.post_id == post_id,
                PostLike.user_id == user_id,
            )
        )
        return found is not None

    def like_count(self, post_id: uuid.UUID) -> int:
        """Return the stored counter, or 0 when no like set exists yet."""
        count = self.session.scalar(
            select(PostLikeSet.like_count).where(PostLikeSet.post_id == post_id)
        )
        return int(count or 0)

    def count_like_members(self, post_id: uuid.UUID) -> int:
        """Count membership rows directly; used to audit ``like_count``."""
        return int(
            self.session.scalar(
                select(func.count()).select_from(PostLike).where(PostLike.post_id == post_id)
            )
            or 0
        )

    def like_members(self, post_id: uuid.UUID) -> list[uuid.UUID]:
        return list(
            self.session.scalars(
                select(PostLike.user_id)
                .where(PostLike.post_id == post_id)
                .order_by(PostLike.created_at)
            )
        )

    def like_counts(self, post_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, int]:
        ids = list(post_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(PostLikeSet.post_id, PostLikeSet.like_count).where(
                PostLikeSet.post_id.in_(ids)
            )
        )
        return {post_id: int(count) for post_id, count in rows}

    def liked_post_ids(
        self, post_ids: Iterable[uuid.UUID], user_id: uuid.UUID
    ) -> set[uuid.UUID]:
        ids = list(post_ids)
        if not ids:
            return set()
        rows = self.session.scalars(
            select(PostLike.post_id).where(
                PostLike.post_id.in_(ids),
                PostLike.user_id == user_id,
            )
        )
        return set(rows)

    # -- comments ------------------------------------------------------------

    def append_comment(
        self,
        post_id: uuid.UUID,
        author_id: uuid.UUID,
        content: str,
    ) -> PostComment:
        """Append a comment at the end of the post's list and return it.

        The position is reserved with a counter update on the aggregate row,
        which serializes concurrent appends to the same post without losing any.
        """
        self._insert_ignoring_conflict(
            PostCommentList.__table__,
            post_id=post_id,
            comment_count=0,
            next_order_index=0,
        )
        self.session.execute(
            update(PostCommentList)
            .where(PostCommentList.post_id == post_id)
            .values(
                comment_count=PostCommentList.comment_count + 1,
                next_order_index=PostCommentList.next_order_index + 1,
            )
            .execution_options(synchronize_session=False)
        )
        next_index = self.session.scalar(
            select(PostCommentList.next_order_index).where(PostCommentList.post_id == post_id)
        )

        comment = PostComment(
            id=uuid.uuid4(),
            post_id=post_id,
            author_id=author_id,
            content=content,
            order_index=int(next_index) - 1,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def get_comment(self, post_id: uuid.UUID, comment_id: uuid.UUID) -> PostComment | None:
        return self.session.scalars(
            select(PostComment).where(
                PostComment.id == comment_id,
                PostComment.post_id == post_id,
            )
        ).first()

    def remove_comment(self, post_id: uuid.UUID, comment_id: uuid.UUID) -> bool:
        """Delete exactly one comment by identity.

        Returns:
            True if the comment was removed, False if it was not in the list.
        """
        result = self.session.execute(
            delete(PostComment)
            .where(PostComment.id == comment_id, PostComment.post_id == post_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        self.session.execute(
            update(PostCommentList)
            .where(PostCommentList.post_id == post_id)
            .values(comment_count=PostCommentList.comment_count - 1)
            .execution_options(synchronize_session=False)
        )
        return True

    def list_comments(self, post_id: uuid.UUID) -> list[PostComment]:
        """Return the post's comments in insertion order."""
        return list(
            self.session.scalars(
                select(PostComment)
                .where(PostComment.post_id == post_id)
                .order_by(PostComment.order_index)
            )
        )

    def comment_count(self, post_id: uuid.UUID) -> int:
        count = self.session.scalar(
            select(PostCommentList.comment_count).where(PostCommentList.post_id == post_id)
        )
        return int(count or 0)

    def comment_counts(self, post_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, int]:
        ids = list(post_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(PostCommentList.post_id, PostCommentList.comment_count).where(
                PostCommentList.post_id.in_(ids)
            )
        )
        return {post_id: int(count) for post_id, count in rows}

    def comments_for_posts(
        self, post_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, list[PostComment]]:
        ids = list(post_ids)
        grouped: dict[uuid.UUID, list[PostComment]] = {post_id: [] for post_id in ids}
        if not ids:
            return grouped
        rows = self.session.scalars(
            select(PostComment)
            .where(PostComment.post_id.in_(ids))
            .order_by(PostComment.post_id, PostComment.order_index)
        )
        for comment in rows:
            grouped[comment.post_id].append(comment)
        return grouped

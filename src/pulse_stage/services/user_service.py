"""Account lifecycle helpers."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pulse_stage.core.errors import NotFoundError, StorageFailureError
from pulse_stage.models import User
from pulse_stage.services.engagement import parse_identifier

logger = logging.getLogger(__name__)

__all__ = ["delete_account"]


def delete_account(db: Session, user_id: str | uuid.UUID) -> User:
    """Soft-delete an account and return it.

    The row, its posts and its engagement stay in place. Posts by a deleted
    account drop out of every read, and registering the same email again
    reactivates the row.

    Raises:
        InvalidInputError: If ``user_id`` is not a valid identifier.
        NotFoundError: If no active account has that id.
        StorageFailureError: If the change cannot be committed.
    """
    user_uuid = parse_identifier(user_id, "user ID")
    user = db.scalars(
        select(User).where(User.id == user_uuid, User.is_deleted.is_(False))
    ).first()
    if user is None:
        raise NotFoundError.for_resource("User")

    user.is_deleted = True
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete user %s: %s", user_uuid, exc, exc_info=True)
        raise StorageFailureError("Failed to delete user account") from exc

    logger.info("User %s soft-deleted their account", user_uuid)
    return user

"""Registration and login."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pulse_stage.core import security
from pulse_stage.core.errors import (
    ConflictError,
    InvalidInputError,
    StorageFailureError,
    UnauthorizedError,
)
from pulse_stage.models import User

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 32
# bcrypt refuses secrets longer than this many bytes.
PASSWORD_MAX_BYTES = 72
_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain 1 uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain 1 lowercase letter"),
    (re.compile(r"\d"), "Password must contain 1 digit"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain 1 special character"),
)


@dataclass(frozen=True)
class AuthResult:
    """Authenticated user and the access token issued for them."""

    user: User
    token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password_strength(password: str) -> None:
    """Raise ``InvalidInputError`` unless ``password`` meets the registration rules."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise InvalidInputError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise InvalidInputError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise InvalidInputError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            raise InvalidInputError(message)


def _issue_token(user: User) -> str:
    return security.create_access_token(str(user.id), email=user.email, role=user.role)


def register_user(db: Session, email: str, password: str) -> AuthResult:
    """Create an account, or reactivate a soft-deleted one with the same email.

    Raises:
        InvalidInputError: If the password does not meet the strength rules.
        ConflictError: If an active account already uses the email.
    """
    email = normalize_email(email)
    validate_password_strength(password)

    existing = db.scalars(select(User).where(User.email == email)).first()
    if existing is not None and not existing.is_deleted:
        raise ConflictError("Email is already in use by an active account")

    hashed = security.hash_password(password)
    if existing is not None:
        existing.password_hash = hashed
        existing.is_deleted = False
        user = existing
    else:
        user = User(email=email, password_hash=hashed)
        db.add(user)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email already in use") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to register user: %s", exc, exc_info=True)
        raise StorageFailureError("Failed to register user") from exc

    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return AuthResult(user=user, token=_issue_token(user))


def login_user(db: Session, email: str, password: str) -> AuthResult:
    """Verify credentials and issue a fresh token.

    Raises:
        UnauthorizedError: For unknown, deactivated or wrong-password accounts.
    """
    user = db.scalars(select(User).where(User.email == normalize_email(email))).first()
    if user is None or user.is_deleted:
        raise UnauthorizedError("Invalid email or password")
    if not security.verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")
    return AuthResult(user=user, token=_issue_token(user))

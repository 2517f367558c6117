"""Password hashing and JWT helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from pulse_stage.core.errors import UnauthorizedError
from pulse_stage.core.settings import settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of ``password`` suitable for storage."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Return True when ``password`` matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash, or the password exceeds 72 bytes.
        return False


def create_access_token(
    user_id: str,
    *,
    email: str | None = None,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a JWT whose subject is the user's identifier.

    Args:
        user_id: Identifier placed in the ``sub`` claim.
        email: Optional email claim for client display.
        role: Optional authorization role claim.
        expires_delta: Override of the configured token lifetime.

    Returns:
        Encoded JWT string.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    if email is not None:
        claims["email"] = email
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify ``token`` and return its claims.

    Raises:
        UnauthorizedError: If the token is expired, malformed, or lacks a subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as err:
        raise UnauthorizedError("Token has expired") from err
    except JWTError as err:
        raise UnauthorizedError("Invalid token") from err

    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token payload")
    return payload

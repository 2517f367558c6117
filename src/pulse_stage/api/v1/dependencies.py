"""Shared API dependencies for authentication and common functionality."""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pulse_stage.core.errors import UnauthorizedError
from pulse_stage.core.security import decode_access_token
from pulse_stage.core.settings import settings
from pulse_stage.db.session import get_db
from pulse_stage.models import User
from pulse_stage.repositories.engagement_repo import EngagementRepository
from pulse_stage.services.engagement import EngagementLedger
from pulse_stage.services.storage import ObjectStorage, get_object_storage

# HTTP Bearer scheme for JWT authentication; missing headers are reported as 401 below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(token: str, db: Session) -> User:
    payload = decode_access_token(token)
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError as err:
        raise UnauthorizedError("Invalid token payload") from err

    user = db.get(User, user_id)
    if user is None or user.is_deleted:
        raise UnauthorizedError("User not found")
    return user


def get_current_user(
    request: Request,
    credentials: CredentialsDep,
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If the header is missing, the token is invalid,
            or the account no longer exists.
    """
    if credentials is None or not credentials.credentials.strip():
        raise UnauthorizedError("Missing or invalid authorization header")
    user = _resolve_user(credentials.credentials.strip(), db)
    request.state.user_id = str(user.id)
    return user


def get_optional_user(
    request: Request,
    credentials: CredentialsDep,
    db: SessionDep,
) -> User | None:
    """Return the caller when a bearer token is supplied, otherwise None."""
    if credentials is None:
        return None
    user = _resolve_user(credentials.credentials.strip(), db)
    request.state.user_id = str(user.id)
    return user


def get_engagement_ledger(db: SessionDep) -> EngagementLedger:
    """Build a ledger bound to the request's database session."""
    return EngagementLedger(
        EngagementRepository(db),
        comment_max_length=settings.comment_content_max_length,
    )


def get_storage_dep() -> ObjectStorage:
    """Return the shared object storage adapter."""
    return get_object_storage()


# Type aliases for common dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
LedgerDep = Annotated[EngagementLedger, Depends(get_engagement_ledger)]
StorageDep = Annotated[ObjectStorage, Depends(get_storage_dep)]

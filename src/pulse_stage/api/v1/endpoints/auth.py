"""Authentication endpoints for the Pulse API."""

from __future__ import annotations

from fastapi import APIRouter, status

from pulse_stage.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from pulse_stage.services import auth_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(result: auth_service.AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        access_token=result.token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Register a new account (or reactivate a deactivated one) and log it in."""
    result = auth_service.register_user(db, payload.email, payload.password)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    result = auth_service.login_user(db, payload.email, payload.password)
    return _auth_response(result)


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: CurrentUserDep) -> UserResponse:
    """Return the authenticated account."""
    return UserResponse.model_validate(current_user)

"""Account management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from pulse_stage.services import user_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(current_user: CurrentUserDep, db: SessionDep) -> None:
    """Deactivate the caller's account; its token stops working immediately."""
    user_service.delete_account(db, current_user.id)

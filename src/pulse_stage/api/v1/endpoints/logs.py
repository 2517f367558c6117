"""Client error reporting endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from pulse_stage.core.errors import InvalidInputError
from pulse_stage.schemas.error_log import ErrorReport
from pulse_stage.services.error_log import ERROR_SOURCE_FRONTEND, record_error

from ..dependencies import OptionalUserDep, SessionDep

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("/error", status_code=status.HTTP_201_CREATED)
async def log_client_error(
    report: ErrorReport,
    request: Request,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> dict[str, str]:
    """Store an error captured by a client application."""
    if report.error_detail is None:
        raise InvalidInputError("errorDetail is required")
    record_error(
        db,
        service=ERROR_SOURCE_FRONTEND,
        detail=report.error_detail,
        api_name=report.api_name or request.url.path,
        user_id=str(current_user.id) if current_user else None,
    )
    return {"status": "logged"}

"""Persist error reports to the ``error_log`` table."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pulse_stage.models import ErrorLog
from pulse_stage.models.error_log import ERROR_SOURCE_BACKEND, ERROR_SOURCE_FRONTEND

logger = logging.getLogger(__name__)

__all__ = ["describe_exception", "record_error", "ERROR_SOURCE_BACKEND", "ERROR_SOURCE_FRONTEND"]


def describe_exception(exc: BaseException) -> dict[str, Any]:
    """Return a JSON-serializable summary of ``exc``."""
    return {"name": type(exc).__name__, "message": str(exc)}


def record_error(
    db: Session,
    *,
    service: str,
    detail: Any,
    api_name: str | None = None,
    user_id: str | None = None,
) -> ErrorLog | None:
    """Insert one error report.

    Returns the stored row, or None when the write itself failed. Reporting
    must never replace the error being reported, so storage failures here are
    logged instead of raised.
    """
    entry = ErrorLog(
        api_name=api_name,
        service=service,
        error_detail=detail if isinstance(detail, dict) else {"detail": detail},
        user_id=user_id,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to write error log: %s", exc)
        return None
    return entry

# src/pulse_stage/main.py
"""Main entry point for the Pulse application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pulse_stage.api.v1 import (
    auth_router,
    engagement_router,
    logs_router,
    posts_router,
    users_router,
)
from pulse_stage.core.errors import PulseError
from pulse_stage.core.log_config import configure_logging
from pulse_stage.core.settings import settings
from pulse_stage.db.session import SessionLocal
from pulse_stage.services.error_log import (
    ERROR_SOURCE_BACKEND,
    describe_exception,
    record_error,
)

logger = logging.getLogger(__name__)

configure_logging(settings.log_level)

# Initialize FastAPI app
app = FastAPI(
    title="Pulse API",
    description="Social posting API with likes and comments",
    version=settings.app_version,
)

# Session factory used by the error handlers; tests swap it for their own engine.
app.state.session_factory = SessionLocal

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(engagement_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(logs_router, prefix="/api/v1")


def _persist_backend_error(request: Request, exc: BaseException) -> None:
    db = request.app.state.session_factory()
    try:
        record_error(
            db,
            service=ERROR_SOURCE_BACKEND,
            detail=describe_exception(exc),
            api_name=request.url.path,
            user_id=getattr(request.state, "user_id", None),
        )
    finally:
        db.close()


@app.exception_handler(PulseError)
async def pulse_error_handler(request: Request, exc: PulseError) -> JSONResponse:
    """Translate domain errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        _persist_backend_error(request, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log and record anything that escaped the domain error hierarchy."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    _persist_backend_error(request, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pulse_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

"""Domain error hierarchy shared by services and the HTTP layer.

Services raise these synchronously; the exception handlers registered in
``pulse_stage.main`` translate them into JSON responses using ``status_code``.
"""

from __future__ import annotations


class PulseError(Exception):
    """Base class for all domain errors raised by Pulse Stage services."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(PulseError):
    """Malformed identifier, out-of-range content, or missing caller id."""

    status_code = 400
    default_message = "Invalid input"


class UnauthorizedError(PulseError):
    """Caller is not authenticated."""

    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(PulseError):
    """Caller is authenticated but not allowed to perform the operation."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(PulseError):
    """Requested resource does not exist or has been soft-deleted."""

    status_code = 404
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str) -> NotFoundError:
        """Build the conventional ``"<resource> not found"`` error."""
        return cls(f"{resource} not found")


class ConflictError(PulseError):
    """Duplicate resource or conflicting state."""

    status_code = 409
    default_message = "Conflict"


class StorageFailureError(PulseError):
    """A storage collaborator failed in a way not otherwise classified."""

    status_code = 500
    default_message = "Database operation failed"

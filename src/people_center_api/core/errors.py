"""Typed application errors.

Services raise these; the handlers registered in ``main.create_app`` turn
them into the ``{"success": false, "error": {...}}`` envelope.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors caused by client input or resource state.

    Args:
        message: Human-readable description, safe to show to callers.
        code: Machine-readable error code (e.g. ``EVENT_FULL``).
        status_code: HTTP status the boundary layer responds with.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "ERROR"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(f"{self.code}: {message}")


class ValidationFailed(AppError):
    """Missing or malformed input."""

    default_code = "VALIDATION_ERROR"


class AuthenticationFailed(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "INVALID_TOKEN"


class PermissionDenied(AppError):
    """Authenticated caller is not allowed to act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class Conflict(AppError):
    """Duplicate of something that must be unique."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class StateError(AppError):
    """The resource's current state does not allow the operation."""

    default_code = "INVALID_STATE"

"""
Application errors raised by the service layer.

Services raise these instead of HTTPException so they stay usable outside a
request; the handler registered in ``captains_log.main`` renders them as
``{"detail": message}`` with the carried status code.

Usage:
    from captains_log.errors import NotFoundError

    raise NotFoundError("Lodging not found")
"""


class AppError(Exception):
    """Base exception for all Captain's Log service errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationFailed(AppError):
    """Request is well-formed but violates a domain rule."""

    status_code = 400


class ForbiddenError(AppError):
    """Entity exists but belongs to another user's trip."""

    status_code = 403


class NotFoundError(AppError):
    """Entity does not exist or is not visible to the caller."""

    status_code = 404

"""Domain errors raised by Cinestream services and repositories.

Each error carries the HTTP status the controller layer answers with, so the
translation to a response happens in exactly one place.
"""

from typing import Any, Optional


class CinestreamError(Exception):
    """Base class for all Cinestream domain errors."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None, *, errors: Optional[list[dict[str, Any]]] = None):
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


class ValidationError(CinestreamError):
    """Input is missing required fields or violates a schema constraint."""

    status_code = 400
    default_detail = "Invalid input"


class NotFoundError(CinestreamError):
    """No document exists for the requested id."""

    status_code = 404
    default_detail = "Document not found"


class ConflictError(CinestreamError):
    """A uniqueness constraint would be violated."""

    status_code = 400
    default_detail = "Document already exists"


class InvalidCredentialsError(CinestreamError):
    """Login failed. Deliberately does not say whether the email or the password was wrong."""

    status_code = 400
    default_detail = "Invalid email or password"


class InvalidOrExpiredTokenError(CinestreamError):
    """A password-reset token is unknown, already used, or past its expiry."""

    status_code = 400
    default_detail = "Invalid or expired token"


class UnauthorizedError(CinestreamError):
    """Bearer token missing, malformed, expired or badly signed."""

    status_code = 401
    default_detail = "Not authenticated"


class InternalError(CinestreamError):
    status_code = 500
    default_detail = "Internal server error"


class EmailDeliveryError(InternalError):
    default_detail = "Could not send email"


class ConfigurationError(InternalError):
    default_detail = "Invalid configuration"


__all__ = [
    "CinestreamError",
    "ConfigurationError",
    "ConflictError",
    "EmailDeliveryError",
    "InternalError",
    "InvalidCredentialsError",
    "InvalidOrExpiredTokenError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]

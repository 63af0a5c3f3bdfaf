"""HaloDompet - Custom exceptions.

Every error carries a user-facing (Indonesian) message and optional details.
The HTTP status is a class attribute so the application-level handler can
render all of them the same way.
"""

from typing import Any


class HaloDompetError(Exception):
    """Base exception for all HaloDompet errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class AuthenticationError(HaloDompetError):
    """Authentication failed."""

    status_code = 401


class AuthorizationError(HaloDompetError):
    """User lacks permission for this action."""

    status_code = 403


class ValidationError(HaloDompetError):
    """Input validation failed."""

    status_code = 400


class NotFoundError(HaloDompetError):
    """Requested resource does not exist (or is hidden from the caller)."""

    status_code = 404


class RateLimitError(HaloDompetError):
    """Too many requests from one client."""

    status_code = 429


class UpstreamError(HaloDompetError):
    """External service (AI provider, webhook) failed."""

    status_code = 500


class ServiceUnavailableError(HaloDompetError):
    """A required external service is not configured or overloaded."""

    status_code = 503

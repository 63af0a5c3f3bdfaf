"""Core module - configuration, exceptions and shared clients."""

from halodompet.core.config import Settings, get_settings
from halodompet.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    HaloDompetError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "HaloDompetError",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "RateLimitError",
    "UpstreamError",
    "ServiceUnavailableError",
]

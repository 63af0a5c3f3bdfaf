"""HaloDompet - Clerk authentication."""

import logging
from typing import Annotated

from clerk_backend_api import AuthenticateRequestOptions, Clerk, authenticate_request
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.config import get_settings
from halodompet.core.exceptions import AuthenticationError
from halodompet.db import get_db
from halodompet.models.user import User
from halodompet.services.user_service import UserService

logger = logging.getLogger(__name__)


class ClerkAuth:
    """Clerk authentication handler.

    Verifies session tokens issued by Clerk and looks up profile data.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self._secret_key = settings.clerk_secret_key
        self._client = Clerk(bearer_auth=settings.clerk_secret_key)

    def verify_token(self, request: Request) -> dict:
        """Verify the Clerk token carried by the request.

        Returns:
            Decoded JWT claims

        Raises:
            AuthenticationError: Missing, invalid or expired token
        """
        try:
            request_state = authenticate_request(
                request,
                AuthenticateRequestOptions(secret_key=self._secret_key),
            )
        except Exception as e:
            logger.warning("Clerk token verification failed: %s", e)
            raise AuthenticationError("Unauthorized. Silakan login terlebih dahulu.") from e

        if not request_state.is_signed_in:
            raise AuthenticationError(
                "Unauthorized. Silakan login terlebih dahulu.",
                getattr(request_state, "message", None),
            )
        return request_state.payload or {}

    def get_user_email(self, clerk_id: str) -> str:
        """Fetch the primary email address from the Clerk API ("" when unavailable)."""
        try:
            user = self._client.users.get(user_id=clerk_id)
        except Exception as e:
            logger.warning("Could not fetch Clerk user %s: %s", clerk_id, e)
            return ""

        if not user.email_addresses:
            return ""
        primary = next(
            (e for e in user.email_addresses if e.id == user.primary_email_address_id),
            user.email_addresses[0],
        )
        return primary.email_address


# Singleton instance
_clerk_auth: ClerkAuth | None = None


def get_clerk_auth() -> ClerkAuth:
    """Get Clerk auth singleton."""
    global _clerk_auth
    if _clerk_auth is None:
        _clerk_auth = ClerkAuth()
    return _clerk_auth


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    clerk: Annotated[ClerkAuth, Depends(get_clerk_auth)],
) -> User:
    """FastAPI dependency to get the current authenticated user.

    The local profile is created on first authentication (with a fresh
    trial); later requests reuse it.
    """
    claims = clerk.verify_token(request)

    clerk_id = claims.get("sub")
    if not clerk_id:
        raise AuthenticationError("Token tidak valid: user ID tidak ditemukan")

    service = UserService(db)
    user = await service.get_by_clerk_id(clerk_id)
    if user is None:
        email = claims.get("email") or clerk.get_user_email(clerk_id)
        user = await service.get_or_create(clerk_id, email)
    return user

"""Ownership guard for user-owned resources.

Handlers resolve a resource, then ask the guard once whether the current
user may touch it:

    transaction = await service.get_transaction(transaction_id)
    ensure_owned(transaction, user, not_found="Transaksi tidak ditemukan")
"""

from enum import Enum
from typing import Protocol

from halodompet.core.exceptions import AuthorizationError, NotFoundError


class AccessDecision(str, Enum):
    """Outcome of an ownership check."""

    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


class Owned(Protocol):
    user_id: int | None


class Principal(Protocol):
    id: int | None


def authorize(resource: Owned | None, user: Principal) -> AccessDecision:
    """Decide whether ``user`` owns ``resource``."""
    if resource is None:
        return AccessDecision.NOT_FOUND
    if resource.user_id != user.id:
        return AccessDecision.FORBIDDEN
    return AccessDecision.ALLOWED


def ensure_owned[T: Owned](
    resource: T | None,
    user: Principal,
    not_found: str = "Data tidak ditemukan",
    forbidden: str = "Akses ditolak",
    hide_foreign: bool = False,
) -> T:
    """Return the resource when owned, otherwise raise 404/403.

    Args:
        resource: Loaded row or None
        user: Current user
        not_found: Message for a missing resource
        forbidden: Message for another user's resource
        hide_foreign: Report another user's resource as missing (404)

    Raises:
        NotFoundError: Resource does not exist (or is hidden)
        AuthorizationError: Resource belongs to another user
    """
    decision = authorize(resource, user)
    if decision == AccessDecision.NOT_FOUND or (
        decision == AccessDecision.FORBIDDEN and hide_foreign
    ):
        raise NotFoundError(not_found)
    if decision == AccessDecision.FORBIDDEN:
        raise AuthorizationError(forbidden)
    return resource  # type: ignore[return-value]

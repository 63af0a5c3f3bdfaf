"""HaloDompet - Admin API endpoints.

Admin-only account management: activation, blocking and trial extension.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from halodompet.api.deps import AdminUser, Admins, CurrentUser
from halodompet.models.user import AccountStatus, User, UserRole
from halodompet.schemas.admin import (
    AdminActionResponse,
    AdminCheckResponse,
    AdminUserAction,
    AdminUserItem,
    AuditLogListResponse,
    AuditLogResponse,
    ExtendTrialRequest,
)
from halodompet.schemas.common import PaginatedResponse
from halodompet.utils.pagination import PaginationParams

router = APIRouter(prefix="/admin", tags=["Admin"])


def _action_response(message: str, user: User) -> AdminActionResponse:
    return AdminActionResponse(
        message=message,
        user_id=user.id,  # type: ignore[arg-type]
        account_status=user.account_status,
        new_end_date=user.trial_ends_at,
    )


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(user: CurrentUser) -> AdminCheckResponse:
    return AdminCheckResponse(is_admin=user.role == UserRole.ADMIN)


# ============ User Management ============


@router.get("/users", response_model=PaginatedResponse[AdminUserItem])
async def list_users(
    admin: AdminUser,
    service: Admins,
    status: AccountStatus | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginatedResponse[AdminUserItem]:
    """List users, newest first."""
    result = await service.list_users(PaginationParams(page, page_size), status, search)
    return PaginatedResponse[AdminUserItem](
        items=[AdminUserItem.model_validate(u) for u in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/users/{user_id}/audit-logs", response_model=AuditLogListResponse)
async def list_audit_logs(user_id: int, admin: AdminUser, service: Admins) -> AuditLogListResponse:
    logs = await service.list_audit_logs(user_id)
    return AuditLogListResponse(logs=[AuditLogResponse.model_validate(log) for log in logs])


@router.post("/activate-user", response_model=AdminActionResponse)
async def activate_user(
    data: AdminUserAction,
    admin: AdminUser,
    service: Admins,
) -> AdminActionResponse:
    user = await service.activate_user(admin, data.user_id)
    return _action_response("User berhasil diaktifkan", user)


@router.post("/block-user", response_model=AdminActionResponse)
async def block_user(
    data: AdminUserAction,
    admin: AdminUser,
    service: Admins,
) -> AdminActionResponse:
    user = await service.block_user(admin, data.user_id)
    return _action_response("User berhasil diblokir", user)


@router.post("/extend-trial", response_model=AdminActionResponse)
async def extend_trial(
    data: ExtendTrialRequest,
    admin: AdminUser,
    service: Admins,
) -> AdminActionResponse:
    """Extend a trial by ``days`` (default 30) from its end date or today, whichever is later."""
    user = await service.extend_trial(admin, data.user_id, data.days)
    return _action_response(f"Trial berhasil diperpanjang {data.days} hari", user)

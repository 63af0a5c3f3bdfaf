"""Admin schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from halodompet.models.audit_log import AdminAction
from halodompet.models.user import AccountStatus, UserRole


class AdminUserAction(BaseModel):
    """Body for activate-user / block-user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int | None = Field(default=None, alias="userId")


class ExtendTrialRequest(AdminUserAction):
    days: int = Field(default=30, ge=1, le=3650)


class AdminActionResponse(BaseModel):
    success: bool = True
    message: str
    user_id: int
    account_status: AccountStatus
    new_end_date: datetime | None = None


class AdminCheckResponse(BaseModel):
    success: bool = True
    is_admin: bool


class AdminUserItem(BaseModel):
    """Row of the admin user list."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole
    account_status: AccountStatus
    trial_started_at: datetime | None = None
    trial_ends_at: datetime | None = None
    is_onboarded: bool
    created_at: datetime


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    admin_id: int
    action: AdminAction
    target_user_id: int
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    success: bool = True
    logs: list[AuditLogResponse]

"""HaloDompet - Admin audit log model."""

from datetime import datetime
from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class AdminAction(str, Enum):
    """Admin actions recorded in the audit log."""

    ACTIVATE_USER = "activate_user"
    BLOCK_USER = "block_user"
    EXTEND_TRIAL = "extend_trial"


class AuditLog(SQLModel, table=True):
    """One admin action against one user account."""

    __tablename__ = "audit_logs"

    id: int | None = Field(default=None, primary_key=True)
    admin_id: int = Field(foreign_key="users.id", index=True)
    action: AdminAction
    target_user_id: int = Field(foreign_key="users.id", index=True)
    old_value: dict[str, Any] | None = Field(default=None, sa_column=sa.Column(sa.JSON))
    new_value: dict[str, Any] | None = Field(default=None, sa_column=sa.Column(sa.JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

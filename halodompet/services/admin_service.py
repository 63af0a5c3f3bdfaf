"""Admin Service - account status management with an audit trail."""

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import NotFoundError, ValidationError
from halodompet.models.audit_log import AdminAction, AuditLog
from halodompet.models.user import AccountStatus, User
from halodompet.utils.helpers import format_utc_datetime
from halodompet.utils.pagination import PaginatedResult, PaginationParams, paginate_query

logger = logging.getLogger(__name__)


def _status_snapshot(user: User) -> dict[str, Any]:
    return {
        "account_status": user.account_status.value,
        "trial_ends_at": format_utc_datetime(user.trial_ends_at),
    }


class AdminService:
    """Service for admin account actions.

    Every status change is written together with its AuditLog row in one
    commit.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(
        self,
        params: PaginationParams,
        status: AccountStatus | None = None,
        search: str | None = None,
    ) -> PaginatedResult[User]:
        """Paginated users, newest first."""
        query = select(User)
        if status is not None:
            query = query.where(User.account_status == status)
        if search:
            query = query.where(User.email.contains(search, autoescape=True))
        query = query.order_by(User.created_at.desc(), User.id.desc())
        return await paginate_query(self.db, query, params)

    async def _get_target(self, user_id: int | None) -> User:
        if user_id is None:
            raise ValidationError("userId is required")
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User tidak ditemukan")
        return user

    async def _apply(
        self,
        admin: User,
        target: User,
        action: AdminAction,
        status: AccountStatus,
        trial_ends_at: datetime | None = None,
    ) -> User:
        old_value = _status_snapshot(target)

        target.account_status = status
        if trial_ends_at is not None:
            target.trial_ends_at = trial_ends_at
        target.updated_at = datetime.utcnow()

        self.db.add(target)
        self.db.add(
            AuditLog(
                admin_id=admin.id,  # type: ignore[arg-type]
                action=action,
                target_user_id=target.id,  # type: ignore[arg-type]
                old_value=old_value,
                new_value=_status_snapshot(target),
            )
        )
        await self.db.commit()
        await self.db.refresh(target)

        logger.info(
            "Admin %s: %s on user %s (%s -> %s)",
            admin.id,
            action.value,
            target.id,
            old_value["account_status"],
            status.value,
        )
        return target

    async def activate_user(self, admin: User, user_id: int | None) -> User:
        target = await self._get_target(user_id)
        return await self._apply(admin, target, AdminAction.ACTIVATE_USER, AccountStatus.ACTIVE)

    async def block_user(self, admin: User, user_id: int | None) -> User:
        target = await self._get_target(user_id)
        return await self._apply(admin, target, AdminAction.BLOCK_USER, AccountStatus.BLOCKED)

    async def extend_trial(self, admin: User, user_id: int | None, days: int = 30) -> User:
        """Extend a trial by ``days`` from the later of its end date and now."""
        target = await self._get_target(user_id)
        now = datetime.utcnow()
        base = max(target.trial_ends_at, now) if target.trial_ends_at else now
        return await self._apply(
            admin,
            target,
            AdminAction.EXTEND_TRIAL,
            AccountStatus.TRIAL,
            trial_ends_at=base + timedelta(days=days),
        )

    async def list_audit_logs(self, target_user_id: int) -> list[AuditLog]:
        result = await self.db.execute(
            select(AuditLog)
            .where(AuditLog.target_user_id == target_user_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        )
        return list(result.scalars().all())

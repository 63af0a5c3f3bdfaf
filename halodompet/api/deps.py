"""Common FastAPI dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.api.auth import get_current_user
from halodompet.core.exceptions import AuthorizationError
from halodompet.core.redis import get_redis
from halodompet.db import get_db
from halodompet.models.user import User, UserRole
from halodompet.services.admin_service import AdminService
from halodompet.services.balance_service import BalanceService
from halodompet.services.budget_service import BudgetService
from halodompet.services.category_service import CategoryService
from halodompet.services.gemini_service import GeminiService
from halodompet.services.rate_limiter import RateLimiter
from halodompet.services.transaction_service import TransactionService
from halodompet.services.user_service import UserService
from halodompet.services.wallet_service import WalletService
from halodompet.utils.helpers import format_utc_datetime
from halodompet.utils.trial import is_trial_expired


async def require_admin(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Ensure the user is an admin."""
    if user.role != UserRole.ADMIN:
        raise AuthorizationError("Forbidden: Not an admin")
    return user


async def require_access(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Ensure the account still has access (active, or trial not yet ended)."""
    if is_trial_expired(user):
        raise AuthorizationError(
            "Masa percobaan Anda telah berakhir. Hubungi admin untuk aktivasi akun.",
            {
                "account_status": user.account_status.value,
                "trial_ends_at": format_utc_datetime(user.trial_ends_at),
            },
        )
    return user


def client_ip(request: Request) -> str:
    """Best-effort client IP behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


# ============ Service factories ============


def get_wallet_service(db: Annotated[AsyncSession, Depends(get_db)]) -> WalletService:
    return WalletService(db)


def get_transaction_service(db: Annotated[AsyncSession, Depends(get_db)]) -> TransactionService:
    return TransactionService(db)


def get_balance_service(db: Annotated[AsyncSession, Depends(get_db)]) -> BalanceService:
    return BalanceService(db)


def get_category_service(db: Annotated[AsyncSession, Depends(get_db)]) -> CategoryService:
    return CategoryService(db)


def get_budget_service(db: Annotated[AsyncSession, Depends(get_db)]) -> BudgetService:
    return BudgetService(db)


def get_user_service(db: Annotated[AsyncSession, Depends(get_db)]) -> UserService:
    return UserService(db)


def get_admin_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AdminService:
    return AdminService(db)


def get_gemini_service() -> GeminiService:
    return GeminiService()


def get_rate_limiter() -> RateLimiter:
    return RateLimiter(get_redis())


# ============ Type Aliases for Common Dependencies ============

# Current user (authenticated)
CurrentUser = Annotated[User, Depends(get_current_user)]

# Authenticated user whose trial has not ended
ActiveUser = Annotated[User, Depends(require_access)]

# Admin
AdminUser = Annotated[User, Depends(require_admin)]

Wallets = Annotated[WalletService, Depends(get_wallet_service)]
Transactions = Annotated[TransactionService, Depends(get_transaction_service)]
Balances = Annotated[BalanceService, Depends(get_balance_service)]
Categories = Annotated[CategoryService, Depends(get_category_service)]
Budgets = Annotated[BudgetService, Depends(get_budget_service)]
Users = Annotated[UserService, Depends(get_user_service)]
Admins = Annotated[AdminService, Depends(get_admin_service)]
Gemini = Annotated[GeminiService, Depends(get_gemini_service)]
Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]

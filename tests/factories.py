"""Row factories shared by fixtures and tests."""

from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.models.user import AccountStatus, User, UserRole
from halodompet.models.wallet import Wallet


async def make_user(
    db: AsyncSession,
    clerk_id: str,
    *,
    role: UserRole = UserRole.USER,
    status: AccountStatus = AccountStatus.TRIAL,
    trial_ends_at: datetime | None = None,
) -> User:
    user = User(
        clerk_id=clerk_id,
        email=f"{clerk_id}@example.com",
        role=role,
        account_status=status,
        trial_started_at=datetime.utcnow(),
        trial_ends_at=trial_ends_at or datetime.utcnow() + timedelta(days=30),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_wallet(
    db: AsyncSession,
    user: User,
    name: str,
    balance: str | int = 0,
    is_default: bool = False,
) -> Wallet:
    wallet = Wallet(user_id=user.id, name=name, balance=Decimal(balance), is_default=is_default)
    db.add(wallet)
    await db.commit()
    await db.refresh(wallet)
    return wallet

"""User Service - account sync, onboarding and profile updates."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from halodompet.core.config import get_settings
from halodompet.core.exceptions import ValidationError
from halodompet.models.user import AccountStatus, User
from halodompet.models.wallet import ONBOARDING_WALLET_NAME
from halodompet.schemas.user import OnboardingRequest, UserUpdate
from halodompet.schemas.wallet import WalletCreate
from halodompet.services.wallet_service import WalletService

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profile business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_clerk_id(self, clerk_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.clerk_id == clerk_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, clerk_id: str, email: str = "") -> User:
        """Find the local user for a Clerk subject, creating it on first sight.

        New accounts start a trial of ``trial_days`` days.
        """
        user = await self.get_by_clerk_id(clerk_id)
        if user is not None:
            if email and user.email != email:
                user.email = email
                user.updated_at = datetime.utcnow()
                self.db.add(user)
                await self.db.commit()
                await self.db.refresh(user)
            return user

        now = datetime.utcnow()
        user = User(
            clerk_id=clerk_id,
            email=email,
            account_status=AccountStatus.TRIAL,
            trial_started_at=now,
            trial_ends_at=now + timedelta(days=get_settings().trial_days),
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(
            "Created user %s for clerk id %s (trial until %s)",
            user.id,
            clerk_id,
            user.trial_ends_at,
        )
        return user

    async def onboard(self, user: User, data: OnboardingRequest) -> User:
        """Complete onboarding.

        Records the starting balance and, for users without wallets, opens a
        default wallet holding it.

        Raises:
            ValidationError: Negative initial balance
        """
        if data.initial_balance < 0:
            raise ValidationError("Saldo awal harus berupa angka dan tidak boleh negatif")

        user.initial_balance = data.initial_balance
        user.current_balance = data.initial_balance
        user.mode = data.mode
        user.webhook_url = data.webhook_url
        user.is_onboarded = True
        user.updated_at = datetime.utcnow()
        self.db.add(user)

        wallet_service = WalletService(self.db)
        if not await wallet_service.list_wallets(user.id):  # type: ignore[arg-type]
            # create_wallet commits the profile changes together with the wallet
            await wallet_service.create_wallet(
                user.id,  # type: ignore[arg-type]
                WalletCreate(
                    name=ONBOARDING_WALLET_NAME,
                    balance=data.initial_balance,
                    is_default=True,
                ),
            )
        else:
            await self.db.commit()

        await self.db.refresh(user)
        logger.info("User %s onboarded (mode=%s)", user.id, user.mode.value)
        return user

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """Partial profile update.

        Raises:
            ValidationError: Negative initial balance
        """
        patch = data.model_dump(exclude_unset=True)
        if patch.get("initial_balance") is not None and patch["initial_balance"] < 0:
            raise ValidationError("Saldo awal harus berupa angka dan tidak boleh negatif")
        for field in ("initial_balance", "current_balance", "mode"):
            if field in patch and patch[field] is None:
                raise ValidationError(f"{field} tidak boleh kosong")

        for field, value in patch.items():
            setattr(user, field, value)
        user.updated_at = datetime.utcnow()

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

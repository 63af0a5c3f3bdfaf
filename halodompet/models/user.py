"""HaloDompet - User model."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    """User roles for access control."""

    USER = "user"
    ADMIN = "admin"


class UserMode(str, Enum):
    """How extracted transactions are delivered."""

    SIMPLE = "simple"  # stored in the app
    WEBHOOK = "webhook"  # forwarded to the user's webhook (e.g. a spreadsheet)


class AccountStatus(str, Enum):
    """Account access status."""

    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"
    BLOCKED = "blocked"


class User(SQLModel, table=True):
    """User model - synced from Clerk on first authentication.

    Attributes:
        id: Auto-increment primary key
        clerk_id: Unique Clerk user ID (token subject)
        email: User email address
        role: User role for admin access
        initial_balance: Balance declared at onboarding ("saldo awal")
        current_balance: Legacy single-balance figure, superseded by wallets
        mode: Delivery mode for AI-extracted transactions
        webhook_url: Target for webhook mode
        account_status: trial / active / expired / blocked
        trial_started_at: When the trial began
        trial_ends_at: When the trial ends (None means no trial deadline)
        is_onboarded: Whether the onboarding form was completed
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    clerk_id: str = Field(max_length=255, unique=True, index=True)
    email: str = Field(default="", max_length=255, index=True)
    role: UserRole = Field(default=UserRole.USER)

    initial_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False, default=Decimal("0")),
    )
    current_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False, default=Decimal("0")),
    )
    mode: UserMode = Field(default=UserMode.SIMPLE)
    webhook_url: str | None = Field(default=None, max_length=1024)

    account_status: AccountStatus = Field(default=AccountStatus.TRIAL, index=True)
    trial_started_at: datetime | None = Field(default=None)
    trial_ends_at: datetime | None = Field(default=None)
    is_onboarded: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

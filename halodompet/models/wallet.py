"""HaloDompet - Wallet model."""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

DEFAULT_WALLET_ICON = "💰"
DEFAULT_WALLET_COLOR = "#10b981"
ONBOARDING_WALLET_NAME = "Dompet Utama"


class Wallet(SQLModel, table=True):
    """Wallet model - a pocket of money owned by one user.

    The balance is owned by the application: it only changes in the same
    database transaction as the ledger row that justifies the change
    (see ``Transaction.balance_delta``), or through reset.

    Attributes:
        id: Auto-increment primary key
        user_id: Owner
        name: Display name
        balance: Signed balance in rupiah
        icon: Emoji icon
        color: Hex color
        is_default: Exactly one wallet per user carries this flag
    """

    __tablename__ = "wallets"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    name: str = Field(max_length=100)
    balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False, default=Decimal("0")),
    )
    icon: str = Field(default=DEFAULT_WALLET_ICON, max_length=16)
    color: str = Field(default=DEFAULT_WALLET_COLOR, max_length=16)
    is_default: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

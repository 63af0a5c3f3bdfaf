"""Wallet schemas - Request/Response DTOs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from halodompet.schemas.common import Money, MoneyInput


class WalletCreate(BaseModel):
    """Request to create a wallet."""

    name: str | None = None
    balance: MoneyInput | None = Field(default=None, description="Opening balance, >= 0")
    icon: str | None = Field(default=None, max_length=16)
    color: str | None = Field(default=None, max_length=16)
    is_default: bool = False


class WalletUpdate(BaseModel):
    """Partial wallet update. Balance is changed through adjustments only."""

    name: str | None = Field(default=None, max_length=100)
    icon: str | None = Field(default=None, max_length=16)
    color: str | None = Field(default=None, max_length=16)
    is_default: bool | None = None


class WalletResponse(BaseModel):
    """Wallet response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    balance: Money
    icon: str
    color: str
    is_default: bool
    created_at: datetime
    updated_at: datetime


class WalletSummaryResponse(BaseModel):
    """GET /api/wallet - wallets with totals."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    wallets: list[WalletResponse]
    total_balance: Money = Field(serialization_alias="totalBalance")
    growth_percentage: float = Field(serialization_alias="growthPercentage")


class WalletListResponse(BaseModel):
    """GET /api/wallets - plain list."""

    success: bool = True
    wallets: list[WalletResponse]
    count: int


class WalletEnvelope(BaseModel):
    success: bool = True
    wallet: WalletResponse

"""User profile schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from halodompet.models.user import AccountStatus, UserMode, UserRole
from halodompet.schemas.common import Money, MoneyInput


class UserResponse(BaseModel):
    """User profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    clerk_id: str
    email: str
    role: UserRole
    initial_balance: Money
    current_balance: Money
    mode: UserMode
    webhook_url: str | None = None
    account_status: AccountStatus
    trial_started_at: datetime | None = None
    trial_ends_at: datetime | None = None
    is_onboarded: bool
    created_at: datetime
    updated_at: datetime


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class OnboardingRequest(BaseModel):
    """POST /api/user - complete onboarding."""

    initial_balance: MoneyInput
    mode: UserMode = UserMode.SIMPLE
    webhook_url: str | None = Field(default=None, max_length=1024)


class UserUpdate(BaseModel):
    """PUT /api/user - partial profile update."""

    initial_balance: MoneyInput | None = None
    current_balance: MoneyInput | None = None
    mode: UserMode | None = None
    webhook_url: str | None = Field(default=None, max_length=1024)


class InitialBalanceRequest(BaseModel):
    initial_balance: MoneyInput


class BalanceCalculation(BaseModel):
    total_expenses: Money
    total_income: Money


class InitialBalanceResponse(BaseModel):
    success: bool = True
    message: str = "Saldo awal berhasil diperbarui"
    initial_balance: Money
    current_balance: Money
    calculation: BalanceCalculation


class ResetData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transactions_deleted: int = Field(serialization_alias="transactionsDeleted")
    wallets_reset: int = Field(serialization_alias="walletsReset")
    user_balance_reset: bool = Field(serialization_alias="userBalanceReset")


class ResetResponse(BaseModel):
    success: bool = True
    message: str = "Semua data transaksi berhasil dihapus dan saldo direset"
    data: ResetData


class TrialStatusResponse(BaseModel):
    success: bool = True
    account_status: AccountStatus
    status_label: str
    trial_ends_at: datetime | None = None
    days_left: int
    is_expired: bool
    show_warning: bool

"""Transaction schemas - Request/Response DTOs for ledger rows and balance flows."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from halodompet.models.transaction import TransactionType
from halodompet.schemas.common import Money, MoneyInput

# =============================================================================
# Ledger rows
# =============================================================================


class TransactionCreate(BaseModel):
    """Manual transaction entry."""

    item: str | None = None
    amount: MoneyInput | None = None
    category: str | None = None
    date: dt.date | None = None
    type: TransactionType = TransactionType.EXPENSE
    wallet_id: int | None = None
    voice_text: str | None = None
    notes: str | None = None
    location: str | None = Field(default=None, max_length=255)
    payment_method: str | None = Field(default=None, max_length=100)


class TransactionUpdate(BaseModel):
    """Partial update of a transaction."""

    item: str | None = Field(default=None, max_length=255)
    amount: MoneyInput | None = None
    category: str | None = Field(default=None, max_length=100)
    date: dt.date | None = None
    voice_text: str | None = None
    notes: str | None = None
    location: str | None = Field(default=None, max_length=255)
    payment_method: str | None = Field(default=None, max_length=100)


class TransactionResponse(BaseModel):
    """Transaction response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    wallet_id: int
    item: str
    amount: Money
    category: str
    date: dt.date
    type: TransactionType
    balance_delta: Money
    related_transaction_id: int | None = None
    voice_text: str | None = None
    notes: str | None = None
    location: str | None = None
    payment_method: str | None = None
    created_at: dt.datetime


class TransactionEnvelope(BaseModel):
    success: bool = True
    transaction: TransactionResponse


class TransactionListResponse(BaseModel):
    success: bool = True
    transactions: list[TransactionResponse]
    count: int


class TransactionDeleteResponse(BaseModel):
    success: bool = True
    message: str
    deleted_ids: list[int]


class CategoryTotal(BaseModel):
    category: str
    total: Money
    count: int
    percentage: float


class TransactionStatsResponse(BaseModel):
    """Spending statistics (expenses only, adjustments excluded)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_spent: Money = Field(serialization_alias="totalSpent")
    total_transactions: int = Field(serialization_alias="totalTransactions")
    average_transaction: Money = Field(serialization_alias="averageTransaction")
    category_summary: list[CategoryTotal] = Field(serialization_alias="categorySummary")


# =============================================================================
# Balance flows
# =============================================================================


class IncomeRequest(BaseModel):
    item: str
    amount: MoneyInput
    date: dt.date | None = None
    notes: str | None = None
    wallet_id: int | None = None


class IncomeWalletInfo(BaseModel):
    previous_balance: Money
    new_balance: Money
    added: Money


class IncomeResponse(BaseModel):
    success: bool = True
    message: str = "Pemasukan berhasil ditambahkan"
    transaction: TransactionResponse
    wallet: IncomeWalletInfo


class TransferRequest(BaseModel):
    source_wallet_id: int
    target_wallet_id: int
    amount: MoneyInput
    date: dt.date
    notes: str | None = None


class TransferData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transfer_out: TransactionResponse = Field(serialization_alias="transferOut")
    transfer_in: TransactionResponse = Field(serialization_alias="transferIn")


class TransferResponse(BaseModel):
    success: bool = True
    message: str = "Transfer berhasil"
    data: TransferData


class AdjustmentRequest(BaseModel):
    target_balance: MoneyInput
    notes: str | None = None
    wallet_id: int | None = None


class AdjustmentInfo(BaseModel):
    previous_balance: Money
    new_balance: Money
    difference: Money
    type: str = Field(description="income when the balance went up, expense when it went down")


class AdjustmentResponse(BaseModel):
    success: bool = True
    message: str = "Saldo berhasil disesuaikan"
    transaction: TransactionResponse
    adjustment: AdjustmentInfo

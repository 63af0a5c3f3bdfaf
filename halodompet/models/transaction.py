"""HaloDompet - Transaction ledger model."""

import datetime as dt
from decimal import Decimal
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class TransactionType(str, Enum):
    """Transaction type.

    Transfer legs are stored as EXPENSE (source) / INCOME (target) rows
    linked through ``related_transaction_id``.
    """

    INCOME = "income"
    EXPENSE = "expense"
    ADJUSTMENT = "adjustment"


# Fixed categories written by the balance flows
INCOME_CATEGORY = "Pemasukan"
TRANSFER_OUT_CATEGORY = "Transfer Keluar"
TRANSFER_IN_CATEGORY = "Transfer Masuk"
ADJUSTMENT_CATEGORY = "Adjustment"
ADJUSTMENT_ITEM = "Penyesuaian Saldo"


class Transaction(SQLModel, table=True):
    """Transaction - one ledger row against one wallet.

    Attributes:
        id: Auto-increment primary key
        user_id: Owner
        wallet_id: Wallet whose balance the row affected
        item: What the money was for
        amount: Always positive
        category: Category name
        date: Calendar date of the transaction
        type: income / expense / adjustment
        balance_delta: Signed change applied to the wallet when written
        related_transaction_id: Other leg of a transfer
        voice_text: Raw transcript the row was extracted from
        notes: Free text (adjustments record before/after here)
    """

    __tablename__ = "transactions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    wallet_id: int = Field(foreign_key="wallets.id", index=True)

    item: str = Field(max_length=255)
    amount: Decimal = Field(sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False))
    category: str = Field(max_length=100, index=True)
    date: dt.date = Field(default_factory=dt.date.today, index=True)
    type: TransactionType = Field(default=TransactionType.EXPENSE, index=True)
    balance_delta: Decimal = Field(
        default=Decimal("0"),
        sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False, default=Decimal("0")),
    )
    related_transaction_id: int | None = Field(default=None, foreign_key="transactions.id")

    voice_text: str | None = Field(default=None, sa_column=sa.Column(sa.Text, nullable=True))
    notes: str | None = Field(default=None, sa_column=sa.Column(sa.Text, nullable=True))
    location: str | None = Field(default=None, max_length=255)
    payment_method: str | None = Field(default=None, max_length=100)

    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow, index=True)

    @property
    def is_transfer_leg(self) -> bool:
        return self.related_transaction_id is not None

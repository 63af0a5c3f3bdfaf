"""Balance Service - multi-step balance flows.

Income, transfer, adjustment and reset each run inside one DB transaction:
rows are flushed, balances are moved, and a single commit publishes the
result. Any failure rolls the whole flow back.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import NotFoundError, ValidationError
from halodompet.models.transaction import (
    ADJUSTMENT_CATEGORY,
    ADJUSTMENT_ITEM,
    INCOME_CATEGORY,
    TRANSFER_IN_CATEGORY,
    TRANSFER_OUT_CATEGORY,
    Transaction,
    TransactionType,
)
from halodompet.models.user import User
from halodompet.models.wallet import Wallet
from halodompet.services.wallet_service import WalletService
from halodompet.utils.helpers import format_rupiah, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_ADJUSTMENT_NOTE = "Koreksi saldo manual"


@dataclass
class IncomeResult:
    transaction: Transaction
    previous_balance: Decimal
    new_balance: Decimal
    added: Decimal


@dataclass
class TransferResult:
    transfer_out: Transaction
    transfer_in: Transaction


@dataclass
class AdjustmentResult:
    transaction: Transaction
    previous_balance: Decimal
    new_balance: Decimal
    difference: Decimal

    @property
    def direction(self) -> str:
        return "income" if self.difference > 0 else "expense"


@dataclass
class ResetResult:
    transactions_deleted: int
    wallets_reset: int
    user_balance_reset: bool


@dataclass
class InitialBalanceResult:
    initial_balance: Decimal
    current_balance: Decimal
    total_expenses: Decimal
    total_income: Decimal


def adjustment_note(previous: Decimal, target: Decimal, notes: str | None = None) -> str:
    """Describe a reconciliation, e.g. "Koreksi saldo manual (100.000 → 75.000, -25.000)"."""
    text = (notes or "").strip() or DEFAULT_ADJUSTMENT_NOTE
    return (
        f"{text} ({format_rupiah(previous)} → {format_rupiah(target)}, "
        f"{format_rupiah(target - previous, signed=True)})"
    )


class BalanceService:
    """Orchestrates flows that change wallet balances."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.wallets = WalletService(db)

    async def add_income(
        self,
        user_id: int,
        item: str,
        amount: Decimal,
        tx_date: date | None = None,
        notes: str | None = None,
        wallet_id: int | None = None,
    ) -> IncomeResult:
        """Record income on a wallet (default wallet when none is given).

        Raises:
            ValidationError: Empty item, non-positive amount, no default wallet
            NotFoundError: wallet_id is not one of the user's wallets
        """
        item = (item or "").strip()
        if not item:
            raise ValidationError("Item dan jumlah harus diisi")
        if amount <= 0:
            raise ValidationError("Jumlah pemasukan harus lebih dari 0")

        try:
            wallet = await self.wallets.resolve_wallet(user_id, wallet_id)
            previous = wallet.balance

            transaction = Transaction(
                user_id=user_id,
                wallet_id=wallet.id,  # type: ignore[arg-type]
                item=item,
                amount=amount,
                category=INCOME_CATEGORY,
                date=tx_date or date.today(),
                type=TransactionType.INCOME,
                balance_delta=amount,
                notes=notes,
            )
            wallet.balance = previous + amount
            self.db.add_all([transaction, wallet])
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(transaction)
        logger.info("Income %s added to wallet %s of user %s", amount, wallet.id, user_id)
        return IncomeResult(
            transaction=transaction,
            previous_balance=previous,
            new_balance=previous + amount,
            added=amount,
        )

    async def transfer(
        self,
        user_id: int,
        source_wallet_id: int,
        target_wallet_id: int,
        amount: Decimal,
        tx_date: date | None = None,
        notes: str | None = None,
    ) -> TransferResult:
        """Move money between two of the user's wallets as two linked rows.

        Raises:
            ValidationError: Same wallet on both sides or non-positive amount
            NotFoundError: Either wallet missing or not owned by the user
        """
        if source_wallet_id == target_wallet_id:
            raise ValidationError("Dompet asal dan dompet tujuan tidak boleh sama")
        if amount <= 0:
            raise ValidationError("Jumlah transfer harus lebih dari 0")

        try:
            # Lock both rows in a stable order
            result = await self.db.execute(
                select(Wallet)
                .where(
                    Wallet.user_id == user_id,
                    Wallet.id.in_([source_wallet_id, target_wallet_id]),
                )
                .order_by(Wallet.id)
                .with_for_update()
            )
            wallets = {w.id: w for w in result.scalars().all()}
            source = wallets.get(source_wallet_id)
            target = wallets.get(target_wallet_id)
            if source is None or target is None:
                raise NotFoundError("Salah satu atau kedua dompet tidak ditemukan")

            tx_date = tx_date or date.today()
            transfer_out = Transaction(
                user_id=user_id,
                wallet_id=source_wallet_id,
                item=f"Transfer ke {target.name}",
                amount=amount,
                category=TRANSFER_OUT_CATEGORY,
                date=tx_date,
                type=TransactionType.EXPENSE,
                balance_delta=-amount,
                notes=notes,
            )
            self.db.add(transfer_out)
            await self.db.flush()

            transfer_in = Transaction(
                user_id=user_id,
                wallet_id=target_wallet_id,
                item=f"Transfer dari {source.name}",
                amount=amount,
                category=TRANSFER_IN_CATEGORY,
                date=tx_date,
                type=TransactionType.INCOME,
                balance_delta=amount,
                notes=notes,
                related_transaction_id=transfer_out.id,
            )
            self.db.add(transfer_in)
            await self.db.flush()

            transfer_out.related_transaction_id = transfer_in.id
            source.balance = source.balance - amount
            target.balance = target.balance + amount
            self.db.add_all([transfer_out, source, target])
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(transfer_out)
        await self.db.refresh(transfer_in)
        logger.info(
            "Transfer %s from wallet %s to wallet %s (tx %s/%s)",
            amount,
            source_wallet_id,
            target_wallet_id,
            transfer_out.id,
            transfer_in.id,
        )
        return TransferResult(transfer_out=transfer_out, transfer_in=transfer_in)

    async def adjust(
        self,
        user_id: int,
        target_balance: Decimal,
        notes: str | None = None,
        wallet_id: int | None = None,
    ) -> AdjustmentResult:
        """Reconcile a wallet to an exact target balance.

        Writes one adjustment row carrying the signed difference, then sets
        the wallet balance to ``target_balance``.

        Raises:
            ValidationError: Target equals the current balance, no default wallet
            NotFoundError: wallet_id is not one of the user's wallets
        """
        try:
            wallet = await self.wallets.resolve_wallet(user_id, wallet_id)
            previous = wallet.balance
            difference = target_balance - previous
            if difference == 0:
                raise ValidationError(
                    "Saldo target sama dengan saldo saat ini. Tidak perlu penyesuaian."
                )

            transaction = Transaction(
                user_id=user_id,
                wallet_id=wallet.id,  # type: ignore[arg-type]
                item=ADJUSTMENT_ITEM,
                amount=abs(difference),
                category=ADJUSTMENT_CATEGORY,
                date=date.today(),
                type=TransactionType.ADJUSTMENT,
                balance_delta=difference,
                notes=adjustment_note(previous, target_balance, notes),
            )
            wallet.balance = target_balance
            self.db.add_all([transaction, wallet])
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(transaction)
        logger.info(
            "Adjusted wallet %s of user %s: %s -> %s",
            wallet.id,
            user_id,
            previous,
            target_balance,
        )
        return AdjustmentResult(
            transaction=transaction,
            previous_balance=previous,
            new_balance=target_balance,
            difference=difference,
        )

    async def reset(self, user: User) -> ResetResult:
        """Delete every transaction and zero every balance of the user.

        Safe to repeat: resetting an empty account succeeds with zero counts.
        """
        try:
            await self.db.execute(
                update(Transaction)
                .where(Transaction.user_id == user.id)
                .values(related_transaction_id=None)
            )
            deleted = await self.db.execute(
                delete(Transaction).where(Transaction.user_id == user.id)
            )
            wallets = await self.db.execute(
                update(Wallet).where(Wallet.user_id == user.id).values(balance=Decimal("0"))
            )
            user.current_balance = Decimal("0")
            self.db.add(user)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        result = ResetResult(
            transactions_deleted=deleted.rowcount or 0,
            wallets_reset=wallets.rowcount or 0,
            user_balance_reset=True,
        )
        logger.info(
            "Reset user %s: %s transactions deleted, %s wallets zeroed",
            user.id,
            result.transactions_deleted,
            result.wallets_reset,
        )
        return result

    async def update_initial_balance(
        self, user: User, initial_balance: Decimal
    ) -> InitialBalanceResult:
        """Set the declared starting balance and recompute the legacy current balance.

        current = initial - expenses + income (adjustments excluded).

        Raises:
            ValidationError: Negative initial balance
        """
        if initial_balance < 0:
            raise ValidationError("Saldo awal tidak boleh negatif")

        result = await self.db.execute(
            select(Transaction.type, func.sum(Transaction.amount))
            .where(
                Transaction.user_id == user.id,
                Transaction.type.in_([TransactionType.INCOME, TransactionType.EXPENSE]),
            )
            .group_by(Transaction.type)
        )
        totals = {tx_type: to_decimal(total) for tx_type, total in result.all()}
        total_income = totals.get(TransactionType.INCOME, Decimal("0"))
        total_expenses = totals.get(TransactionType.EXPENSE, Decimal("0"))

        user.initial_balance = initial_balance
        user.current_balance = initial_balance - total_expenses + total_income
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        return InitialBalanceResult(
            initial_balance=user.initial_balance,
            current_balance=user.current_balance,
            total_expenses=total_expenses,
            total_income=total_income,
        )

"""Transaction Service - ledger rows and their effect on wallet balances.

Every write here moves the wallet balance in the same DB transaction as the
row it belongs to, using ``Transaction.balance_delta`` as the signed effect:
create applies it, delete reverses it, an amount edit applies the change.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import NotFoundError, ValidationError
from halodompet.models.transaction import Transaction, TransactionType
from halodompet.models.wallet import Wallet
from halodompet.schemas.transaction import TransactionCreate, TransactionUpdate
from halodompet.services.wallet_service import WalletService
from halodompet.utils.helpers import round_percentage, to_decimal

logger = logging.getLogger(__name__)

AMOUNT_MUST_BE_POSITIVE = "Jumlah harus lebih dari 0"


def signed_delta(tx_type: TransactionType, amount: Decimal) -> Decimal:
    """Balance effect of an income/expense row."""
    return amount if tx_type == TransactionType.INCOME else -amount


@dataclass
class TransactionFilters:
    """Filters for listing transactions."""

    limit: int = 50
    offset: int = 0
    start_date: date | None = None
    end_date: date | None = None
    category: str | None = None
    wallet_id: int | None = None
    type: TransactionType | None = None


@dataclass
class CategoryStat:
    category: str
    total: Decimal
    count: int
    percentage: float


@dataclass
class TransactionStats:
    total_spent: Decimal
    total_transactions: int
    average_transaction: Decimal
    category_summary: list[CategoryStat]


class TransactionService:
    """Service for transaction business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.wallets = WalletService(db)

    # ============ Queries ============

    async def get_transaction(self, transaction_id: int) -> Transaction | None:
        return await self.db.get(Transaction, transaction_id)

    async def list_transactions(
        self, user_id: int, filters: TransactionFilters | None = None
    ) -> list[Transaction]:
        """List a user's transactions, newest first."""
        filters = filters or TransactionFilters()
        query = select(Transaction).where(Transaction.user_id == user_id)

        if filters.start_date:
            query = query.where(Transaction.date >= filters.start_date)
        if filters.end_date:
            query = query.where(Transaction.date <= filters.end_date)
        if filters.category:
            query = query.where(Transaction.category == filters.category)
        if filters.wallet_id is not None:
            query = query.where(Transaction.wallet_id == filters.wallet_id)
        if filters.type:
            query = query.where(Transaction.type == filters.type)

        query = (
            query.order_by(
                Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
            )
            .offset(filters.offset)
            .limit(filters.limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_stats(
        self,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> TransactionStats:
        """Spending statistics over expenses.

        Adjustments and transfer legs are not spending and are left out.
        """
        conditions = [
            Transaction.user_id == user_id,
            Transaction.type == TransactionType.EXPENSE,
            Transaction.related_transaction_id.is_(None),
        ]
        if start_date:
            conditions.append(Transaction.date >= start_date)
        if end_date:
            conditions.append(Transaction.date <= end_date)

        result = await self.db.execute(
            select(
                Transaction.category,
                func.sum(Transaction.amount),
                func.count(Transaction.id),
            )
            .where(*conditions)
            .group_by(Transaction.category)
        )
        rows = [(category, to_decimal(total), count) for category, total, count in result.all()]

        total_spent = sum((total for _, total, _ in rows), Decimal("0"))
        total_transactions = sum(count for _, _, count in rows)
        average = total_spent / total_transactions if total_transactions else Decimal("0")

        summary = [
            CategoryStat(
                category=category,
                total=total,
                count=count,
                percentage=round_percentage(total / total_spent * 100) if total_spent else 0.0,
            )
            for category, total, count in rows
        ]
        summary.sort(key=lambda s: s.total, reverse=True)

        return TransactionStats(
            total_spent=total_spent,
            total_transactions=total_transactions,
            average_transaction=average.quantize(Decimal("0.01")),
            category_summary=summary,
        )

    # ============ Mutations ============

    async def create_transaction(self, user_id: int, data: TransactionCreate) -> Transaction:
        """Record a manual income/expense and move the wallet balance.

        Raises:
            ValidationError: Missing fields, non-positive amount, no default wallet
            NotFoundError: wallet_id is not one of the user's wallets
        """
        item = (data.item or "").strip()
        category = (data.category or "").strip()
        if not item or data.amount is None or not category or data.date is None:
            raise ValidationError("Item, jumlah, kategori, dan tanggal harus diisi")
        if data.amount <= 0:
            raise ValidationError(AMOUNT_MUST_BE_POSITIVE)
        if data.type == TransactionType.ADJUSTMENT:
            raise ValidationError("Gunakan penyesuaian saldo untuk mengoreksi saldo dompet")

        wallet = await self.wallets.resolve_wallet(user_id, data.wallet_id)
        delta = signed_delta(data.type, data.amount)

        transaction = Transaction(
            user_id=user_id,
            wallet_id=wallet.id,  # type: ignore[arg-type]
            item=item,
            amount=data.amount,
            category=category,
            date=data.date,
            type=data.type,
            balance_delta=delta,
            voice_text=data.voice_text,
            notes=data.notes,
            location=data.location,
            payment_method=data.payment_method,
        )
        wallet.balance = wallet.balance + delta
        self.db.add_all([transaction, wallet])
        await self.db.commit()
        await self.db.refresh(transaction)

        logger.info(
            "Created %s transaction %s on wallet %s (%s)",
            data.type.value,
            transaction.id,
            wallet.id,
            delta,
        )
        return transaction

    async def update_transaction(
        self, transaction: Transaction, data: TransactionUpdate
    ) -> Transaction:
        """Apply a partial update; an amount change re-applies the difference.

        Raises:
            ValidationError: Non-positive amount, or an amount change on an
                adjustment or transfer leg
        """
        patch = data.model_dump(exclude_unset=True)

        for field, label in (("item", "Item"), ("category", "Kategori")):
            if field in patch:
                value = (patch[field] or "").strip()
                if not value:
                    raise ValidationError(f"{label} tidak boleh kosong")
                patch[field] = value
        if "date" in patch and patch["date"] is None:
            raise ValidationError("Tanggal tidak boleh kosong")

        new_amount = patch.pop("amount", None)
        if new_amount is not None and new_amount != transaction.amount:
            if new_amount <= 0:
                raise ValidationError(AMOUNT_MUST_BE_POSITIVE)
            if transaction.type == TransactionType.ADJUSTMENT:
                raise ValidationError(
                    "Jumlah penyesuaian saldo tidak bisa diubah. Buat penyesuaian baru."
                )
            if transaction.is_transfer_leg:
                raise ValidationError(
                    "Jumlah transfer tidak bisa diubah. Hapus lalu buat transfer baru."
                )

            wallet = await self._lock_wallet(transaction.wallet_id)
            new_delta = signed_delta(transaction.type, new_amount)
            wallet.balance = wallet.balance + (new_delta - transaction.balance_delta)
            transaction.amount = new_amount
            transaction.balance_delta = new_delta
            self.db.add(wallet)

        for field, value in patch.items():
            setattr(transaction, field, value)

        self.db.add(transaction)
        await self.db.commit()
        await self.db.refresh(transaction)
        return transaction

    async def delete_transaction(self, transaction: Transaction) -> list[int]:
        """Delete a transaction and reverse its balance effect.

        Deleting either leg of a transfer deletes both legs.

        Returns:
            IDs of the deleted rows
        """
        rows = [transaction]
        if transaction.related_transaction_id is not None:
            partner = await self.db.get(Transaction, transaction.related_transaction_id)
            if partner is not None:
                rows.append(partner)

        try:
            # Break the self-references before deleting either leg
            for row in rows:
                row.related_transaction_id = None
                self.db.add(row)
            await self.db.flush()

            for row in rows:
                wallet = await self._lock_wallet(row.wallet_id)
                wallet.balance = wallet.balance - row.balance_delta
                self.db.add(wallet)
                await self.db.delete(row)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        deleted_ids = [row.id for row in rows]  # type: ignore[misc]
        logger.info("Deleted transactions %s", deleted_ids)
        return deleted_ids  # type: ignore[return-value]

    async def _lock_wallet(self, wallet_id: int) -> Wallet:
        result = await self.db.execute(
            select(Wallet).where(Wallet.id == wallet_id).with_for_update()
        )
        wallet = result.scalar_one_or_none()
        if wallet is None:
            raise NotFoundError("Dompet tidak ditemukan")
        return wallet

"""Budget Service - monthly category limits and spending against them."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import ValidationError
from halodompet.models.budget import Budget
from halodompet.models.transaction import Transaction, TransactionType
from halodompet.utils.helpers import month_range, round_percentage, to_decimal


@dataclass
class BudgetUsage:
    category: str
    limit_amount: Decimal
    spent_amount: Decimal

    @property
    def remaining_amount(self) -> Decimal:
        return self.limit_amount - self.spent_amount

    @property
    def percentage_used(self) -> float:
        if self.limit_amount <= 0:
            return 0.0
        return round_percentage(self.spent_amount / self.limit_amount * 100)


class BudgetService:
    """Service for budget business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_budgets(self, user_id: int) -> list[Budget]:
        result = await self.db.execute(
            select(Budget).where(Budget.user_id == user_id).order_by(Budget.category)
        )
        return list(result.scalars().all())

    async def upsert_budget(self, user_id: int, category: str, limit_amount: Decimal) -> Budget:
        """Create or replace the limit for a category.

        Raises:
            ValidationError: Empty category or negative limit
        """
        category = category.strip()
        if not category:
            raise ValidationError("Kategori harus diisi")
        if limit_amount < 0:
            raise ValidationError("Batas anggaran tidak boleh negatif")

        result = await self.db.execute(
            select(Budget).where(Budget.user_id == user_id, Budget.category == category)
        )
        budget = result.scalar_one_or_none()
        if budget is None:
            budget = Budget(user_id=user_id, category=category, limit_amount=limit_amount)
        else:
            budget.limit_amount = limit_amount
            budget.updated_at = datetime.utcnow()

        self.db.add(budget)
        await self.db.commit()
        await self.db.refresh(budget)
        return budget

    async def delete_budget(self, user_id: int, category: str) -> bool:
        result = await self.db.execute(
            select(Budget).where(Budget.user_id == user_id, Budget.category == category)
        )
        budget = result.scalar_one_or_none()
        if budget is None:
            return False
        await self.db.delete(budget)
        await self.db.commit()
        return True

    async def get_summary(self, user_id: int, today: date | None = None) -> list[BudgetUsage]:
        """Spending per budget for the current month, highest usage first.

        Only expenses count; transfer legs and adjustments are not spending.
        """
        budgets = await self.list_budgets(user_id)
        if not budgets:
            return []

        start, end = month_range(today)
        result = await self.db.execute(
            select(Transaction.category, func.sum(Transaction.amount))
            .where(
                Transaction.user_id == user_id,
                Transaction.type == TransactionType.EXPENSE,
                Transaction.related_transaction_id.is_(None),
                Transaction.date >= start,
                Transaction.date <= end,
            )
            .group_by(Transaction.category)
        )
        spent = {category: to_decimal(total) for category, total in result.all()}

        usage = [
            BudgetUsage(
                category=b.category,
                limit_amount=b.limit_amount,
                spent_amount=spent.get(b.category, Decimal("0")),
            )
            for b in budgets
        ]
        usage.sort(key=lambda u: u.percentage_used, reverse=True)
        return usage

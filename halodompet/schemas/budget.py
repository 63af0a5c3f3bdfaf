"""Budget schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from halodompet.schemas.common import Money, MoneyInput


class BudgetUpsert(BaseModel):
    category: str = Field(min_length=1, max_length=100)
    limit_amount: MoneyInput


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category: str
    limit_amount: Money
    created_at: datetime
    updated_at: datetime


class BudgetSummaryItem(BaseModel):
    """Spending against one budget for the current month."""

    category: str
    limit_amount: Money
    spent_amount: Money
    remaining_amount: Money
    percentage_used: float


class BudgetListResponse(BaseModel):
    success: bool = True
    budgets: list[BudgetResponse]


class BudgetSummaryResponse(BaseModel):
    success: bool = True
    budgets: list[BudgetSummaryItem]


class BudgetEnvelope(BaseModel):
    success: bool = True
    budget: BudgetResponse

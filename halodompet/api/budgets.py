"""HaloDompet - Budget API endpoints."""

from fastapi import APIRouter

from halodompet.api.deps import Budgets, CurrentUser
from halodompet.core.exceptions import NotFoundError
from halodompet.schemas.budget import (
    BudgetEnvelope,
    BudgetListResponse,
    BudgetResponse,
    BudgetSummaryItem,
    BudgetSummaryResponse,
    BudgetUpsert,
)
from halodompet.schemas.common import MessageResponse

router = APIRouter(prefix="/budget", tags=["Budgets"])


@router.get("", response_model=BudgetListResponse)
async def list_budgets(user: CurrentUser, service: Budgets) -> BudgetListResponse:
    budgets = await service.list_budgets(user.id)
    return BudgetListResponse(budgets=[BudgetResponse.model_validate(b) for b in budgets])


@router.put("", response_model=BudgetEnvelope)
async def upsert_budget(data: BudgetUpsert, user: CurrentUser, service: Budgets) -> BudgetEnvelope:
    """Create or replace the monthly limit of a category."""
    budget = await service.upsert_budget(user.id, data.category, data.limit_amount)
    return BudgetEnvelope(budget=BudgetResponse.model_validate(budget))


@router.get("/summary", response_model=BudgetSummaryResponse)
async def get_budget_summary(user: CurrentUser, service: Budgets) -> BudgetSummaryResponse:
    """This month's spending per budget, highest usage first."""
    usage = await service.get_summary(user.id)
    return BudgetSummaryResponse(
        budgets=[
            BudgetSummaryItem(
                category=u.category,
                limit_amount=u.limit_amount,
                spent_amount=u.spent_amount,
                remaining_amount=u.remaining_amount,
                percentage_used=u.percentage_used,
            )
            for u in usage
        ]
    )


@router.delete("/{category}", response_model=MessageResponse)
async def delete_budget(category: str, user: CurrentUser, service: Budgets) -> MessageResponse:
    if not await service.delete_budget(user.id, category):
        raise NotFoundError("Anggaran tidak ditemukan")
    return MessageResponse(message="Anggaran berhasil dihapus")

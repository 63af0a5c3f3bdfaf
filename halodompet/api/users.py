"""HaloDompet - User profile API endpoints."""

from fastapi import APIRouter

from halodompet.api.deps import Balances, CurrentUser, Users
from halodompet.schemas.user import (
    BalanceCalculation,
    InitialBalanceRequest,
    InitialBalanceResponse,
    OnboardingRequest,
    ResetData,
    ResetResponse,
    TrialStatusResponse,
    UserEnvelope,
    UserResponse,
    UserUpdate,
)
from halodompet.utils.trial import (
    get_days_left,
    get_status_label,
    is_trial_expired,
    should_show_warning,
)

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("", response_model=UserEnvelope)
async def get_profile(user: CurrentUser) -> UserEnvelope:
    """Get current user's profile."""
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("", response_model=UserEnvelope)
async def complete_onboarding(
    data: OnboardingRequest,
    user: CurrentUser,
    service: Users,
) -> UserEnvelope:
    """Complete onboarding: starting balance, mode and the first wallet."""
    user = await service.onboard(user, data)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.put("", response_model=UserEnvelope)
async def update_profile(data: UserUpdate, user: CurrentUser, service: Users) -> UserEnvelope:
    user = await service.update_profile(user, data)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.delete("/reset", response_model=ResetResponse)
async def reset_account(user: CurrentUser, service: Balances) -> ResetResponse:
    """Delete all transactions and zero every balance in one DB transaction."""
    result = await service.reset(user)
    return ResetResponse(
        data=ResetData(
            transactions_deleted=result.transactions_deleted,
            wallets_reset=result.wallets_reset,
            user_balance_reset=result.user_balance_reset,
        )
    )


@router.patch("/update-saldo-awal", response_model=InitialBalanceResponse)
async def update_initial_balance(
    data: InitialBalanceRequest,
    user: CurrentUser,
    service: Balances,
) -> InitialBalanceResponse:
    """Change the starting balance and recompute the current balance from history."""
    result = await service.update_initial_balance(user, data.initial_balance)
    return InitialBalanceResponse(
        initial_balance=result.initial_balance,
        current_balance=result.current_balance,
        calculation=BalanceCalculation(
            total_expenses=result.total_expenses,
            total_income=result.total_income,
        ),
    )


@router.get("/trial-status", response_model=TrialStatusResponse)
async def get_trial_status(user: CurrentUser) -> TrialStatusResponse:
    """Trial/access state as the client needs it for banners and redirects."""
    return TrialStatusResponse(
        account_status=user.account_status,
        status_label=get_status_label(user.account_status),
        trial_ends_at=user.trial_ends_at,
        days_left=get_days_left(user.trial_ends_at),
        is_expired=is_trial_expired(user),
        show_warning=should_show_warning(user),
    )

"""HaloDompet - Transaction API endpoints.

Manual ledger entries plus the balance flows (income, transfer, adjustment).
Routes with a fixed path segment are registered before ``/transaction/{id}``.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from halodompet.api.deps import ActiveUser, Balances, CurrentUser, Transactions
from halodompet.core.exceptions import ValidationError
from halodompet.models.transaction import Transaction, TransactionType
from halodompet.models.user import User
from halodompet.schemas.transaction import (
    AdjustmentInfo,
    AdjustmentRequest,
    AdjustmentResponse,
    CategoryTotal,
    IncomeRequest,
    IncomeResponse,
    IncomeWalletInfo,
    TransactionCreate,
    TransactionDeleteResponse,
    TransactionEnvelope,
    TransactionListResponse,
    TransactionResponse,
    TransactionStatsResponse,
    TransactionUpdate,
    TransferData,
    TransferRequest,
    TransferResponse,
)
from halodompet.services.transaction_service import TransactionFilters, TransactionService
from halodompet.utils.ownership import ensure_owned

router = APIRouter(prefix="/transaction", tags=["Transactions"])

TRANSACTION_NOT_FOUND = "Transaksi tidak ditemukan"
TRANSACTION_FORBIDDEN = "Anda tidak memiliki akses ke transaksi ini"


async def _owned_transaction(
    service: TransactionService, transaction_id: int, user: User
) -> Transaction:
    transaction = await service.get_transaction(transaction_id)
    return ensure_owned(
        transaction, user, not_found=TRANSACTION_NOT_FOUND, forbidden=TRANSACTION_FORBIDDEN
    )


# ============ Ledger ============


@router.post("", response_model=TransactionEnvelope)
async def create_transaction(
    data: TransactionCreate,
    user: ActiveUser,
    service: Transactions,
) -> TransactionEnvelope:
    """Record a manual income or expense on a wallet (default wallet when omitted)."""
    transaction = await service.create_transaction(user.id, data)
    return TransactionEnvelope(transaction=TransactionResponse.model_validate(transaction))


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    user: CurrentUser,
    service: Transactions,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
    category: str | None = None,
    wallet_id: int | None = None,
    type: TransactionType | None = None,
) -> TransactionListResponse:
    """List transactions, newest first."""
    transactions = await service.list_transactions(
        user.id,
        TransactionFilters(
            limit=limit,
            offset=offset,
            start_date=start_date,
            end_date=end_date,
            category=category,
            wallet_id=wallet_id,
            type=type,
        ),
    )
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.delete("", response_model=TransactionDeleteResponse)
async def delete_transaction_by_query(
    user: CurrentUser,
    service: Transactions,
    id: int | None = None,
) -> TransactionDeleteResponse:
    """Delete by ``?id=``. Same rules as ``DELETE /transaction/{id}``."""
    if id is None:
        raise ValidationError("ID transaksi harus diisi")
    transaction = await _owned_transaction(service, id, user)
    deleted_ids = await service.delete_transaction(transaction)
    return TransactionDeleteResponse(message="Transaksi berhasil dihapus", deleted_ids=deleted_ids)


@router.get("/stats", response_model=TransactionStatsResponse)
async def get_transaction_stats(
    user: CurrentUser,
    service: Transactions,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
) -> TransactionStatsResponse:
    """Spending statistics for a date range."""
    stats = await service.get_stats(user.id, start_date, end_date)
    return TransactionStatsResponse(
        total_spent=stats.total_spent,
        total_transactions=stats.total_transactions,
        average_transaction=stats.average_transaction,
        category_summary=[
            CategoryTotal(
                category=s.category, total=s.total, count=s.count, percentage=s.percentage
            )
            for s in stats.category_summary
        ],
    )


# ============ Balance flows ============


@router.post("/income", response_model=IncomeResponse)
async def add_income(data: IncomeRequest, user: ActiveUser, service: Balances) -> IncomeResponse:
    """Add income to a wallet and report the balance before and after."""
    result = await service.add_income(
        user.id,
        item=data.item,
        amount=data.amount,
        tx_date=data.date,
        notes=data.notes,
        wallet_id=data.wallet_id,
    )
    return IncomeResponse(
        transaction=TransactionResponse.model_validate(result.transaction),
        wallet=IncomeWalletInfo(
            previous_balance=result.previous_balance,
            new_balance=result.new_balance,
            added=result.added,
        ),
    )


@router.post("/transfer", response_model=TransferResponse)
async def transfer(data: TransferRequest, user: ActiveUser, service: Balances) -> TransferResponse:
    """Move money between two of the user's wallets."""
    result = await service.transfer(
        user.id,
        source_wallet_id=data.source_wallet_id,
        target_wallet_id=data.target_wallet_id,
        amount=data.amount,
        tx_date=data.date,
        notes=data.notes,
    )
    return TransferResponse(
        data=TransferData(
            transfer_out=TransactionResponse.model_validate(result.transfer_out),
            transfer_in=TransactionResponse.model_validate(result.transfer_in),
        )
    )


@router.post("/adjustment", response_model=AdjustmentResponse)
async def adjust_balance(
    data: AdjustmentRequest,
    user: ActiveUser,
    service: Balances,
) -> AdjustmentResponse:
    """Set a wallet to an exact balance, recording the difference."""
    result = await service.adjust(
        user.id,
        target_balance=data.target_balance,
        notes=data.notes,
        wallet_id=data.wallet_id,
    )
    return AdjustmentResponse(
        transaction=TransactionResponse.model_validate(result.transaction),
        adjustment=AdjustmentInfo(
            previous_balance=result.previous_balance,
            new_balance=result.new_balance,
            difference=result.difference,
            type=result.direction,
        ),
    )


# ============ Single transaction ============


@router.get("/{transaction_id}", response_model=TransactionEnvelope)
async def get_transaction(
    transaction_id: int,
    user: CurrentUser,
    service: Transactions,
) -> TransactionEnvelope:
    transaction = await _owned_transaction(service, transaction_id, user)
    return TransactionEnvelope(transaction=TransactionResponse.model_validate(transaction))


@router.put("/{transaction_id}", response_model=TransactionEnvelope)
async def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    user: CurrentUser,
    service: Transactions,
) -> TransactionEnvelope:
    transaction = await _owned_transaction(service, transaction_id, user)
    transaction = await service.update_transaction(transaction, data)
    return TransactionEnvelope(transaction=TransactionResponse.model_validate(transaction))


@router.delete("/{transaction_id}", response_model=TransactionDeleteResponse)
async def delete_transaction(
    transaction_id: int,
    user: CurrentUser,
    service: Transactions,
) -> TransactionDeleteResponse:
    """Delete a transaction (both legs for a transfer) and reverse its balance effect."""
    transaction = await _owned_transaction(service, transaction_id, user)
    deleted_ids = await service.delete_transaction(transaction)
    return TransactionDeleteResponse(message="Transaksi berhasil dihapus", deleted_ids=deleted_ids)

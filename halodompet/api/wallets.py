"""HaloDompet - Wallet API endpoints."""

from fastapi import APIRouter

from halodompet.api.deps import ActiveUser, CurrentUser, Wallets
from halodompet.models.wallet import Wallet
from halodompet.schemas.common import MessageResponse
from halodompet.schemas.wallet import (
    WalletCreate,
    WalletEnvelope,
    WalletListResponse,
    WalletResponse,
    WalletSummaryResponse,
    WalletUpdate,
)
from halodompet.services.wallet_service import WALLET_NOT_FOUND
from halodompet.utils.ownership import ensure_owned

router = APIRouter(tags=["Wallets"])


async def _owned_wallet(service: Wallets, wallet_id: int, user: CurrentUser) -> Wallet:
    # Other users' wallets are reported as missing
    wallet = await service.get_wallet(wallet_id)
    return ensure_owned(wallet, user, not_found=WALLET_NOT_FOUND, hide_foreign=True)


@router.get("/wallet", response_model=WalletSummaryResponse)
async def get_wallet_summary(user: CurrentUser, service: Wallets) -> WalletSummaryResponse:
    """List wallets with the total balance and this month's growth."""
    wallets = await service.list_wallets(user.id)
    return WalletSummaryResponse(
        wallets=[WalletResponse.model_validate(w) for w in wallets],
        total_balance=await service.get_total_balance(user.id),
        growth_percentage=await service.get_asset_growth(user.id),
    )


@router.post("/wallet", response_model=WalletEnvelope)
async def create_wallet(data: WalletCreate, user: ActiveUser, service: Wallets) -> WalletEnvelope:
    """Create a wallet. The first wallet of a user becomes the default."""
    wallet = await service.create_wallet(user.id, data)
    return WalletEnvelope(wallet=WalletResponse.model_validate(wallet))


@router.get("/wallets", response_model=WalletListResponse)
async def list_wallets(user: CurrentUser, service: Wallets) -> WalletListResponse:
    wallets = await service.list_wallets(user.id)
    return WalletListResponse(
        wallets=[WalletResponse.model_validate(w) for w in wallets],
        count=len(wallets),
    )


@router.get("/wallet/{wallet_id}", response_model=WalletEnvelope)
async def get_wallet(wallet_id: int, user: CurrentUser, service: Wallets) -> WalletEnvelope:
    wallet = await _owned_wallet(service, wallet_id, user)
    return WalletEnvelope(wallet=WalletResponse.model_validate(wallet))


@router.put("/wallet/{wallet_id}", response_model=WalletEnvelope)
async def update_wallet(
    wallet_id: int,
    data: WalletUpdate,
    user: CurrentUser,
    service: Wallets,
) -> WalletEnvelope:
    """Update name, icon, color or the default flag."""
    wallet = await _owned_wallet(service, wallet_id, user)
    wallet = await service.update_wallet(wallet, data)
    return WalletEnvelope(wallet=WalletResponse.model_validate(wallet))


@router.delete("/wallet/{wallet_id}", response_model=MessageResponse)
async def delete_wallet(wallet_id: int, user: CurrentUser, service: Wallets) -> MessageResponse:
    """Delete a non-default wallet without transactions."""
    wallet = await _owned_wallet(service, wallet_id, user)
    await service.delete_wallet(wallet)
    return MessageResponse(message="Dompet berhasil dihapus")

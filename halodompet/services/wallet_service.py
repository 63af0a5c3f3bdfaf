"""Wallet Service - wallet CRUD, the single-default rule and balance totals."""

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import NotFoundError, ValidationError
from halodompet.models.transaction import Transaction
from halodompet.models.wallet import DEFAULT_WALLET_COLOR, DEFAULT_WALLET_ICON, Wallet
from halodompet.schemas.wallet import WalletCreate, WalletUpdate
from halodompet.utils.helpers import month_range, round_percentage, to_decimal

logger = logging.getLogger(__name__)

WALLET_NOT_FOUND = "Dompet tidak ditemukan"
NO_DEFAULT_WALLET = "Belum ada dompet utama. Buat dompet terlebih dahulu."


class WalletService:
    """Service for wallet business logic.

    Owns the "exactly one default wallet per user" rule: every write that
    touches ``is_default`` goes through this class.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============ Queries ============

    async def list_wallets(self, user_id: int) -> list[Wallet]:
        """List a user's wallets, default first."""
        result = await self.db.execute(
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .order_by(Wallet.is_default.desc(), Wallet.created_at, Wallet.id)
        )
        return list(result.scalars().all())

    async def get_wallet(self, wallet_id: int) -> Wallet | None:
        return await self.db.get(Wallet, wallet_id)

    async def get_user_wallet(
        self, user_id: int, wallet_id: int, for_update: bool = False
    ) -> Wallet | None:
        """Get a wallet only if it belongs to the user.

        Args:
            user_id: Owner
            wallet_id: Wallet ID
            for_update: Lock the row for the rest of the DB transaction
        """
        query = select(Wallet).where(Wallet.id == wallet_id, Wallet.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_default_wallet(self, user_id: int, for_update: bool = False) -> Wallet | None:
        query = select(Wallet).where(
            Wallet.user_id == user_id,
            Wallet.is_default == True,  # noqa: E712
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalars().first()

    async def resolve_wallet(self, user_id: int, wallet_id: int | None) -> Wallet:
        """Pick the wallet a balance flow should act on, locked for update.

        Raises:
            NotFoundError: wallet_id given but not one of the user's wallets
            ValidationError: no wallet_id and the user has no default wallet
        """
        if wallet_id is not None:
            wallet = await self.get_user_wallet(user_id, wallet_id, for_update=True)
            if wallet is None:
                raise NotFoundError(WALLET_NOT_FOUND)
            return wallet

        wallet = await self.get_default_wallet(user_id, for_update=True)
        if wallet is None:
            raise ValidationError(NO_DEFAULT_WALLET)
        return wallet

    async def get_total_balance(self, user_id: int) -> Decimal:
        result = await self.db.execute(
            select(func.sum(Wallet.balance)).where(Wallet.user_id == user_id)
        )
        return to_decimal(result.scalar())

    async def get_asset_growth(self, user_id: int, today: date | None = None) -> float:
        """Percentage change of the user's total balance over the current month.

        The month's opening balance is reconstructed as the current total
        minus the net balance effect of this month's transactions.

        Returns:
            Growth in percent, rounded to one decimal
        """
        start, end = month_range(today)
        result = await self.db.execute(
            select(func.sum(Transaction.balance_delta)).where(
                Transaction.user_id == user_id,
                Transaction.date >= start,
                Transaction.date <= end,
            )
        )
        net = to_decimal(result.scalar())
        total = await self.get_total_balance(user_id)
        opening = total - net

        if opening == 0:
            return 100.0 if net > 0 else 0.0
        return round_percentage(net / abs(opening) * 100)

    async def count_transactions(self, wallet_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Transaction).where(Transaction.wallet_id == wallet_id)
        )
        return result.scalar() or 0

    # ============ Mutations ============

    async def create_wallet(self, user_id: int, data: WalletCreate) -> Wallet:
        """Create a wallet with an opening balance.

        The user's first wallet always becomes the default one.

        Raises:
            ValidationError: Empty name or negative opening balance
        """
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Nama dompet harus diisi")

        balance = data.balance if data.balance is not None else Decimal("0")
        if balance < 0:
            raise ValidationError("Saldo awal dompet tidak boleh negatif")

        existing = await self.list_wallets(user_id)
        is_default = data.is_default or not existing
        if is_default:
            await self._clear_default(user_id)

        wallet = Wallet(
            user_id=user_id,
            name=name,
            balance=balance,
            icon=data.icon or DEFAULT_WALLET_ICON,
            color=data.color or DEFAULT_WALLET_COLOR,
            is_default=is_default,
        )
        self.db.add(wallet)
        await self.db.commit()
        await self.db.refresh(wallet)

        logger.info("Created wallet %s for user %s (default=%s)", wallet.id, user_id, is_default)
        return wallet

    async def update_wallet(self, wallet: Wallet, data: WalletUpdate) -> Wallet:
        """Update display fields and the default flag.

        Raises:
            ValidationError: Empty name, or un-setting the current default
        """
        if data.name is not None:
            name = data.name.strip()
            if not name:
                raise ValidationError("Nama dompet harus diisi")
            wallet.name = name
        if data.icon is not None:
            wallet.icon = data.icon
        if data.color is not None:
            wallet.color = data.color

        if data.is_default is True and not wallet.is_default:
            await self._clear_default(wallet.user_id, exclude_id=wallet.id)
            wallet.is_default = True
        elif data.is_default is False and wallet.is_default:
            raise ValidationError(
                "Dompet utama tidak bisa dinonaktifkan. Jadikan dompet lain sebagai dompet utama."
            )

        wallet.updated_at = datetime.utcnow()
        self.db.add(wallet)
        await self.db.commit()
        await self.db.refresh(wallet)
        return wallet

    async def delete_wallet(self, wallet: Wallet) -> None:
        """Delete a wallet.

        Raises:
            ValidationError: Wallet is the default or still has transactions
        """
        if wallet.is_default:
            raise ValidationError(
                "Dompet utama tidak bisa dihapus. Jadikan dompet lain sebagai dompet utama "
                "terlebih dahulu."
            )
        if await self.count_transactions(wallet.id):  # type: ignore[arg-type]
            raise ValidationError(
                "Dompet masih memiliki transaksi. Hapus atau pindahkan transaksinya "
                "terlebih dahulu."
            )

        await self.db.delete(wallet)
        await self.db.commit()
        logger.info("Deleted wallet %s of user %s", wallet.id, wallet.user_id)

    async def _clear_default(self, user_id: int, exclude_id: int | None = None) -> None:
        """Unset the default flag on the user's wallets (except ``exclude_id``)."""
        query = update(Wallet).where(
            Wallet.user_id == user_id,
            Wallet.is_default == True,  # noqa: E712
        )
        if exclude_id is not None:
            query = query.where(Wallet.id != exclude_id)
        await self.db.execute(query.values(is_default=False))

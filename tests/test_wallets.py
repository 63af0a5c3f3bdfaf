"""
Tests for wallet endpoints: creation, default wallet rule, deletion guards.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from halodompet.models.wallet import Wallet
from tests.factories import make_user, make_wallet


class TestCreateWallet:
    """POST /api/wallet"""

    @pytest.mark.asyncio
    async def test_created_balance_matches_opening_balance(self, client, alice, as_user):
        response = await client.post(
            "/api/wallet", json={"name": "Tabungan", "balance": 150000}, headers=as_user(alice)
        )
        assert response.status_code == 200
        created = response.json()["wallet"]

        response = await client.get(f"/api/wallet/{created['id']}", headers=as_user(alice))
        assert response.status_code == 200
        assert response.json()["wallet"]["balance"] == 150000

    @pytest.mark.asyncio
    async def test_balance_defaults_to_zero(self, client, alice, as_user):
        response = await client.post("/api/wallet", json={"name": "Dompet"}, headers=as_user(alice))
        wallet = response.json()["wallet"]
        assert wallet["balance"] == 0
        assert wallet["icon"] == "💰"

    @pytest.mark.asyncio
    async def test_first_wallet_becomes_default(self, client, alice, as_user):
        response = await client.post("/api/wallet", json={"name": "Cash"}, headers=as_user(alice))
        assert response.json()["wallet"]["is_default"] is True

    @pytest.mark.asyncio
    async def test_new_default_replaces_old_one(self, client, db, alice, as_user):
        first = await make_wallet(db, alice, "Cash", is_default=True)

        response = await client.post(
            "/api/wallet", json={"name": "Bank", "is_default": True}, headers=as_user(alice)
        )
        assert response.json()["wallet"]["is_default"] is True

        await db.refresh(first)
        assert first.is_default is False
        count = await db.execute(
            select(func.count())
            .select_from(Wallet)
            .where(Wallet.user_id == alice.id, Wallet.is_default == True)  # noqa: E712
        )
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_rejects_empty_name_and_negative_balance(self, client, alice, as_user):
        response = await client.post("/api/wallet", json={"name": "  "}, headers=as_user(alice))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Nama dompet harus diisi"}

        response = await client.post(
            "/api/wallet", json={"name": "Minus", "balance": -1}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Saldo awal dompet tidak boleh negatif"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.post("/api/wallet", json={"name": "Cash"})
        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_expired_trial_cannot_create(self, client, db, as_user):
        expired = await make_user(
            db, "user_expired", trial_ends_at=datetime.utcnow() - timedelta(days=1)
        )
        response = await client.post("/api/wallet", json={"name": "Cash"}, headers=as_user(expired))
        assert response.status_code == 403
        assert response.json()["details"]["account_status"] == "trial"

        # Reading stays available
        response = await client.get("/api/wallets", headers=as_user(expired))
        assert response.status_code == 200


class TestReadWallets:
    """GET /api/wallet, /api/wallets, /api/wallet/{id}"""

    @pytest.mark.asyncio
    async def test_summary_totals(self, client, db, alice, as_user):
        await make_wallet(db, alice, "Cash", 100000, is_default=True)
        await make_wallet(db, alice, "Bank", "250000.50")

        response = await client.get("/api/wallet", headers=as_user(alice))
        body = response.json()
        assert body["success"] is True
        assert body["totalBalance"] == 350000.5
        assert [w["name"] for w in body["wallets"]] == ["Cash", "Bank"]
        assert body["growthPercentage"] == 0.0

    @pytest.mark.asyncio
    async def test_growth_reflects_this_months_income(self, client, db, alice, as_user):
        await make_wallet(db, alice, "Cash", 100000, is_default=True)
        await client.post(
            "/api/transaction/income",
            json={"item": "Gaji", "amount": 50000},
            headers=as_user(alice),
        )

        response = await client.get("/api/wallet", headers=as_user(alice))
        assert response.json()["growthPercentage"] == 50.0

    @pytest.mark.asyncio
    async def test_growth_from_negative_opening_balance(self, client, db, alice, as_user):
        # Month opens at -100.000; income of 50.000 is an improvement
        await make_wallet(db, alice, "Cash", -100000, is_default=True)
        await client.post(
            "/api/transaction/income",
            json={"item": "Gaji", "amount": 50000},
            headers=as_user(alice),
        )

        response = await client.get("/api/wallet", headers=as_user(alice))
        body = response.json()
        assert body["totalBalance"] == -50000
        assert body["growthPercentage"] == 50.0

    @pytest.mark.asyncio
    async def test_other_users_wallet_is_not_found(self, client, db, alice, bob, as_user):
        wallet = await make_wallet(db, alice, "Cash", 1000, is_default=True)

        response = await client.get(f"/api/wallet/{wallet.id}", headers=as_user(bob))
        assert response.status_code == 404
        assert response.json()["error"] == "Dompet tidak ditemukan"

        response = await client.get("/api/wallets", headers=as_user(bob))
        assert response.json() == {"success": True, "wallets": [], "count": 0}


class TestUpdateWallet:
    """PUT /api/wallet/{id}"""

    @pytest.mark.asyncio
    async def test_rename_and_move_default(self, client, db, alice, as_user):
        cash = await make_wallet(db, alice, "Cash", is_default=True)
        bank = await make_wallet(db, alice, "Bank")

        response = await client.put(
            f"/api/wallet/{bank.id}",
            json={"name": "Bank BCA", "is_default": True},
            headers=as_user(alice),
        )
        assert response.status_code == 200
        assert response.json()["wallet"]["name"] == "Bank BCA"
        assert response.json()["wallet"]["is_default"] is True

        await db.refresh(cash)
        assert cash.is_default is False

    @pytest.mark.asyncio
    async def test_cannot_unset_the_default(self, client, db, alice, as_user):
        cash = await make_wallet(db, alice, "Cash", is_default=True)
        response = await client.put(
            f"/api/wallet/{cash.id}", json={"is_default": False}, headers=as_user(alice)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_balance_is_not_editable(self, client, db, alice, as_user):
        cash = await make_wallet(db, alice, "Cash", 1000, is_default=True)
        await client.put(
            f"/api/wallet/{cash.id}", json={"balance": 999999}, headers=as_user(alice)
        )
        await db.refresh(cash)
        assert cash.balance == Decimal("1000")


class TestDeleteWallet:
    """DELETE /api/wallet/{id}"""

    @pytest.mark.asyncio
    async def test_default_wallet_is_rejected_without_changes(self, client, db, alice, as_user):
        cash = await make_wallet(db, alice, "Cash", 5000, is_default=True)

        response = await client.delete(f"/api/wallet/{cash.id}", headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"].startswith("Dompet utama tidak bisa dihapus")

        await db.refresh(cash)
        assert cash.balance == Decimal("5000")
        assert cash.is_default is True

    @pytest.mark.asyncio
    async def test_wallet_with_transactions_is_rejected(self, client, db, alice, as_user):
        await make_wallet(db, alice, "Cash", is_default=True)
        bank = await make_wallet(db, alice, "Bank")
        await client.post(
            "/api/transaction/income",
            json={"item": "Bunga", "amount": 100, "wallet_id": bank.id},
            headers=as_user(alice),
        )

        response = await client.delete(f"/api/wallet/{bank.id}", headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"].startswith("Dompet masih memiliki transaksi")

    @pytest.mark.asyncio
    async def test_deletes_empty_secondary_wallet(self, client, db, alice, as_user):
        await make_wallet(db, alice, "Cash", is_default=True)
        bank = await make_wallet(db, alice, "Bank")

        response = await client.delete(f"/api/wallet/{bank.id}", headers=as_user(alice))
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Dompet berhasil dihapus"}

        response = await client.get(f"/api/wallet/{bank.id}", headers=as_user(alice))
        assert response.status_code == 404

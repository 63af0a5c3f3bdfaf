"""
Tests for monthly budgets.
"""

from datetime import date, timedelta

import pytest

from tests.factories import make_wallet


class TestBudgets:
    """/api/budget"""

    @pytest.mark.asyncio
    async def test_upsert_replaces_limit(self, client, alice, as_user):
        headers = as_user(alice)
        first = await client.put(
            "/api/budget", json={"category": "Makanan", "limit_amount": 100000}, headers=headers
        )
        second = await client.put(
            "/api/budget", json={"category": "Makanan", "limit_amount": 150000}, headers=headers
        )
        assert first.json()["budget"]["id"] == second.json()["budget"]["id"]

        response = await client.get("/api/budget", headers=headers)
        budgets = response.json()["budgets"]
        assert len(budgets) == 1
        assert budgets[0]["limit_amount"] == 150000

    @pytest.mark.asyncio
    async def test_negative_limit(self, client, alice, as_user):
        response = await client.put(
            "/api/budget", json={"category": "Makanan", "limit_amount": -1}, headers=as_user(alice)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_summary_counts_this_months_expenses(self, client, db, alice, as_user):
        cash = await make_wallet(db, alice, "Cash", 1000000, is_default=True)
        bank = await make_wallet(db, alice, "Bank", 0)
        headers = as_user(alice)
        today = date.today()
        last_month = today.replace(day=1) - timedelta(days=1)

        for budget in (("Makanan", 100000), ("Transportasi", 400000)):
            await client.put(
                "/api/budget",
                json={"category": budget[0], "limit_amount": budget[1]},
                headers=headers,
            )
        for item, amount, category, day in (
            ("Nasi", 25000, "Makanan", today),
            ("Nasi lama", 90000, "Makanan", last_month),
            ("Ojek", 40000, "Transportasi", today),
        ):
            await client.post(
                "/api/transaction",
                json={"item": item, "amount": amount, "category": category, "date": str(day)},
                headers=headers,
            )
        await client.post(
            "/api/transaction/transfer",
            json={
                "source_wallet_id": cash.id,
                "target_wallet_id": bank.id,
                "amount": 5000,
                "date": str(today),
            },
            headers=headers,
        )

        response = await client.get("/api/budget/summary", headers=headers)
        assert response.json()["budgets"] == [
            {
                "category": "Makanan",
                "limit_amount": 100000,
                "spent_amount": 25000,
                "remaining_amount": 75000,
                "percentage_used": 25.0,
            },
            {
                "category": "Transportasi",
                "limit_amount": 400000,
                "spent_amount": 40000,
                "remaining_amount": 360000,
                "percentage_used": 10.0,
            },
        ]

    @pytest.mark.asyncio
    async def test_delete(self, client, alice, as_user):
        headers = as_user(alice)
        response = await client.delete("/api/budget/Makanan", headers=headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Anggaran tidak ditemukan"

        await client.put(
            "/api/budget", json={"category": "Makanan", "limit_amount": 1000}, headers=headers
        )
        response = await client.delete("/api/budget/Makanan", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Anggaran berhasil dihapus"

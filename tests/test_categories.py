"""
Tests for category endpoints.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from halodompet.models.category import DEFAULT_CATEGORIES, Category, CategoryType
from halodompet.services.category_service import CategoryService


class TestListCategories:
    """GET /api/categories"""

    @pytest.mark.asyncio
    async def test_defaults_plus_own(self, client, alice, bob, default_categories, as_user):
        await client.post(
            "/api/categories", json={"name": "Kopi", "type": "expense"}, headers=as_user(alice)
        )

        response = await client.get("/api/categories", headers=as_user(alice))
        names = [c["name"] for c in response.json()["data"]]
        assert len(names) == len(DEFAULT_CATEGORIES) + 1
        assert "Kopi" in names
        assert names == sorted(names)

        response = await client.get("/api/categories", headers=as_user(bob))
        assert "Kopi" not in [c["name"] for c in response.json()["data"]]

    @pytest.mark.asyncio
    async def test_filter_by_type(self, client, alice, default_categories, as_user):
        response = await client.get(
            "/api/categories", params={"type": "income"}, headers=as_user(alice)
        )
        data = response.json()["data"]
        assert {c["type"] for c in data} == {"income"}
        assert {c["name"] for c in data} == {"Gaji", "Bonus", "Investasi", "Pemasukan Lain"}


class TestCreateCategory:
    """POST /api/categories"""

    @pytest.mark.asyncio
    async def test_creates_user_category(self, client, alice, as_user):
        response = await client.post(
            "/api/categories",
            json={"name": " Freelance ", "type": "income"},
            headers=as_user(alice),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Freelance"
        assert data["user_id"] == alice.id

    @pytest.mark.asyncio
    async def test_duplicate_of_default_fails(self, client, alice, default_categories, as_user):
        response = await client.post(
            "/api/categories", json={"name": "makanan", "type": "expense"}, headers=as_user(alice)
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Gagal membuat kategori. Mungkin kategori sudah ada."

    @pytest.mark.asyncio
    async def test_invalid_input(self, client, alice, as_user):
        response = await client.post(
            "/api/categories", json={"name": "Kopi", "type": "transfer"}, headers=as_user(alice)
        )
        assert response.status_code == 400

        response = await client.post(
            "/api/categories", json={"type": "expense"}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Nama kategori harus diisi"


class TestDeleteCategory:
    """DELETE /api/categories"""

    @pytest.mark.asyncio
    async def test_deletes_own_category(self, client, alice, as_user):
        created = await client.post(
            "/api/categories", json={"name": "Kopi", "type": "expense"}, headers=as_user(alice)
        )
        category_id = created.json()["data"]["id"]

        response = await client.request(
            "DELETE", "/api/categories", json={"id": category_id}, headers=as_user(alice)
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Kategori berhasil dihapus"

    @pytest.mark.asyncio
    async def test_default_and_foreign_categories_are_kept(
        self, client, alice, bob, default_categories, as_user
    ):
        created = await client.post(
            "/api/categories", json={"name": "Kopi", "type": "expense"}, headers=as_user(alice)
        )
        for category_id in (created.json()["data"]["id"], default_categories[0].id):
            response = await client.request(
                "DELETE", "/api/categories", json={"id": category_id}, headers=as_user(bob)
            )
            assert response.status_code == 500
            assert response.json()["error"].startswith("Gagal menghapus kategori")

    @pytest.mark.asyncio
    async def test_missing_id(self, client, alice, as_user):
        response = await client.request(
            "DELETE", "/api/categories", json={}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ID kategori harus diisi"


class TestCategoryUniqueness:
    """(user_id, name) is unique in the database, not only in the service."""

    @pytest.mark.asyncio
    async def test_database_rejects_duplicate_row(self, db, alice):
        user_id = alice.id
        db.add(Category(user_id=user_id, name="Kopi", type=CategoryType.EXPENSE))
        await db.commit()

        db.add(Category(user_id=user_id, name="Kopi", type=CategoryType.EXPENSE))
        with pytest.raises(IntegrityError):
            await db.commit()
        await db.rollback()

    @pytest.mark.asyncio
    async def test_create_returns_none_when_race_is_lost(self, db, alice, monkeypatch):
        user_id = alice.id
        db.add(Category(user_id=user_id, name="Kopi", type=CategoryType.EXPENSE))
        await db.commit()

        # The other request inserted "Kopi" after this one looked it up
        async def not_taken(user_id, name):
            return False

        service = CategoryService(db)
        monkeypatch.setattr(service, "_name_taken", not_taken)
        assert await service.create_category(user_id, "Kopi", "expense") is None

        result = await db.execute(
            select(func.count()).select_from(Category).where(Category.user_id == user_id)
        )
        assert result.scalar_one() == 1


class TestSeedDefaults:
    @pytest.mark.asyncio
    async def test_seeding_is_idempotent(self, db):
        service = CategoryService(db)
        assert await service.seed_defaults() == len(DEFAULT_CATEGORIES)
        assert await service.seed_defaults() == 0

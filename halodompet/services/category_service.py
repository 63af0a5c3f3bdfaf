"""Category Service - shared default categories plus each user's own."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from halodompet.core.exceptions import ValidationError
from halodompet.models.category import DEFAULT_CATEGORIES, Category, CategoryType

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _visible_to(self, user_id: int):
        return or_(Category.user_id == user_id, Category.user_id.is_(None))

    async def list_categories(
        self, user_id: int, category_type: CategoryType | None = None
    ) -> list[Category]:
        """Shared defaults merged with the user's categories, sorted by name."""
        query = select(Category).where(self._visible_to(user_id))
        if category_type is not None:
            query = query.where(Category.type == category_type)
        result = await self.db.execute(query.order_by(Category.name, Category.id))
        return list(result.scalars().all())

    async def create_category(
        self, user_id: int, name: str | None, category_type: str | None
    ) -> Category | None:
        """Create a custom category.

        Returns:
            The category, or None when a category with the same name already
            exists for this user (including shared defaults)

        Raises:
            ValidationError: Empty name or unknown type
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nama kategori harus diisi")
        try:
            parsed_type = CategoryType(category_type)
        except ValueError:
            raise ValidationError('Tipe kategori harus "income" atau "expense"') from None

        if await self._name_taken(user_id, name):
            logger.info("Category %r already exists for user %s", name, user_id)
            return None

        category = Category(user_id=user_id, name=name, type=parsed_type)
        self.db.add(category)
        try:
            await self.db.commit()
        except IntegrityError:
            # uq_category_user_name: a concurrent request created it first
            await self.db.rollback()
            logger.warning("Category %r rejected by database for user %s", name, user_id)
            return None
        await self.db.refresh(category)
        return category

    async def _name_taken(self, user_id: int, name: str) -> bool:
        """Case-insensitive lookup among the user's and the shared categories."""
        result = await self.db.execute(
            select(Category.id).where(
                self._visible_to(user_id),
                func.lower(Category.name) == name.lower(),
            )
        )
        return result.first() is not None

    async def delete_category(self, user_id: int, category_id: int) -> bool:
        """Delete one of the user's own categories.

        Shared defaults and other users' categories are never deleted.
        """
        category = await self.db.get(Category, category_id)
        if category is None or category.user_id is None or category.user_id != user_id:
            return False

        await self.db.delete(category)
        await self.db.commit()
        return True

    async def seed_defaults(self) -> int:
        """Insert missing shared default categories.

        Returns:
            Number of categories created
        """
        result = await self.db.execute(select(Category).where(Category.user_id.is_(None)))
        existing = {(c.name, c.type) for c in result.scalars().all()}

        created = 0
        for name, category_type in DEFAULT_CATEGORIES:
            if (name, category_type) in existing:
                continue
            self.db.add(Category(user_id=None, name=name, type=category_type))
            created += 1

        await self.db.commit()
        return created

"""HaloDompet - Category model."""

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class CategoryType(str, Enum):
    """Which side of the ledger a category belongs to."""

    INCOME = "income"
    EXPENSE = "expense"


# Shared defaults (user_id NULL), seeded by migration and init script
DEFAULT_CATEGORIES: list[tuple[str, CategoryType]] = [
    ("Makanan", CategoryType.EXPENSE),
    ("Transportasi", CategoryType.EXPENSE),
    ("Belanja", CategoryType.EXPENSE),
    ("Hiburan", CategoryType.EXPENSE),
    ("Kesehatan", CategoryType.EXPENSE),
    ("Tagihan", CategoryType.EXPENSE),
    ("Pendidikan", CategoryType.EXPENSE),
    ("Lainnya", CategoryType.EXPENSE),
    ("Gaji", CategoryType.INCOME),
    ("Bonus", CategoryType.INCOME),
    ("Investasi", CategoryType.INCOME),
    ("Pemasukan Lain", CategoryType.INCOME),
]


class Category(SQLModel, table=True):
    """Category model.

    Attributes:
        id: Auto-increment primary key
        user_id: Owner, or None for a shared default category
        name: Category name
        type: income or expense
    """

    __tablename__ = "categories"
    __table_args__ = (sa.UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None, foreign_key="users.id", index=True)
    name: str = Field(max_length=100)
    type: CategoryType = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

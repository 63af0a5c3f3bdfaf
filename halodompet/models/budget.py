"""HaloDompet - Budget model."""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class Budget(SQLModel, table=True):
    """Monthly spending limit for one category of one user."""

    __tablename__ = "budgets"
    __table_args__ = (sa.UniqueConstraint("user_id", "category", name="uq_budget_user_category"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    category: str = Field(max_length=100)
    limit_amount: Decimal = Field(sa_column=sa.Column(sa.DECIMAL(20, 2), nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

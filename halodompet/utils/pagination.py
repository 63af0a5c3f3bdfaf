"""Pagination utility functions."""

import math
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select


@dataclass
class PaginationParams:
    """Pagination parameters."""

    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class PaginatedResult[T]:
    """Paginated result container."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total > 0 else 1


async def paginate_query[T](
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
) -> PaginatedResult[T]:
    """Apply pagination to a query.

    Args:
        db: Database session
        query: SQLAlchemy select query (already ordered)
        params: Pagination parameters

    Returns:
        One page of items plus the total count
    """
    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.page_size))
    items = list(result.scalars().all())

    return PaginatedResult(items=items, total=total, page=params.page, page_size=params.page_size)

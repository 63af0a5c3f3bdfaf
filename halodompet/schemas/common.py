"""Shared schema types."""

from decimal import Decimal
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, Field, PlainSerializer

# Money goes over the wire as a plain JSON number
Money = Annotated[Decimal, PlainSerializer(lambda x: float(x), return_type=float)]

# Incoming amounts must fit the DECIMAL(20, 2) columns
MoneyInput = Annotated[Decimal, Field(max_digits=20, decimal_places=2)]

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    success: bool = False
    error: str
    details: Any = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response wrapper."""

    success: bool = True
    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int

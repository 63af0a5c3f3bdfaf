"""Schemas module - Pydantic DTOs for request/response."""

from halodompet.schemas.common import ErrorResponse, MessageResponse, Money, PaginatedResponse
from halodompet.schemas.transaction import (
    AdjustmentRequest,
    IncomeRequest,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
    TransferRequest,
)
from halodompet.schemas.wallet import WalletCreate, WalletResponse, WalletUpdate

__all__ = [
    "AdjustmentRequest",
    "ErrorResponse",
    "IncomeRequest",
    "MessageResponse",
    "Money",
    "PaginatedResponse",
    "TransactionCreate",
    "TransactionResponse",
    "TransactionUpdate",
    "TransferRequest",
    "WalletCreate",
    "WalletResponse",
    "WalletUpdate",
]

"""Database models."""

from halodompet.models.audit_log import AdminAction, AuditLog
from halodompet.models.budget import Budget
from halodompet.models.category import Category, CategoryType
from halodompet.models.transaction import Transaction, TransactionType
from halodompet.models.user import AccountStatus, User, UserMode, UserRole
from halodompet.models.wallet import Wallet

__all__ = [
    "AccountStatus",
    "AdminAction",
    "AuditLog",
    "Budget",
    "Category",
    "CategoryType",
    "Transaction",
    "TransactionType",
    "User",
    "UserMode",
    "UserRole",
    "Wallet",
]

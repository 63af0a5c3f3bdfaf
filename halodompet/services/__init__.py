"""HaloDompet Service Layer.

Business logic services. Each service wraps one AsyncSession and can be
reused across API endpoints and scripts.
"""

from halodompet.services.admin_service import AdminService
from halodompet.services.balance_service import BalanceService
from halodompet.services.budget_service import BudgetService
from halodompet.services.category_service import CategoryService
from halodompet.services.gemini_service import GeminiError, GeminiService
from halodompet.services.transaction_service import TransactionService
from halodompet.services.user_service import UserService
from halodompet.services.wallet_service import WalletService

__all__ = [
    "AdminService",
    "BalanceService",
    "BudgetService",
    "CategoryService",
    "GeminiError",
    "GeminiService",
    "TransactionService",
    "UserService",
    "WalletService",
]

"""API module - route handlers and common dependencies."""

from fastapi import FastAPI

from halodompet.api.deps import ActiveUser, AdminUser, CurrentUser

__all__ = [
    "ActiveUser",
    "AdminUser",
    "CurrentUser",
    "register_routers",
]


def register_routers(app: FastAPI) -> None:
    """Register all API routers to the application.

    Args:
        app: FastAPI application instance
    """
    # User profile & account state
    from halodompet.api.users import router as users_router

    app.include_router(users_router, prefix="/api")

    # Wallets & ledger
    from halodompet.api.transactions import router as transactions_router
    from halodompet.api.wallets import router as wallets_router

    app.include_router(wallets_router, prefix="/api")
    app.include_router(transactions_router, prefix="/api")

    # Categories & budgets
    from halodompet.api.budgets import router as budgets_router
    from halodompet.api.categories import router as categories_router

    app.include_router(categories_router, prefix="/api")
    app.include_router(budgets_router, prefix="/api")

    # AI features (speech-to-text, extraction, receipts, advisor)
    from halodompet.api.ai import router as ai_router

    app.include_router(ai_router, prefix="/api")

    # Admin
    from halodompet.api.admin import router as admin_router

    app.include_router(admin_router, prefix="/api")

"""HaloDompet utility functions.

Common helper functions and utilities used across the application.
"""

from halodompet.utils.ownership import AccessDecision, authorize, ensure_owned
from halodompet.utils.pagination import PaginatedResult, PaginationParams, paginate_query

__all__ = [
    "AccessDecision",
    "PaginatedResult",
    "PaginationParams",
    "authorize",
    "ensure_owned",
    "paginate_query",
]

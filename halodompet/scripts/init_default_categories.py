"""Initialize the shared default categories.

Categories with ``user_id`` NULL are visible to every user. Existing
defaults are left alone, so the script can be run repeatedly.

Usage:
    uv run python -m halodompet.scripts.init_default_categories
"""

import asyncio

from halodompet.db.engine import async_session_factory, close_db
from halodompet.models.category import DEFAULT_CATEGORIES
from halodompet.services.category_service import CategoryService


async def init_default_categories() -> None:
    """Create missing default categories."""
    async with async_session_factory() as session:
        created = await CategoryService(session).seed_defaults()

    if created:
        print(f"✅ Created {created} default categories")
    else:
        print(f"All {len(DEFAULT_CATEGORIES)} default categories already exist, nothing to do.")


async def main() -> None:
    """Main function with proper cleanup."""
    try:
        await init_default_categories()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

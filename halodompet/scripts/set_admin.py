"""Grant or revoke the admin role.

The user must have signed in at least once so the local profile exists.

Usage:
    uv run python -m halodompet.scripts.set_admin user@example.com
    uv run python -m halodompet.scripts.set_admin user@example.com --revoke
"""

import argparse
import asyncio
import sys
from datetime import datetime

from sqlmodel import select

from halodompet.db.engine import async_session_factory, close_db
from halodompet.models.user import User, UserRole


async def set_admin(email: str, revoke: bool = False) -> bool:
    """Set the role of the user with ``email``. Returns False if no such user."""
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            print(f"❌ No user with email {email}")
            return False

        user.role = UserRole.USER if revoke else UserRole.ADMIN
        user.updated_at = datetime.utcnow()
        session.add(user)
        await session.commit()
        print(f"✅ {email} (id {user.id}) is now {user.role.value}")
        return True


async def main() -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke HaloDompet admin role")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="Demote back to a regular user")
    args = parser.parse_args()

    try:
        ok = await set_admin(args.email, args.revoke)
    finally:
        await close_db()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

"""Shared fixtures for the HaloDompet test suite.

The app runs against an in-memory SQLite database. Clerk authentication is
replaced by an ``X-Test-User`` header carrying the Clerk user id, Gemini is
driven through an ``httpx.MockTransport`` and Redis through a small in-memory
counter.
"""

import os

# Settings are read at import time by the engine module
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CLERK_SECRET_KEY"] = "sk_test_halodompet"
os.environ["GEMINI_API_KEY"] = ""

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from typing import Annotated, Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import Depends, FastAPI, Request  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import halodompet.models  # noqa: E402, F401
from halodompet.api.auth import get_current_user  # noqa: E402
from halodompet.api.deps import get_gemini_service, get_rate_limiter  # noqa: E402
from halodompet.core.exceptions import AuthenticationError  # noqa: E402
from halodompet.db import get_db  # noqa: E402
from halodompet.main import create_app  # noqa: E402
from halodompet.models.category import DEFAULT_CATEGORIES, Category  # noqa: E402
from halodompet.models.user import AccountStatus, User, UserRole  # noqa: E402
from halodompet.services.gemini_service import GeminiService  # noqa: E402
from halodompet.services.rate_limiter import RateLimiter  # noqa: E402
from halodompet.services.user_service import UserService  # noqa: E402
from tests.factories import make_user  # noqa: E402

TEST_USER_HEADER = "X-Test-User"


# ============ Fakes ============


class FakeRedis:
    """The three counter commands RateLimiter uses, kept in memory."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = seconds
        return True

    async def ttl(self, key: str) -> int:
        return self.ttls.get(key, -1)


class GeminiStub:
    """Scripted Gemini backend behind ``httpx.MockTransport``.

    Queue either model text (wrapped into a generateContent body) or a raw
    ``httpx.Response`` for error cases. Sent requests are kept for assertions.
    """

    def __init__(self) -> None:
        self.replies: list[str | httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def reply_text(self, text: str) -> None:
        self.replies.append(text)

    def reply_error(self, status_code: int, message: str, reason: str = "") -> None:
        error: dict[str, Any] = {"code": status_code, "message": message, "status": "ERROR"}
        if reason:
            error["details"] = [{"reason": reason}]
        self.replies.append(httpx.Response(status_code, json={"error": error}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected Gemini call: {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": reply}]}}]}
        )


# ============ Database ============


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def default_categories(db: AsyncSession) -> list[Category]:
    categories = [Category(user_id=None, name=name, type=t) for name, t in DEFAULT_CATEGORIES]
    db.add_all(categories)
    await db.commit()
    return categories


@pytest_asyncio.fixture
async def alice(db: AsyncSession) -> User:
    return await make_user(db, "user_alice")


@pytest_asyncio.fixture
async def bob(db: AsyncSession) -> User:
    return await make_user(db, "user_bob")


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    return await make_user(db, "user_admin", role=UserRole.ADMIN, status=AccountStatus.ACTIVE)


# ============ Application ============


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def gemini_stub() -> GeminiStub:
    return GeminiStub()


@pytest.fixture
def gemini_key() -> str:
    """API key handed to the Gemini service. Override with "" to test the unconfigured path."""
    return "test-gemini-key"


@pytest.fixture
def app(session_factory, fake_redis, gemini_stub, gemini_key) -> FastAPI:
    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_current_user(
        request: Request,
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> User:
        clerk_id = request.headers.get(TEST_USER_HEADER)
        if not clerk_id:
            raise AuthenticationError("Unauthorized. Silakan login terlebih dahulu.")
        return await UserService(db).get_or_create(clerk_id)

    def override_gemini() -> GeminiService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(gemini_stub.handler))
        return GeminiService(api_key=gemini_key, client=client)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_current_user
    app.dependency_overrides[get_gemini_service] = override_gemini
    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(fake_redis)  # type: ignore
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def as_user() -> Callable[[User], dict[str, str]]:
    """Request headers authenticating as ``user``."""

    def headers(user: User) -> dict[str, str]:
        return {TEST_USER_HEADER: user.clerk_id}

    return headers

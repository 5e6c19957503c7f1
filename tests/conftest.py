"""Global test configuration and fixtures for KeyHub API."""

import os

# Settings are read from the environment on every instantiation
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-key-for-testing-only"
os.environ["ENVIRONMENT"] = "TEST"

from collections.abc import AsyncGenerator
from typing import Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt

from src.api.core.constants import JWT_ALGORITHM, JWT_AUDIENCE
from src.api.core.dependencies import get_rate_limit_service
from src.api.core.models.rate_limit import RateLimitResult
from src.database.models import ApiKey, Base
from src.modules.notifications.events import KeyEvent, get_event_emitter
from src.utils.settings.auth import AuthSettings

from tests.factories import ApiKeyFactory


class AllowAllRateLimiter:
    """Stand-in for the Redis limiter that records checked keys."""

    def __init__(self):
        self.checked: list[str] = []

    async def is_allowed(
        self, key: str, limit: int, window_seconds: int
    ) -> RateLimitResult:
        self.checked.append(key)
        return RateLimitResult(
            is_allowed=True,
            current_count=len(self.checked),
            time_to_reset=window_seconds,
            rate_key=key,
            limit=limit,
            window_seconds=window_seconds,
        )


class RecordingEventEmitter:
    def __init__(self):
        self.events: list[KeyEvent] = []

    def emit(self, event: KeyEvent) -> None:
        self.events.append(event)


@pytest.fixture
def api_key_factory():
    return ApiKeyFactory


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """Create an async engine on a fresh SQLite database for each test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'keyhub.db'}",
        echo=False,
        hide_parameters=True,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session; the database is discarded after the test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def break_key_store(async_engine) -> Callable[[], Awaitable[None]]:
    """Make every later key lookup fail by dropping the api_keys table."""

    async def drop_table() -> None:
        async with async_engine.begin() as conn:
            await conn.execute(text("DROP TABLE api_keys"))

    return drop_table


@pytest.fixture
def rate_limiter() -> AllowAllRateLimiter:
    return AllowAllRateLimiter()


@pytest.fixture
def event_emitter() -> RecordingEventEmitter:
    return RecordingEventEmitter()


@pytest_asyncio.fixture
async def app(session_factory, rate_limiter, event_emitter):
    """Create FastAPI application with lifespan manager for testing."""
    from src.main import app

    async with LifespanManager(app):
        app.state.session_factory = session_factory
        app.dependency_overrides[get_rate_limit_service] = lambda: rate_limiter
        app.dependency_overrides[get_event_emitter] = lambda: event_emitter
        yield app
        app.dependency_overrides.clear()


# Test Data Fixtures
@pytest_asyncio.fixture
async def test_api_key(db_session: AsyncSession, api_key_factory) -> ApiKey:
    """Create an active test API key."""
    api_key = await api_key_factory.create_async(db_session, name="Test API Key")
    await db_session.commit()
    return api_key


# JWT Token Fixtures
@pytest.fixture()
def jwt_token_factory() -> Callable[..., str]:
    """Factory for creating dashboard owner JWT tokens."""
    auth_settings = AuthSettings()

    def create_token(
        user_id: str = "owner-1",
        email: str = "owner@example.com",
        role: str = "authenticated",
        secret: str | None = None,
    ) -> str:
        payload = {
            "sub": user_id,
            "email": email,
            "role": role,
            "aud": JWT_AUDIENCE,
            "is_anonymous": role == "anon",
        }
        return jwt.encode(
            payload,
            secret or auth_settings.SUPABASE_JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

    return create_token


@pytest.fixture
def owner_token(jwt_token_factory) -> str:
    return jwt_token_factory()


# HTTP Client Fixtures
@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create HTTP client for testing public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test-keyhub-api",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def authorized_client(
    app: FastAPI, owner_token: str
) -> AsyncGenerator[AsyncClient, None]:
    """Create HTTP client with the dashboard owner's JWT."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test-keyhub-api",
        headers={"Authorization": f"Bearer {owner_token}"},
    ) as ac:
        yield ac

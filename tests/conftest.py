"""
sharedstore: Test Configuration (conftest.py)
================================================

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for UserService unit tests
    ├── user_settings:    Settings pointing at a throw-away SQLite file
    ├── user_app:         user service with its lifespan running
    ├── user_client:      HTTPX AsyncClient bound to user_app
    ├── fake_redis:       in-memory stand-in for redis.asyncio.Redis
    ├── cache_app:        cache service connected to fake_redis
    └── cache_client:     HTTPX AsyncClient bound to cache_app

Relational endpoint tests go through the real SQLAlchemy path using the
aiosqlite driver, so inserts, ordering and cross-instance visibility are
exercised end to end without a PostgreSQL server.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Keep tests away from any real store configured in the environment
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_HOST"] = "localhost"
os.environ["REDIS_URL"] = "redis://localhost:6399/0"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("APP_NAME", None)
os.environ.pop("APP_NOTE", None)

from sharedstore.cache import CacheClient  # noqa: E402
from sharedstore.config import Settings  # noqa: E402
from sharedstore.main import create_cache_app, create_user_app  # noqa: E402


@asynccontextmanager
async def running(app: FastAPI) -> AsyncGenerator[FastAPI, None]:
    """Run the app's lifespan; ASGITransport does not send lifespan events."""
    async with app.router.lifespan_context(app):
        yield app


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"


def make_user_settings(db_path, app_name: str = "App 1", **overrides) -> Settings:
    values = dict(
        app_name=app_name,
        database_url=sqlite_url(db_path),
        db_create_schema=True,
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
        result = await user_service.get_user(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# User service fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "users.db"


@pytest.fixture
def user_settings(db_path):
    return make_user_settings(db_path)


@pytest_asyncio.fixture
async def user_app(user_settings):
    app = create_user_app(user_settings)
    async with running(app):
        yield app


@pytest_asyncio.fixture
async def user_client(user_app):
    transport = ASGITransport(app=user_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Cache service fixtures
# ══════════════════════════════════════════════════════════════════════════

class FakeRedis:
    """
    Just enough of redis.asyncio.Redis for CacheClient: get/set/ping/aclose.

    Set `fail_with` to an exception to make every command raise it.
    """

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.fail_with: Optional[Exception] = None
        self.closed = False

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def set(self, key, value):
        self._check()
        self.data[key] = value
        return True

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache_settings():
    return Settings(_env_file=None, redis_url="redis://fake:6379", log_level="WARNING")


@pytest_asyncio.fixture
async def cache_app(cache_settings, fake_redis):
    client = CacheClient(fake_redis, url=cache_settings.redis_url)
    app = create_cache_app(cache_settings, cache_client=client)
    async with running(app):
        yield app


@pytest_asyncio.fixture
async def cache_client(cache_app):
    transport = ASGITransport(app=cache_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

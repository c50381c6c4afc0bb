"""
sharedstore: Relational Store Handle
=======================================

What:  Async SQLAlchemy engine, session factory and FastAPI dependencies.
Why:   One object owns the connection pool for the lifetime of the process.
How:   `Database` wraps an AsyncEngine (asyncpg driver) plus an
       async_sessionmaker. The user app builds it in its lifespan, stores it
       on `app.state.database` and disposes it on shutdown. Route handlers
       reach it only through the dependencies at the bottom of this module.
Who:   Used by the user service routes and health check.

Connection Pooling:
    pool_size / max_overflow come from Settings and go straight to
    SQLAlchemy. When every connection is checked out, further requests wait
    inside the pool; nothing here rejects or times them out.
    pool_pre_ping revalidates a pooled connection before use, so a request
    after a database restart gets a fresh connection instead of a stale one.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sharedstore.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


class Database:
    """
    Pooled handle to the relational store.

    Lifecycle:
        Database.from_settings(settings) → create_schema() (optional)
        → session() per request → dispose() at shutdown
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: returned rows stay readable after commit
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the engine and pool from configuration."""
        engine = create_async_engine(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Session scope that commits on success and rolls back on error.

        The connection goes back to the pool when the session closes, even
        if the handler raised.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> None:
        """
        Liveness probe: run SELECT 1.

        Raises whatever the driver raises; the health route turns that into
        an unhealthy response.
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        """Create missing tables from the ORM metadata. Existing tables are left alone."""
        # Import registers the model on Base.metadata
        from sharedstore.models.user import User  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured (tables: %s)", ", ".join(Base.metadata.tables))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── FastAPI Dependencies ──────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """The Database handle attached to the running app by its lifespan."""
    return request.app.state.database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Per-request session.

    Example usage in a route:
        @router.get("/users")
        async def list_users(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    # An exception raised by the route is thrown in at the yield and
    # propagates through the session scope, which rolls back and closes.
    async with database.session() as session:
        yield session

"""
sharedstore: FastAPI Application Factories
=============================================

What:  Builds the two deployable services from one package.
         create_user_app()  → users REST API over the relational store
         create_cache_app() → set-then-get demo over the key-value store
How:   Each factory wires middleware, exception handlers, routers and a
       lifespan that owns the backing-store handle.
Who:   uvicorn (`uvicorn sharedstore.main:user_app`) or
       `python -m sharedstore {users,cache}`. Only the latter configures
       logging (setup_logging); under bare uvicorn use its --log-config.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │  Middleware:  [Request ID] → [Access Log]           │
    │                                                     │
    │  user_app:    GET /  GET /users  GET /users/{id}    │
    │               POST /users  GET /health              │
    │  cache_app:   GET /  GET /health                    │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFoundError→404           │
    │    StoreError→500       anything else→500           │
    └─────────────────────────────────────────────────────┘

Lifecycle (both apps): init → serve → external shutdown
    user_app:   build Database (no startup probe: requests fail with 500
                until the database is reachable) → dispose on shutdown
    cache_app:  build CacheClient → connect() must succeed, otherwise the
                lifespan raises and the server exits → close on shutdown
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sharedstore import __version__
from sharedstore.cache import CacheClient
from sharedstore.config import Settings, settings as default_settings
from sharedstore.database import Database
from sharedstore.exceptions import (
    CacheError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from sharedstore.middleware.logging import RequestLoggingMiddleware
from sharedstore.middleware.request_id import RequestIDMiddleware, request_id_var
from sharedstore.routes import cache, health, users

logger = logging.getLogger(__name__)

_logging_configured = False


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once per process.

    Called by the CLI entry point before uvicorn starts; app lifespans
    never touch logging, so several apps can share one process. Later calls
    are no-ops.

    Format: 2024-01-15T12:00:00 [INFO] sharedstore.access: App 1 Users API GET /users 200 3.2ms [a1b2c3d4] from 10.0.0.5
    Output goes to stdout so container runtimes collect it.
    """
    global _logging_configured
    if _logging_configured:
        return
    _logging_configured = True

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from libraries; our access log covers it
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The catch-all handler runs outside RequestIDMiddleware, after the
    # ContextVar has been reset; request.state outlives it.
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map error kinds to status codes and the {"error": ...} body.

        ValidationError / RequestValidationError → 400
        NotFoundError                            → 404
        CacheError                               → 500 (with details)
        StoreError                               → 500
        Exception                                → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Malformed JSON or wrongly typed fields: same class of error as a
        # missing field, so 400 rather than FastAPI's 422
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        logger.warning("[%s] Invalid request: %s", _request_id(request), details)
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": details},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(CacheError)
    async def handle_cache_error(request: Request, exc: CacheError):
        logger.error(
            "[%s] Cache error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "details": exc.detail},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        # Detail stays in the log: it can name tables and constraints
        logger.error(
            "[%s] Store error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", _request_id(request), exc, exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _add_common_middleware(app: FastAPI) -> None:
    # Last added runs first: RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)


# ══════════════════════════════════════════════════════════════════════════
# User Service
# ══════════════════════════════════════════════════════════════════════════

def create_user_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Users REST API.

    Args:
        settings: Configuration; defaults to the environment-loaded instance.
        database: Pre-built handle (tests, embedding). Built from settings
                  in the lifespan when omitted. Disposed on shutdown either way.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("%s starting up (user service v%s)", settings.app_name, __version__)

        db = database or Database.from_settings(settings)
        app.state.database = db
        if settings.db_create_schema:
            await db.create_schema()

        logger.info("%s is running on %s:%d", settings.app_name, settings.host, settings.port)
        yield

        logger.info("%s shutting down...", settings.app_name)
        await db.dispose()

    app = FastAPI(
        title=f"{settings.app_name} Users API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    _add_common_middleware(app)
    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)
    return app


# ══════════════════════════════════════════════════════════════════════════
# Cache Service
# ══════════════════════════════════════════════════════════════════════════

def create_cache_app(
    settings: Optional[Settings] = None,
    cache_client: Optional[CacheClient] = None,
) -> FastAPI:
    """
    Key-value round-trip demo.

    Startup blocks on CacheClient.connect(); CacheConnectionError is
    logged and re-raised so the ASGI server aborts instead of serving
    in a degraded state.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Cache service starting up (v%s)", __version__)

        client = cache_client or CacheClient.from_url(settings.redis_url)
        try:
            await client.connect()
        except CacheError:
            logger.error("Failed to start server: Redis unreachable")
            await client.close()
            raise
        app.state.cache = client

        logger.info("Server is running on http://%s:%d", settings.host, settings.port)
        yield

        logger.info("Cache service shutting down...")
        await client.close()

    app = FastAPI(
        title="Cache API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    _add_common_middleware(app)
    register_exception_handlers(app)

    app.include_router(cache.router)
    return app


# uvicorn entry points: sharedstore.main:user_app / sharedstore.main:cache_app
user_app = create_user_app()
cache_app = create_cache_app()

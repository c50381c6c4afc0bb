"""
sharedstore: Cache Service Route Handlers
============================================

What:  GET / (set-then-get round trip) and GET /health (PING).
How:   The CacheClient comes from `app.state.cache`, connected once by the
       cache app lifespan and shared by every request.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from sharedstore.cache import CacheClient
from sharedstore.exceptions import CacheError
from sharedstore.schemas.cache import CacheHealthResponse, MessageResponse
from sharedstore.schemas.error import ErrorResponse
from sharedstore.services.cache_service import cache_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Cache"])


def get_cache(request: Request) -> CacheClient:
    """The CacheClient attached to the running app by its lifespan."""
    return request.app.state.cache


@router.get(
    "/",
    response_model=MessageResponse,
    responses={500: {"description": "Redis operation failed", "model": ErrorResponse}},
    summary="Write the message key and read it back",
)
async def read_message(cache: CacheClient = Depends(get_cache)) -> MessageResponse:
    message = await cache_service.round_trip_message(cache)
    return MessageResponse(message=message)


@router.get(
    "/health",
    response_model=CacheHealthResponse,
    responses={500: {"description": "Redis unreachable", "model": CacheHealthResponse}},
    summary="Service health check",
)
async def health_check(cache: CacheClient = Depends(get_cache)):
    try:
        await cache.ping()
    except CacheError as e:
        logger.warning("Health check: redis unreachable: %s", e.detail)
        body = CacheHealthResponse(
            status="unhealthy",
            redis="disconnected",
            timestamp=datetime.now(timezone.utc),
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    return CacheHealthResponse(
        status="healthy",
        redis="connected",
        timestamp=datetime.now(timezone.utc),
    )

"""
sharedstore: User Service Health Check
=========================================

What:  GET /health probing the relational store with SELECT 1.
Who:   Container health checks and operators.

    healthy:   SELECT 1 succeeded       → 200
    unhealthy: SELECT 1 raised anything → 500, with the failure detail

A failing probe is reported, never raised: the process keeps serving and
recovers on its own once the database is reachable again.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sharedstore.config import Settings, get_settings
from sharedstore.database import Database, get_database
from sharedstore.schemas.user import UserHealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=UserHealthResponse,
    response_model_exclude_none=True,
    responses={500: {"description": "Database unreachable", "model": UserHealthResponse}},
    summary="Service health check",
)
async def health_check(
    settings: Settings = Depends(get_settings),
    database: Database = Depends(get_database),
):
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", e)
        body = UserHealthResponse(
            status="unhealthy",
            app=settings.app_name,
            database="disconnected",
            error=str(e),
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    return UserHealthResponse(
        status="healthy",
        app=settings.app_name,
        database="connected",
    )

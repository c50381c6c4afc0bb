"""
sharedstore: User Service Route Handlers
===========================================

What:  GET /, GET /users, GET /users/{id}, POST /users.
How:   Each handler pulls the session and settings from dependencies,
       makes at most one UserService call and wraps the result with the
       instance's display name. Errors raised by the service are turned
       into responses by the exception handlers in sharedstore.main.

Every payload carries `app` so a client talking to several instances can
see which one answered.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sharedstore.config import Settings, get_settings
from sharedstore.database import get_db_session
from sharedstore.schemas.error import ErrorResponse
from sharedstore.schemas.user import (
    UserCreate,
    UserCreatedResponse,
    UserDetailResponse,
    UserListResponse,
    WelcomeResponse,
)
from sharedstore.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

ENDPOINTS = {
    "getAllUsers": "GET /users",
    "getUserById": "GET /users/:id",
    "createUser": "POST /users",
}


@router.get(
    "/",
    response_model=WelcomeResponse,
    response_model_exclude_none=True,
    summary="Welcome message naming this instance",
)
async def welcome(settings: Settings = Depends(get_settings)) -> WelcomeResponse:
    return WelcomeResponse(
        message=f"Welcome to {settings.app_name}!",
        note=settings.app_note,
        endpoints=ENDPOINTS,
    )


@router.get(
    "/users",
    response_model=UserListResponse,
    response_model_exclude_none=True,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all users ordered by id",
)
async def list_users(
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_session),
) -> UserListResponse:
    count, users = await user_service.list_users(db)
    return UserListResponse(
        app=settings.app_name,
        count=count,
        users=users,
        note=settings.app_note,
    )


@router.get(
    "/users/{user_id}",
    response_model=UserDetailResponse,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Get a single user by id",
)
async def get_user(
    user_id: str,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_session),
) -> UserDetailResponse:
    """
    Args:
        user_id: Taken as a string; UserService reports non-numeric ids as
                 404 instead of FastAPI's 422.
    """
    user = await user_service.get_user(db, user_id)
    return UserDetailResponse(app=settings.app_name, user=user)


@router.post(
    "/users",
    status_code=201,
    response_model=UserCreatedResponse,
    responses={
        400: {"description": "Name or email missing", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: Optional[UserCreate] = None,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_session),
) -> UserCreatedResponse:
    """
    Body: {"name": "John", "email": "john@example.com"}

    A request without a body is treated like an empty object and fails the
    presence check with 400.
    """
    payload = payload or UserCreate()
    user = await user_service.create_user(db, name=payload.name, email=payload.email)
    return UserCreatedResponse(
        app=settings.app_name,
        message="User created successfully",
        user=user,
    )

"""
sharedstore: User Service
============================

What:  The three user operations: list, get by id, create.
Why:   Keeps SQL and error classification out of the route handlers.
How:   Builds SQLAlchemy expressions (user input is always a bound
       parameter, never part of the query text) and runs them on the
       session the route received from Database.session().
Who:   Called by sharedstore.routes.users.

Error Handling Strategy:
    missing name/email        → ValidationError (400), nothing written
    no row for the id         → NotFoundError (404)
    anything else from store  → logged, re-raised as DatabaseError (500)
    Nothing is retried.
"""

import logging
from typing import List, Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sharedstore.exceptions import DatabaseError, NotFoundError, ValidationError
from sharedstore.models.user import User
from sharedstore.schemas.user import UserResponse

logger = logging.getLogger(__name__)

# users.id is a 32-bit SERIAL; anything outside can never match a row
MAX_USER_ID = 2_147_483_647


class UserService:
    """
    Stateless; the session is passed into every call so each request keeps
    its own transaction.
    """

    async def list_users(self, db: AsyncSession) -> Tuple[int, List[UserResponse]]:
        """
        Every user, ascending by id.

        Returns:
            (count, users). Unbounded: the full table is read.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(User).order_by(User.id.asc()))
            users = [UserResponse.model_validate(u) for u in result.scalars().all()]
        except Exception as e:
            logger.error("Error fetching users: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch users",
                detail=str(e),
                context={"error_type": type(e).__name__},
            ) from e

        return len(users), users

    async def get_user(self, db: AsyncSession, user_id: Union[int, str]) -> UserResponse:
        """
        One user by id.

        Args:
            user_id: Raw path value. Anything that is not a 32-bit positive
                     integer cannot be an id and is reported as not found.

        Raises:
            NotFoundError: No row with that id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        parsed_id = _parse_user_id(user_id)
        if parsed_id is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        try:
            result = await db.execute(select(User).where(User.id == parsed_id))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Error fetching user %s: %s", parsed_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch user",
                detail=str(e),
                context={"user_id": parsed_id},
            ) from e

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(parsed_id))

        return UserResponse.model_validate(user)

    async def create_user(self, db: AsyncSession, name: str, email: str) -> UserResponse:
        """
        Insert a user and return the stored row with its generated id.

        Raises:
            ValidationError: name or email missing/empty (→ 400)
            DatabaseError: Insert failed, including store constraints (→ 500)
        """
        if not name or not email:
            raise ValidationError(
                message="Name and email are required",
                context={"name_present": bool(name), "email_present": bool(email)},
            )

        try:
            user = User(name=name, email=email)
            db.add(user)
            # Flush runs the INSERT and loads the generated id
            await db.flush()
            created = UserResponse.model_validate(user)
            # 201 only once the row is durable and visible to other instances
            await db.commit()
        except Exception as e:
            logger.error("Error creating user: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to create user",
                detail=str(e),
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("User created: id=%d", created.id)
        return created


def _parse_user_id(raw: Union[int, str]) -> Union[int, None]:
    """
    Integer id in the users.id range, or None when no row could match.

    Deliberately answers 404 for ids like "abc" or 2**40. Sent to the store
    as-is they would fail with a type or range error, which would surface
    as a 500 "Failed to fetch user" instead.
    """
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if value < 1 or value > MAX_USER_ID:
        return None
    return value


user_service = UserService()

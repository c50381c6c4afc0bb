"""
sharedstore: User Service Request/Response Schemas
=====================================================

What:  Pydantic models defining the user service's JSON contract.
Why:   Validation of request shape, serialization of ORM rows, and OpenAPI
       docs from one definition.

Presence checks:
    UserCreate accepts missing `name`/`email` on purpose: the "both fields
    are required" rule is enforced by UserService so that a missing field
    yields the documented 400 {"error": "Name and email are required"}
    rather than FastAPI's generic 422 payload.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Body of POST /users, e.g. {"name": "Alice", "email": "alice@example.com"}."""
    name: Optional[str] = Field(default=None, description="Display name (required, non-empty)")
    email: Optional[str] = Field(default=None, description="Email address (required, non-empty)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """One row of the users table."""
    id: int = Field(description="Store-assigned identifier")
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    """
    What:  Full listing returned by GET /users.
    Order: Ascending by id. No pagination, the whole table is returned.
    """
    app: str = Field(description="Display name of the instance that answered")
    count: int = Field(description="Number of users in the listing")
    users: List[UserResponse]
    note: Optional[str] = Field(default=None, description="Instance note, when configured")


class UserDetailResponse(BaseModel):
    """Returned by GET /users/{id}."""
    app: str
    user: UserResponse


class UserCreatedResponse(BaseModel):
    """Returned by POST /users with HTTP 201."""
    app: str
    message: str = Field(default="User created successfully")
    user: UserResponse


class WelcomeResponse(BaseModel):
    """
    Returned by GET / on the user service.

    Example:
        {
            "message": "Welcome to App 1!",
            "endpoints": {"getAllUsers": "GET /users", ...}
        }
    """
    message: str
    note: Optional[str] = None
    endpoints: Dict[str, str]


class UserHealthResponse(BaseModel):
    """
    Returned by GET /health on the user service.

    status/database are "healthy"/"connected" or "unhealthy"/"disconnected";
    `error` carries the probe failure detail in the unhealthy case.
    """
    status: str
    app: str
    database: str
    error: Optional[str] = None


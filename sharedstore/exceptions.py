"""
sharedstore: Exception Hierarchy
===================================

What:  Application-specific exceptions, one per error kind the services report.
Why:   Services raise a typed error; the boundary layer (exception handlers in
       sharedstore.main) maps the type to an HTTP status code. Handlers never
       need their own try/except-and-500 blocks.
How:   Each exception carries a client-safe message and an optional context
       dict that is logged but never returned.

Exception Hierarchy:
    SharedStoreError (base)
    ├── ValidationError          → 400 Bad Request (missing input field)
    ├── NotFoundError            → 404 Not Found
    └── StoreError               → 500 Internal Server Error
        ├── DatabaseError        → relational store failure
        └── CacheError           → key-value store failure
            └── CacheConnectionError → startup connection failure (fatal)

    No transient/permanent split: every store failure
    is a StoreError and nothing is retried.
"""

from typing import Any, Dict, Optional


class SharedStoreError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SharedStoreError):
    """
    Raised when client input fails a presence check.

    HTTP:    400 Bad Request
    Example: POST /users without `name` → {"error": "Name and email are required"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SharedStoreError):
    """
    Raised when a requested record does not exist.

    HTTP:    404 Not Found
    The store returns "no row" rather than an error; services convert that
    into this exception so the route stays free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StoreError(SharedStoreError):
    """
    Any failure talking to a backing store.

    HTTP:    500 Internal Server Error
    Covers connection refused, timeouts and constraint violations alike.
    The message is generic; the underlying error goes into `context` and
    `detail` for logging and for the endpoints that report it.
    """

    def __init__(
        self,
        message: str = "A backing store error occurred",
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if detail:
            ctx["detail"] = detail
        super().__init__(message=message, context=ctx)
        self.detail = detail


class DatabaseError(StoreError):
    """Relational store failure (query, insert or connection)."""

    def __init__(
        self,
        message: str = "A database error occurred",
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, detail=detail, context=context)


class CacheError(StoreError):
    """Key-value store failure (get, set or ping)."""

    def __init__(
        self,
        message: str = "Redis operation failed",
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, detail=detail, context=context)


class CacheConnectionError(CacheError):
    """
    Raised when the key-value store cannot be reached at startup.

    Not mapped to a response: it escapes the cache app lifespan, the ASGI
    server aborts startup and the process exits.
    """

    def __init__(
        self,
        url: str,
        detail: Optional[str] = None,
    ):
        super().__init__(
            message=f"Could not connect to Redis at {url}",
            detail=detail,
            context={"url": url},
        )
        self.url = url

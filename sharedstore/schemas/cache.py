"""
sharedstore: Cache Service Response Schemas
"""

from datetime import datetime

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Value read back from the store after the write on GET /."""
    message: str


class CacheHealthResponse(BaseModel):
    """
    Returned by GET /health on the cache service.

    Example:
        {"status": "healthy", "redis": "connected", "timestamp": "2024-01-15T12:00:00Z"}
    """
    status: str = Field(description="healthy or unhealthy")
    redis: str = Field(description="connected or disconnected")
    timestamp: datetime = Field(description="Probe time (UTC)")

"""
sharedstore: Error Response Schema
=====================================

What:  Error body shared by both services.
Why:   Clients parse one shape for every 4xx/5xx.

Example:
    {"error": "User not found"}
    {"error": "Redis operation failed", "details": "Connection refused"}
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable error description")
    details: Optional[str] = Field(default=None, description="Underlying failure detail, when exposed")

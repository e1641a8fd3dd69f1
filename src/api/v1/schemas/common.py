"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error body produced by the exception handlers."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str

"""Response envelopes shared by all routers."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Success envelope."""
    success: bool = True
    message: str = ""
    data: Optional[Any] = None
    source: str = "api"
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class PaginatedResponse(ApiResponse):
    """Success envelope for a page of results."""
    page: int
    page_size: int
    total_pages: int
    total_items: int


class ErrorResponse(BaseModel):
    """Failure envelope. Never carries exception details."""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def error_code_for(status_code: int) -> str:
    return ERROR_CODES.get(status_code, f"HTTP_{status_code}")

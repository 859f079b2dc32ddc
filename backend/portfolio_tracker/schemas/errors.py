# backend/portfolio_tracker/schemas/errors.py
"""
Error bodies returned by the exception handlers in main.py and by the
rate limit handler.

Every body carries the request's correlation ID, the same value as the
X-Correlation-ID response header, so a reported error can be matched to
its log lines.
"""

from pydantic import BaseModel, Field

from portfolio_tracker.utils.context import get_correlation_id


class ErrorDetail(BaseModel):
    """
    Body of every 4xx/5xx response except request validation (422).

    Examples:
        {"error": "InvalidUploadError", "message": "Missing required columns: quantity",
         "details": {"field": "file", "filename": "h.csv"}, "correlation_id": "..."}
        {"error": "StoreError", "message": "Could not replace all holdings",
         "details": {"store": "holdings", "operation": "replace_all"}, "correlation_id": "..."}
    """

    error: str = Field(..., description="Exception or error type name")
    message: str
    details: dict | None = Field(default=None, description="Field, filename, store or retry info")
    correlation_id: str | None = Field(default_factory=get_correlation_id)


class ValidationErrorDetail(BaseModel):
    """Body of 422 responses: one entry per invalid request parameter."""

    error: str = "ValidationError"
    message: str = "Request validation failed"
    details: list[dict]
    correlation_id: str | None = Field(default_factory=get_correlation_id)

# backend/portfolio_tracker/schemas/upload.py
"""
Pydantic schemas for holdings upload and clear operations.
"""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """
    Response for POST /upload.

    Skipped rows are counted but not itemized.
    """

    filename: str = Field(
        ...,
        description="Original filename"
    )
    total_rows: int = Field(
        ...,
        description="Data rows read from the file"
    )
    holdings_count: int = Field(
        ...,
        description="Holdings now stored (the previous set was replaced)"
    )
    skipped_count: int = Field(
        ...,
        description="Rows skipped as non-conforming"
    )


class ClearResponse(BaseModel):
    """Response for POST /clear."""

    holdings_count: int = Field(
        default=0,
        description="Holdings stored after clearing (always 0)"
    )
    message: str = "Holdings cleared"

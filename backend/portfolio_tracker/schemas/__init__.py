# backend/portfolio_tracker/schemas/__init__.py
"""
Pydantic schemas for API responses.

- errors: Error response formats
- snapshots: Manual snapshot trigger
- upload: Holdings upload and clear
- views: Accounts, stocks and history views

Usage:
    from portfolio_tracker.schemas import AccountsViewResponse, ErrorDetail
"""

from portfolio_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_tracker.schemas.snapshots import SnapshotResponse
from portfolio_tracker.schemas.upload import ClearResponse, UploadResponse
from portfolio_tracker.schemas.views import (
    AccountSummary,
    AccountsViewResponse,
    HistoryViewResponse,
    SnapshotPoint,
    StocksViewResponse,
    StockView,
)

__all__ = [
    "ErrorDetail",
    "ValidationErrorDetail",
    "SnapshotResponse",
    "ClearResponse",
    "UploadResponse",
    "AccountSummary",
    "AccountsViewResponse",
    "HistoryViewResponse",
    "SnapshotPoint",
    "StocksViewResponse",
    "StockView",
]

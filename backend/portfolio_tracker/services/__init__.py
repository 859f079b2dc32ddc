# backend/portfolio_tracker/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive database sessions as parameters (not via Depends)
- Are easily testable via dependency injection

Usage:
    from portfolio_tracker.services import ValuationEngine, SnapshotService
    from portfolio_tracker.services import StoreError, ValidationError

Architecture:
    services/
    ├── __init__.py            # This file - main exports
    ├── exceptions.py          # Domain exceptions
    ├── constants.py           # Business constants and limits
    ├── protocols.py           # Service interfaces (Protocol classes)
    ├── market_data/           # Quote providers (chart endpoint, yfinance)
    ├── stores/                # Holdings and snapshot persistence
    ├── valuation/             # Valuation engine and calculators
    ├── snapshots/             # Daily snapshot service and scheduler
    └── upload/                # Holdings file parsing and ingestion
"""

from portfolio_tracker.services.exceptions import (
    InvalidUploadError,
    MarketDataError,
    ServiceError,
    StoreError,
    ValidationError,
)
from portfolio_tracker.services.market_data import (
    QuoteProvider,
    QuoteResult,
    QuoteStatus,
    YahooChartProvider,
    YFinanceQuoteProvider,
)
from portfolio_tracker.services.snapshots import (
    DailySnapshotScheduler,
    SnapshotResult,
    SnapshotService,
)
from portfolio_tracker.services.stores import (
    HoldingRecord,
    HoldingsStore,
    SnapshotRecord,
    SnapshotStore,
)
from portfolio_tracker.services.upload import UploadResult, UploadService
from portfolio_tracker.services.valuation import ValuationEngine

__all__ = [
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidUploadError",
    "StoreError",
    "MarketDataError",

    # Market data
    "QuoteProvider",
    "QuoteResult",
    "QuoteStatus",
    "YahooChartProvider",
    "YFinanceQuoteProvider",

    # Stores
    "HoldingRecord",
    "HoldingsStore",
    "SnapshotRecord",
    "SnapshotStore",

    # Valuation
    "ValuationEngine",

    # Snapshots
    "SnapshotService",
    "SnapshotResult",
    "DailySnapshotScheduler",

    # Upload
    "UploadService",
    "UploadResult",
]

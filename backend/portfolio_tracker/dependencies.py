# backend/portfolio_tracker/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances shared across all
requests. Services are lazily initialized on first use to avoid
import-time side effects (no network clients or schedulers at import).

Tests replace any of these through app.dependency_overrides.

Usage in routers:
    from portfolio_tracker.dependencies import get_valuation_engine

    @router.get("/")
    def view(engine: ValuationEngine = Depends(get_valuation_engine)):
        ...
"""

import logging
from functools import lru_cache

from portfolio_tracker.config import settings
from portfolio_tracker.database import SessionLocal
from portfolio_tracker.services.market_data import (
    QuoteProvider,
    YahooChartProvider,
    YFinanceQuoteProvider,
)
from portfolio_tracker.services.snapshots import (
    DailySnapshotScheduler,
    SnapshotService,
    timezone_clock,
)
from portfolio_tracker.services.upload import UploadService
from portfolio_tracker.services.valuation import ValuationEngine

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_quote_provider (no deps)
# 2. get_valuation_engine (depends on provider)
# 3. get_snapshot_service (depends on engine)
# 4. get_snapshot_scheduler (depends on snapshot service)
# 5. get_upload_service (no deps)


@lru_cache(maxsize=1)
def get_quote_provider() -> QuoteProvider:
    """
    Get the singleton quote provider selected by QUOTE_PROVIDER.

    - yahoo_chart: direct chart endpoint over requests (default)
    - yfinance: the yfinance library
    """
    if settings.quote_provider == "yfinance":
        logger.debug("Initializing singleton YFinanceQuoteProvider")
        return YFinanceQuoteProvider(timeout=settings.quote_timeout_seconds)

    logger.debug("Initializing singleton YahooChartProvider")
    return YahooChartProvider(
        base_url=settings.quote_base_url,
        timeout=settings.quote_timeout_seconds,
        max_redirects=settings.quote_max_redirects,
        user_agent=settings.quote_user_agent,
    )


@lru_cache(maxsize=1)
def get_valuation_engine() -> ValuationEngine:
    """Get the singleton ValuationEngine bound to the shared quote provider."""
    logger.debug("Initializing singleton ValuationEngine")
    return ValuationEngine(
        provider=get_quote_provider(),
        max_workers=settings.quote_max_workers,
    )


@lru_cache(maxsize=1)
def get_snapshot_service() -> SnapshotService:
    """
    Get the singleton SnapshotService.

    "Today" is the calendar date in SNAPSHOT_TIMEZONE, matching the
    timezone the daily job is scheduled in.
    """
    logger.debug("Initializing singleton SnapshotService")
    return SnapshotService(
        engine=get_valuation_engine(),
        clock=timezone_clock(settings.snapshot_timezone),
    )


@lru_cache(maxsize=1)
def get_snapshot_scheduler() -> DailySnapshotScheduler:
    """
    Get the singleton daily snapshot scheduler (not started).

    main.py starts it in the application lifespan when SCHEDULER_ENABLED.
    """
    logger.debug("Initializing singleton DailySnapshotScheduler")
    return DailySnapshotScheduler(
        service=get_snapshot_service(),
        session_factory=SessionLocal,
        hour=settings.snapshot_hour,
        minute=settings.snapshot_minute,
        timezone=settings.snapshot_timezone,
    )


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    """Get the singleton UploadService (CSV parser)."""
    logger.debug("Initializing singleton UploadService")
    return UploadService()

# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- Mock quote provider
- Sample data factories
- FastAPI TestClient with dependency overrides
"""

import os

# Must be set before importing anything that reads settings
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import (
    get_snapshot_service,
    get_upload_service,
    get_valuation_engine,
)
from portfolio_tracker.main import app
from portfolio_tracker.middleware.rate_limit import limiter
from portfolio_tracker.models import Base
from portfolio_tracker.services.exceptions import (
    MalformedQuoteError,
    ProviderUnavailableError,
    QuoteTimeoutError,
    TickerNotFoundError,
)
from portfolio_tracker.services.market_data.base import Quote, QuoteProvider
from portfolio_tracker.services.snapshots import SnapshotService
from portfolio_tracker.services.stores import HoldingRecord, HoldingsStore
from portfolio_tracker.services.upload import UploadService
from portfolio_tracker.services.valuation import ValuationEngine


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory bound to the test engine (for the scheduler)."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Iterator[Session]:
    """Create a database session for testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# MOCK QUOTE PROVIDER
# =============================================================================

class MockQuoteProvider(QuoteProvider):
    """
    Mock implementation of QuoteProvider for testing.

    Symbols without a configured quote raise TickerNotFoundError, so they
    come back from fetch() as NOT_FOUND.
    """

    def __init__(self):
        self._quotes: dict[str, Quote] = {}
        self._errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    def add_quote(self, symbol: str, price: str, change: str) -> None:
        """Configure a successful quote for a symbol."""
        self._quotes[symbol] = Quote(
            current_price=Decimal(price),
            price_change=Decimal(change),
        )

    def add_error(self, symbol: str, error: Exception) -> None:
        """Configure the error raised for a symbol."""
        self._errors[symbol] = error

    def reset(self) -> None:
        self._quotes.clear()
        self._errors.clear()
        self.calls.clear()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def _fetch_quote(self, symbol: str) -> Quote:
        self.calls.append(symbol)

        if symbol in self._errors:
            raise self._errors[symbol]
        if symbol in self._quotes:
            return self._quotes[symbol]

        raise TickerNotFoundError(symbol, self.name, reason="not configured")


@pytest.fixture
def mock_provider() -> MockQuoteProvider:
    """Mock provider with a few common symbols configured."""
    provider = MockQuoteProvider()
    provider.add_quote("AAPL", "10.00", "1.00")
    provider.add_quote("MSFT", "100.50", "-0.25")
    provider.add_quote("VTI", "250.00", "2.50")
    return provider


@pytest.fixture
def failing_symbols(mock_provider) -> MockQuoteProvider:
    """Mock provider where BAD / SLOW / BROKEN / JUNK fail in different ways."""
    mock_provider.add_error("SLOW", QuoteTimeoutError("mock", 10))
    mock_provider.add_error("BROKEN", ProviderUnavailableError("mock", "HTTP 503"))
    mock_provider.add_error("JUNK", MalformedQuoteError("JUNK", "mock", "price missing"))
    return mock_provider


@pytest.fixture
def valuation_engine(mock_provider) -> ValuationEngine:
    return ValuationEngine(provider=mock_provider)


@pytest.fixture
def snapshot_date() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def snapshot_service(valuation_engine, snapshot_date) -> SnapshotService:
    """SnapshotService whose clock is pinned to snapshot_date."""
    return SnapshotService(engine=valuation_engine, clock=lambda: snapshot_date)


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

def make_holding(account: str, symbol: str, quantity: str) -> HoldingRecord:
    return HoldingRecord(account=account, symbol=symbol, quantity=Decimal(quantity))


@pytest.fixture
def sample_holdings() -> list[HoldingRecord]:
    """Two accounts; AAPL held in both."""
    return [
        make_holding("Brokerage", "AAPL", "2"),
        make_holding("Brokerage", "MSFT", "3"),
        make_holding("IRA", "AAPL", "1"),
        make_holding("IRA", "VTI", "0.5"),
    ]


@pytest.fixture
def stored_holdings(db, sample_holdings) -> list[HoldingRecord]:
    """sample_holdings persisted in the test database."""
    HoldingsStore(db).replace_all(sample_holdings)
    return sample_holdings


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Each test starts with fresh rate limit counters."""
    limiter.reset()
    yield


@pytest.fixture
def client(db, valuation_engine, snapshot_service) -> Iterator[TestClient]:
    """
    TestClient with the database, engine and snapshot service overridden.

    Redirects are not followed so redirect responses can be asserted.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_valuation_engine] = lambda: valuation_engine
    app.dependency_overrides[get_snapshot_service] = lambda: snapshot_service
    app.dependency_overrides[get_upload_service] = lambda: UploadService()

    with TestClient(app, follow_redirects=False) as c:
        yield c

    app.dependency_overrides.clear()

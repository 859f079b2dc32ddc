# backend/portfolio_tracker/services/market_data/__init__.py
"""
Quote provider package.

This package contains:
- Abstract provider interface and result types (base.py)
- Direct HTTP provider for the Yahoo chart endpoint (yahoo_chart.py)
- yfinance-backed provider (yfinance_provider.py)

Usage:
    from portfolio_tracker.services.market_data import (
        QuoteProvider,
        QuoteResult,
        YahooChartProvider,
    )

Architecture:
    QuoteProvider (ABC)
    ├── YahooChartProvider (default, requests)
    └── YFinanceQuoteProvider (yfinance)
"""

from portfolio_tracker.services.market_data.base import (
    Quote,
    QuoteProvider,
    QuoteResult,
    QuoteStatus,
    parse_chart_document,
    parse_chart_meta,
)
from portfolio_tracker.services.market_data.yahoo_chart import YahooChartProvider
from portfolio_tracker.services.market_data.yfinance_provider import YFinanceQuoteProvider

__all__ = [
    # Abstract interface
    "QuoteProvider",
    # Data classes
    "Quote",
    "QuoteResult",
    "QuoteStatus",
    # Parsing helpers
    "parse_chart_document",
    "parse_chart_meta",
    # Concrete implementations
    "YahooChartProvider",
    "YFinanceQuoteProvider",
]

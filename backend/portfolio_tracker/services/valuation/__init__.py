# backend/portfolio_tracker/services/valuation/__init__.py
"""
Valuation Engine Package.

Usage:
    from portfolio_tracker.services.valuation import ValuationEngine

    engine = ValuationEngine(provider)
    accounts = engine.compute_account_valuations(holdings)

Architecture:
    valuation/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Internal data classes
    ├── calculators.py           # Stock / account / portfolio calculators
    └── engine.py                # ValuationEngine (orchestrator)

Data Flow:
    Holdings → distinct symbols → QuoteProvider.fetch → QuoteResults
    Holding + QuoteResult → StockValuationCalculator → StockValuation
    StockValuations → AccountRollupCalculator → AccountValuation
    AccountValuations → PortfolioRollupCalculator → PortfolioValuation
"""

from portfolio_tracker.services.valuation.calculators import (
    AccountRollupCalculator,
    PortfolioRollupCalculator,
    StockValuationCalculator,
)
from portfolio_tracker.services.valuation.engine import ValuationEngine
from portfolio_tracker.services.valuation.types import (
    AccountValuation,
    PortfolioValuation,
    StockValuation,
)

__all__ = [
    # Engine
    "ValuationEngine",

    # Data types
    "StockValuation",
    "AccountValuation",
    "PortfolioValuation",

    # Calculators (for testing)
    "StockValuationCalculator",
    "AccountRollupCalculator",
    "PortfolioRollupCalculator",
]

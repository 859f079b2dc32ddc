# backend/portfolio_tracker/services/upload/parsers/__init__.py
"""
Holdings file parsers package.

Usage:
    from portfolio_tracker.services.upload.parsers import CSVHoldingsParser

    with open("holdings.csv", "rb") as f:
        result = CSVHoldingsParser().parse(f, "holdings.csv")
"""

from portfolio_tracker.services.upload.parsers.base import (
    HoldingsFileParser,
    ParseError,
    ParseResult,
)
from portfolio_tracker.services.upload.parsers.csv_parser import CSVHoldingsParser

__all__ = [
    # Base classes
    "HoldingsFileParser",
    "ParseError",
    "ParseResult",
    # Concrete parsers
    "CSVHoldingsParser",
]

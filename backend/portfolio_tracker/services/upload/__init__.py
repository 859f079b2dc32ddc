# backend/portfolio_tracker/services/upload/__init__.py
"""
Upload service package.

Usage:
    from portfolio_tracker.services.upload import UploadService

    result = UploadService().process_file(db, file, "holdings.csv")

Architecture:
    upload/
    ├── __init__.py          # This file - main exports
    ├── service.py           # UploadService (parse + replace holdings)
    └── parsers/
        ├── base.py          # Abstract interface + result types
        └── csv_parser.py    # CSV implementation
"""

from portfolio_tracker.services.upload.parsers import (
    CSVHoldingsParser,
    HoldingsFileParser,
    ParseError,
    ParseResult,
)
from portfolio_tracker.services.upload.service import (
    UploadResult,
    UploadService,
)

__all__ = [
    # Service
    "UploadService",
    "UploadResult",
    # Parsers
    "HoldingsFileParser",
    "CSVHoldingsParser",
    "ParseError",
    "ParseResult",
]

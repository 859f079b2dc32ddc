# backend/portfolio_tracker/services/upload/parsers/base.py
"""
Abstract interface for holdings file parsers.

Design Principles:
- Parsers only parse and normalize; they never touch the database
- Row-level problems are collected, never raised
- File-level problems (unreadable file, missing header) are reported as
  row 0 errors so the service can reject the whole upload
"""

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO, Any

from portfolio_tracker.services.stores.types import HoldingRecord


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class ParseError:
    """
    Represents a parsing error for a specific row.

    Attributes:
        row_number: 1-based row number (0 for file-level errors)
        error_type: Category of error (e.g., "missing_field", "invalid_quantity")
        message: Human-readable error description
        field: Specific field that caused the error (if applicable)
        raw_data: Original row data for context
    """

    row_number: int
    error_type: str
    message: str
    field: str | None = None
    raw_data: dict[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def is_file_level(self) -> bool:
        return self.row_number == 0


@dataclass
class ParseResult:
    """
    Result of parsing a holdings file.

    Attributes:
        holdings: Accepted, normalized holdings in file order
        errors: Rejected rows and file-level errors
        total_rows: Number of data rows read (header excluded)
    """

    holdings: list[HoldingRecord] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def success_count(self) -> int:
        return len(self.holdings)

    @property
    def skipped_count(self) -> int:
        return len(self.row_errors)

    @property
    def file_errors(self) -> list[ParseError]:
        return [e for e in self.errors if e.is_file_level]

    @property
    def row_errors(self) -> list[ParseError]:
        return [e for e in self.errors if not e.is_file_level]

    @property
    def is_readable(self) -> bool:
        """False when the file as a whole could not be used."""
        return not self.file_errors


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class HoldingsFileParser(ABC):
    """
    Abstract base class for holdings file parsers.

    Example:
        parser = CSVHoldingsParser()
        result = parser.parse(file, "holdings.csv")

        for error in result.row_errors:
            print(f"Skipped row {error.row_number}: {error.message}")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable parser name, used in logging."""
        pass

    @abstractmethod
    def parse(self, file: BinaryIO, filename: str) -> ParseResult:
        """
        Parse file contents into holdings.

        Args:
            file: File-like object (binary mode) to read from
            filename: Original filename (for log messages)

        Returns:
            ParseResult containing accepted holdings and skipped rows
        """
        pass

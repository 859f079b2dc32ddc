# backend/portfolio_tracker/services/upload/service.py
"""
Upload service for holdings files.

Flow:
1. Parse the file (rows that do not conform are skipped)
2. Reject the upload if the file itself is unusable
3. Replace the stored holdings with the accepted rows, atomically

An upload whose rows are all skipped still replaces the holdings (with
an empty set); only file-level failures leave the store untouched.

Usage:
    from portfolio_tracker.services.upload import UploadService

    result = UploadService().process_file(db, file, "holdings.csv")
    print(f"Stored {result.holdings_count} holdings")
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO

from sqlalchemy.orm import Session

from portfolio_tracker.services.exceptions import InvalidUploadError
from portfolio_tracker.services.stores import HoldingsStore
from portfolio_tracker.services.upload.parsers import (
    CSVHoldingsParser,
    HoldingsFileParser,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class UploadResult:
    """
    Result of processing an uploaded holdings file.

    Attributes:
        filename: Original filename
        total_rows: Data rows read from the file
        holdings_count: Holdings stored (replacing the previous set)
        skipped_count: Rows skipped as non-conforming
    """

    filename: str
    total_rows: int
    holdings_count: int
    skipped_count: int


# =============================================================================
# UPLOAD SERVICE
# =============================================================================

class UploadService:
    """Parses holdings files and replaces the stored holdings."""

    def __init__(self, parser: HoldingsFileParser | None = None) -> None:
        self._parser = parser or CSVHoldingsParser()

    def process_file(self, db: Session, file: BinaryIO, filename: str) -> UploadResult:
        """
        Parse a holdings file and store its rows as the new holdings.

        Raises:
            InvalidUploadError: The file could not be read or lacks the
                required header; stored holdings are unchanged
            StoreError: Persisting failed; stored holdings are unchanged
        """
        parsed = self._parser.parse(file, filename)

        if not parsed.is_readable:
            message = "; ".join(e.message for e in parsed.file_errors)
            logger.warning(f"Rejected upload {filename}: {message}")
            raise InvalidUploadError(message, filename=filename)

        stored = HoldingsStore(db).replace_all(parsed.holdings)

        logger.info(
            f"Upload complete: {filename} stored={stored} "
            f"skipped={parsed.skipped_count} of {parsed.total_rows} rows"
        )
        return UploadResult(
            filename=filename,
            total_rows=parsed.total_rows,
            holdings_count=stored,
            skipped_count=parsed.skipped_count,
        )

# backend/portfolio_tracker/services/upload/parsers/csv_parser.py
"""
CSV holdings file parser.

Expected CSV Format:
    account,symbol,quantity
    Brokerage,AAPL,10
    Brokerage,msft,2.5
    IRA,VTI,40

Row rules:
    - account, symbol and quantity must all be non-empty after trimming
    - quantity must parse as a finite number greater than zero
    - symbol is upper-cased
    - any other row is skipped (recorded in ParseResult.errors, never raised)

Header matching is exact apart from surrounding whitespace: "Account"
is not the account column. Extra columns are ignored.
"""

import csv
import io
import logging
from decimal import Decimal, InvalidOperation
from typing import BinaryIO

from portfolio_tracker.services.constants import MAX_UPLOAD_ROWS
from portfolio_tracker.services.stores.types import HoldingRecord
from portfolio_tracker.services.upload.parsers.base import (
    HoldingsFileParser,
    ParseError,
    ParseResult,
)

logger = logging.getLogger(__name__)


class CSVHoldingsParser(HoldingsFileParser):
    """
    Parser for CSV holdings files.

    Features:
    - Graceful per-row error handling (bad rows are skipped)
    - Encoding fallback (UTF-8, UTF-8 with BOM, Latin-1)

    Example:
        parser = CSVHoldingsParser()

        with open("holdings.csv", "rb") as f:
            result = parser.parse(f, "holdings.csv")

        print(f"Accepted {result.success_count}, skipped {result.skipped_count}")
    """

    REQUIRED_COLUMNS: tuple[str, ...] = ("account", "symbol", "quantity")

    def __init__(self, max_rows: int = MAX_UPLOAD_ROWS) -> None:
        self._max_rows = max_rows

    @property
    def name(self) -> str:
        return "CSV"

    def parse(self, file: BinaryIO, filename: str) -> ParseResult:
        logger.info(f"Parsing CSV file: {filename}")

        result = ParseResult()

        try:
            content = self._read_file_content(file)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read file {filename}: {e}", exc_info=True)
            result.errors.append(ParseError(
                row_number=0,
                error_type="file_read_error",
                message=f"Could not read file: {e}",
            ))
            return result

        try:
            reader = csv.DictReader(io.StringIO(content))

            if not reader.fieldnames:
                result.errors.append(ParseError(
                    row_number=0,
                    error_type="missing_headers",
                    message="CSV file has no header row",
                ))
                return result

            column_map = self._build_column_map(reader.fieldnames)
            missing_columns = [c for c in self.REQUIRED_COLUMNS if c not in column_map]
            if missing_columns:
                result.errors.append(ParseError(
                    row_number=0,
                    error_type="missing_columns",
                    message=f"Missing required columns: {', '.join(missing_columns)}",
                ))
                return result

            for row_num, row in enumerate(reader, start=2):  # Header is row 1
                if result.total_rows >= self._max_rows:
                    result.errors.append(ParseError(
                        row_number=0,
                        error_type="too_many_rows",
                        message=f"File exceeds {self._max_rows} data rows",
                    ))
                    return result

                result.total_rows += 1
                holding, error = self._parse_row(row_num, row, column_map)
                if error:
                    logger.debug(f"Skipping row {row_num}: {error.message}")
                    result.errors.append(error)
                else:
                    result.holdings.append(holding)

        except csv.Error as e:
            logger.error(f"CSV parsing error in {filename}: {e}")
            result.errors.append(ParseError(
                row_number=0,
                error_type="csv_format_error",
                message=f"Invalid CSV format: {e}",
            ))

        logger.info(
            f"Parsed {filename}: {result.success_count} holdings, "
            f"{result.skipped_count} rows skipped"
        )
        return result

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    def _read_file_content(self, file: BinaryIO) -> str:
        """
        Read and decode file content, handling different encodings.

        A UTF-8 byte order mark is stripped so it does not end up in the
        first header name.
        """
        raw_content = file.read()

        try:
            return raw_content.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        # Fall back to Latin-1 (never fails, but may produce garbage)
        logger.warning("File is not UTF-8, falling back to Latin-1 encoding")
        return raw_content.decode("latin-1")

    def _build_column_map(self, headers: list[str]) -> dict[str, str]:
        """Map required column name -> actual header (ignoring surrounding whitespace)."""
        column_map: dict[str, str] = {}
        for header in headers:
            if header is None:
                continue
            name = header.strip()
            if name in self.REQUIRED_COLUMNS and name not in column_map:
                column_map[name] = header
        return column_map

    def _parse_row(
            self,
            row_num: int,
            row: dict[str, str | None],
            column_map: dict[str, str],
    ) -> tuple[HoldingRecord | None, ParseError | None]:
        raw_data = {k: v for k, v in row.items() if k is not None}

        values: dict[str, str] = {}
        for column in self.REQUIRED_COLUMNS:
            # Short rows yield None for the missing trailing columns
            value = (row.get(column_map[column]) or "").strip()
            if not value:
                return None, ParseError(
                    row_number=row_num,
                    error_type="missing_field",
                    message=f"Missing value for '{column}'",
                    field=column,
                    raw_data=raw_data,
                )
            values[column] = value

        quantity = self._parse_quantity(values["quantity"])
        if quantity is None:
            return None, ParseError(
                row_number=row_num,
                error_type="invalid_quantity",
                message=f"Quantity must be a positive number, got '{values['quantity']}'",
                field="quantity",
                raw_data=raw_data,
            )

        return HoldingRecord(
            account=values["account"],
            symbol=values["symbol"].upper(),
            quantity=quantity,
        ), None

    def _parse_quantity(self, value: str) -> Decimal | None:
        try:
            quantity = Decimal(value)
        except InvalidOperation:
            return None
        if not quantity.is_finite() or quantity <= 0:
            return None
        return quantity

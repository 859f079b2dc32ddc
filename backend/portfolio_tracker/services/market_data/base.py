# backend/portfolio_tracker/services/market_data/base.py
"""
Abstract interface for quote providers.

Every provider answers one question: what is the current price of a
symbol and how much has it moved since the previous close? Providers
differ only in how they reach the Yahoo chart metadata (raw HTTP or the
yfinance library); parsing and failure classification are shared here.

Contract:
- fetch() never raises. Every failure becomes an unavailable QuoteResult
  tagged with a QuoteStatus describing the cause.
- One outbound request per fetch() call. No batching, caching or retry.
- Prices are Decimal, rounded to 2 places (ROUND_HALF_UP).
"""

import enum
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from portfolio_tracker.services.exceptions import (
    MalformedQuoteError,
    MarketDataError,
    ProviderUnavailableError,
    QuoteTimeoutError,
    RateLimitError,
    TickerNotFoundError,
    TooManyRedirectsError,
)
from portfolio_tracker.utils.money import round_money

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

class QuoteStatus(str, enum.Enum):
    """Outcome of a single quote fetch."""
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"  # Remote answered with an error for this symbol
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"  # Connection failure or non-success status
    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    MALFORMED = "MALFORMED"  # Payload missing or with non-numeric price fields


@dataclass(frozen=True)
class Quote:
    """
    Current price and day change for one symbol.

    Attributes:
        current_price: Regular market price, rounded to 2 places
        price_change: current_price - previous_close, rounded to 2 places
    """

    current_price: Decimal
    price_change: Decimal


@dataclass(frozen=True)
class QuoteResult:
    """
    Result of a quote fetch: either a Quote or the reason there is none.

    Attributes:
        symbol: The symbol requested
        status: QuoteStatus.OK when quote is set, otherwise the failure cause
        quote: The quote (None unless status is OK)
        error: Human-readable failure description (None on success)
    """

    symbol: str
    status: QuoteStatus
    quote: Quote | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.status == QuoteStatus.OK) != (self.quote is not None):
            raise ValueError("quote must be set exactly when status is OK")

    @property
    def is_available(self) -> bool:
        return self.quote is not None

    @classmethod
    def ok(cls, symbol: str, quote: Quote) -> "QuoteResult":
        return cls(symbol=symbol, status=QuoteStatus.OK, quote=quote)

    @classmethod
    def unavailable(cls, symbol: str, status: QuoteStatus, error: str) -> "QuoteResult":
        return cls(symbol=symbol, status=status, error=error)


# =============================================================================
# CHART METADATA PARSING
# =============================================================================

def _to_decimal(value: Any, field_name: str, symbol: str, provider: str) -> Decimal:
    # bool is an int subclass; JSON true/false is never a price
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise MalformedQuoteError(symbol, provider, f"{field_name} is not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise MalformedQuoteError(symbol, provider, f"{field_name} is not finite")
    # str() keeps the short repr of floats (179.66, not 179.659999...)
    return Decimal(str(value))


def parse_chart_meta(symbol: str, meta: Any, provider: str) -> Quote:
    """
    Build a Quote from a Yahoo chart "meta" object.

    Reads regularMarketPrice and previousClose, falling back to
    chartPreviousClose when previousClose is absent or null.

    Raises:
        MalformedQuoteError: meta is not an object or a price field is
            missing or not numeric
    """
    if not isinstance(meta, dict):
        raise MalformedQuoteError(symbol, provider, "chart meta missing")

    price = meta.get("regularMarketPrice")
    previous_close = meta.get("previousClose")
    if previous_close is None:
        previous_close = meta.get("chartPreviousClose")

    if price is None:
        raise MalformedQuoteError(symbol, provider, "regularMarketPrice missing")
    if previous_close is None:
        raise MalformedQuoteError(symbol, provider, "previous close missing")

    current = _to_decimal(price, "regularMarketPrice", symbol, provider)
    previous = _to_decimal(previous_close, "previousClose", symbol, provider)

    return Quote(
        current_price=round_money(current),
        price_change=round_money(current - previous),
    )


def parse_chart_document(symbol: str, document: Any, provider: str) -> Quote:
    """
    Build a Quote from a full chart response document.

    Expected shape: {"chart": {"result": [{"meta": {...}}], "error": null}}

    Raises:
        TickerNotFoundError: chart.error is set
        MalformedQuoteError: the document does not have the expected shape
    """
    chart = document.get("chart") if isinstance(document, dict) else None
    if not isinstance(chart, dict):
        raise MalformedQuoteError(symbol, provider, "'chart' object missing")

    error = chart.get("error")
    if error:
        description = error.get("description") if isinstance(error, dict) else str(error)
        raise TickerNotFoundError(symbol, provider, reason=description)

    results = chart.get("result")
    if not isinstance(results, list) or not results:
        raise MalformedQuoteError(symbol, provider, "chart result empty")

    first = results[0]
    meta = first.get("meta") if isinstance(first, dict) else None
    return parse_chart_meta(symbol, meta, provider)


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class QuoteProvider(ABC):
    """
    Abstract base class for quote providers.

    Subclasses implement _fetch_quote(), raising MarketDataError subclasses
    on failure. The public fetch() method converts those into tagged
    QuoteResults so callers never see an exception.

    Status mapping:
        TickerNotFoundError     -> NOT_FOUND
        RateLimitError          -> RATE_LIMITED
        QuoteTimeoutError       -> TIMEOUT
        TooManyRedirectsError   -> TOO_MANY_REDIRECTS
        ProviderUnavailableError-> TRANSPORT_ERROR
        MalformedQuoteError     -> MALFORMED
    """

    # Most specific exception first: the timeout and redirect errors are
    # ProviderUnavailableError subclasses
    _STATUS_BY_ERROR: tuple[tuple[type[MarketDataError], QuoteStatus], ...] = (
        (TickerNotFoundError, QuoteStatus.NOT_FOUND),
        (RateLimitError, QuoteStatus.RATE_LIMITED),
        (QuoteTimeoutError, QuoteStatus.TIMEOUT),
        (TooManyRedirectsError, QuoteStatus.TOO_MANY_REDIRECTS),
        (ProviderUnavailableError, QuoteStatus.TRANSPORT_ERROR),
        (MalformedQuoteError, QuoteStatus.MALFORMED),
    )

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this provider.

        Used for logging and error messages.
        """
        pass

    @abstractmethod
    def _fetch_quote(self, symbol: str) -> Quote:
        """
        Fetch the quote for one symbol.

        Raises:
            TickerNotFoundError: Remote reported an error for the symbol
            RateLimitError: Remote throttled the request
            ProviderUnavailableError: Transport failure (incl. timeout and
                too many redirects)
            MalformedQuoteError: Payload did not contain a usable price
        """
        pass

    def fetch(self, symbol: str) -> QuoteResult:
        """
        Fetch the current quote for a symbol.

        Never raises: failures come back as an unavailable QuoteResult.
        """
        try:
            quote = self._fetch_quote(symbol)
        except MarketDataError as e:
            status = self._status_for(e)
            logger.warning(f"Quote unavailable for {symbol} ({status.value}): {e}")
            return QuoteResult.unavailable(symbol, status, str(e))
        except Exception as e:
            logger.error(f"Unexpected {self.name} error for {symbol}: {e}")
            return QuoteResult.unavailable(symbol, QuoteStatus.TRANSPORT_ERROR, str(e))

        logger.debug(
            f"Quote for {symbol}: price={quote.current_price} change={quote.price_change}"
        )
        return QuoteResult.ok(symbol, quote)

    def _status_for(self, error: MarketDataError) -> QuoteStatus:
        for error_type, status in self._STATUS_BY_ERROR:
            if isinstance(error, error_type):
                return status
        return QuoteStatus.TRANSPORT_ERROR

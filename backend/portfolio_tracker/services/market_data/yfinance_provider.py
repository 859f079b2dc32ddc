# backend/portfolio_tracker/services/market_data/yfinance_provider.py
"""
Quote provider implemented with the yfinance library.

yfinance downloads the same chart document as YahooChartProvider and
exposes its "meta" object as the ticker's history metadata, so both
providers share the meta parser in base.py.

Limitations:
- yfinance manages its own HTTP session; the redirect limit is not
  configurable here
- Rate limits are not officially documented, but exist
"""

import logging

import yfinance as yf

from portfolio_tracker.services.exceptions import (
    MalformedQuoteError,
    ProviderUnavailableError,
    QuoteTimeoutError,
    RateLimitError,
    TickerNotFoundError,
)
from portfolio_tracker.services.market_data.base import (
    Quote,
    QuoteProvider,
    parse_chart_meta,
)

logger = logging.getLogger(__name__)


class YFinanceQuoteProvider(QuoteProvider):
    """
    Yahoo Finance quote provider using yfinance.

    Configuration:
        timeout: History request timeout in seconds (default: 10)
    """

    def __init__(self, timeout: float = 10) -> None:
        self._timeout = timeout
        logger.info(f"YFinanceQuoteProvider initialized (timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "yfinance"

    def _fetch_quote(self, symbol: str) -> Quote:
        logger.debug(f"Fetching quote for {symbol} via yfinance")

        try:
            yf_ticker = yf.Ticker(symbol)
            # A multi-day range drops previousClose from the metadata
            df = yf_ticker.history(period="1d", interval="1d", timeout=self._timeout)
            if df is None or df.empty:
                raise TickerNotFoundError(symbol, self.name, reason="no price data")
            meta = yf_ticker.get_history_metadata()
        except (TickerNotFoundError, MalformedQuoteError):
            raise
        except Exception as e:
            raise self._classify_error(symbol, e)

        if not meta:
            raise TickerNotFoundError(symbol, self.name, reason="no history metadata")

        return parse_chart_meta(symbol, meta, self.name)

    def _classify_error(self, symbol: str, error: Exception) -> Exception:
        """Map a yfinance/requests failure onto the market data exceptions."""
        error_str = str(error).lower()

        if "not found" in error_str or "no data" in error_str or "delisted" in error_str:
            return TickerNotFoundError(symbol, self.name, reason=str(error))
        if "rate limit" in error_str or "too many requests" in error_str:
            return RateLimitError(provider=self.name)
        if "timed out" in error_str or "timeout" in error_str:
            return QuoteTimeoutError(self.name, self._timeout)

        logger.error(f"yfinance error for {symbol}: {error}")
        return ProviderUnavailableError(provider=self.name, reason=str(error))

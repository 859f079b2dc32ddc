# backend/tests/services/test_yfinance_quote_provider.py
"""
Tests for the YFinanceQuoteProvider.

Note: These tests mock the yfinance library to avoid actual API calls.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from portfolio_tracker.services.market_data import QuoteStatus, YFinanceQuoteProvider

TICKER_PATH = "portfolio_tracker.services.market_data.yfinance_provider.yf.Ticker"


def _ticker(meta=None, empty: bool = False, history_error: Exception | None = None) -> MagicMock:
    ticker = MagicMock()
    if history_error is not None:
        ticker.history.side_effect = history_error
    else:
        df = MagicMock()
        df.empty = empty
        ticker.history.return_value = df
    ticker.get_history_metadata.return_value = meta
    return ticker


class TestYFinanceQuoteProvider:
    """Tests for quote fetching through yfinance."""

    def test_provider_name(self):
        assert YFinanceQuoteProvider().name == "yfinance"

    def test_successful_quote(self):
        meta = {"regularMarketPrice": 412.3, "previousClose": 410.05}

        with patch(TICKER_PATH, return_value=_ticker(meta)) as mock_ticker:
            result = YFinanceQuoteProvider(timeout=5).fetch("MSFT")

        mock_ticker.assert_called_once_with("MSFT")
        mock_ticker.return_value.history.assert_called_once_with(
            period="1d", interval="1d", timeout=5
        )
        assert result.status == QuoteStatus.OK
        assert result.quote.current_price == Decimal("412.30")
        assert result.quote.price_change == Decimal("2.25")

    def test_change_is_against_previous_session_close(self):
        """Only the latest session is requested, so previousClose is yesterday's close."""
        meta = {"regularMarketPrice": 105.0, "previousClose": 104.0, "chartPreviousClose": 99.0}

        with patch(TICKER_PATH, return_value=_ticker(meta)) as mock_ticker:
            result = YFinanceQuoteProvider().fetch("X")

        assert mock_ticker.return_value.history.call_args.kwargs["period"] == "1d"
        assert result.quote.price_change == Decimal("1.00")

    def test_chart_previous_close_fallback(self):
        meta = {"regularMarketPrice": 20, "chartPreviousClose": 18}

        with patch(TICKER_PATH, return_value=_ticker(meta)):
            result = YFinanceQuoteProvider().fetch("X")

        assert result.quote.price_change == Decimal("2.00")

    def test_empty_history_is_not_found(self):
        with patch(TICKER_PATH, return_value=_ticker(empty=True)):
            result = YFinanceQuoteProvider().fetch("NOPE")

        assert result.status == QuoteStatus.NOT_FOUND

    def test_empty_metadata_is_not_found(self):
        with patch(TICKER_PATH, return_value=_ticker(meta={})):
            result = YFinanceQuoteProvider().fetch("NOPE")

        assert result.status == QuoteStatus.NOT_FOUND

    def test_missing_price_is_malformed(self):
        with patch(TICKER_PATH, return_value=_ticker(meta={"previousClose": 1.0})):
            result = YFinanceQuoteProvider().fetch("X")

        assert result.status == QuoteStatus.MALFORMED

    @pytest.mark.parametrize("message,expected_status", [
        ("No data found, symbol may be delisted", QuoteStatus.NOT_FOUND),
        ("Too Many Requests. Rate limited. Try after a while.", QuoteStatus.RATE_LIMITED),
        ("Read timed out. (read timeout=10)", QuoteStatus.TIMEOUT),
        ("Connection reset by peer", QuoteStatus.TRANSPORT_ERROR),
    ])
    def test_errors_are_classified(self, message, expected_status):
        with patch(TICKER_PATH, return_value=_ticker(history_error=Exception(message))):
            result = YFinanceQuoteProvider().fetch("X")

        assert not result.is_available
        assert result.status == expected_status

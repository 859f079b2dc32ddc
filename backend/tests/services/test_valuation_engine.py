# backend/tests/services/test_valuation_engine.py
"""
Tests for ValuationEngine.

Uses MockQuoteProvider from conftest, so no network calls are made.
"""

from decimal import Decimal

import pytest

from portfolio_tracker.services.market_data import QuoteStatus
from portfolio_tracker.services.valuation import ValuationEngine
from portfolio_tracker.utils.context import correlation_scope, get_correlation_id
from tests.conftest import MockQuoteProvider, make_holding


class TestEngineSetup:
    """Construction and simple helpers."""

    def test_invalid_max_workers(self, mock_provider):
        with pytest.raises(ValueError):
            ValuationEngine(provider=mock_provider, max_workers=0)

    def test_get_accounts_sorted_distinct(self, sample_holdings):
        holdings = [make_holding("Zeta", "X", "1")] + sample_holdings

        assert ValuationEngine.get_accounts(holdings) == ["Brokerage", "IRA", "Zeta"]

    def test_get_accounts_empty(self):
        assert ValuationEngine.get_accounts([]) == []


class TestFetchQuotes:
    """Quote fetching is deduplicated per call."""

    def test_one_fetch_per_distinct_symbol(self, valuation_engine, mock_provider, sample_holdings):
        quotes = valuation_engine.fetch_quotes(h.symbol for h in sample_holdings)

        assert set(quotes) == {"AAPL", "MSFT", "VTI"}
        assert sorted(mock_provider.calls) == ["AAPL", "MSFT", "VTI"]

    def test_fresh_fetch_on_every_call(self, valuation_engine, mock_provider):
        valuation_engine.fetch_quotes(["AAPL"])
        valuation_engine.fetch_quotes(["AAPL"])

        assert mock_provider.call_count == 2

    def test_thread_pool_gives_same_results(self, mock_provider, sample_holdings):
        sequential = ValuationEngine(mock_provider, max_workers=1)
        pooled = ValuationEngine(mock_provider, max_workers=4)

        assert (
            sequential.compute_portfolio_valuation(sample_holdings)
            == pooled.compute_portfolio_valuation(sample_holdings)
        )

    def test_thread_pool_keeps_correlation_id(self):
        class RecordingProvider(MockQuoteProvider):
            def __init__(self):
                super().__init__()
                self.seen_ids: list[str | None] = []

            def _fetch_quote(self, symbol):
                self.seen_ids.append(get_correlation_id())
                return super()._fetch_quote(symbol)

        provider = RecordingProvider()
        provider.add_quote("X", "10.00", "1.00")
        engine = ValuationEngine(provider, max_workers=8)

        with correlation_scope("req-123"):
            engine.compute_account_valuations(
                [make_holding("A", "X", "1"), make_holding("A", "Y", "1")]
            )

        assert provider.seen_ids == ["req-123", "req-123"]


class TestComputeAccountValuations:
    """Tests for compute_account_valuations()."""

    def test_end_to_end_example(self):
        """A holds X (2 @ 10.00, +1.00) and unpriced Y; B holds 1 X."""
        provider = MockQuoteProvider()
        provider.add_quote("X", "10.00", "1.00")
        engine = ValuationEngine(provider)
        holdings = [
            make_holding("A", "X", "2"),
            make_holding("A", "Y", "1"),
            make_holding("B", "X", "1"),
        ]

        portfolio = engine.compute_portfolio_valuation(holdings)

        a, b = portfolio.accounts
        assert (a.account, a.total_value, a.total_change, a.stock_count) == (
            "A", Decimal("20.00"), Decimal("2.00"), 2
        )
        assert (b.account, b.total_value, b.total_change, b.stock_count) == (
            "B", Decimal("10.00"), Decimal("1.00"), 1
        )
        assert portfolio.grand_total_value == Decimal("30.00")
        assert portfolio.grand_total_change == Decimal("3.00")
        assert a.stocks[1].quote_status == QuoteStatus.NOT_FOUND
        assert sorted(provider.calls) == ["X", "Y"]

    def test_accounts_sorted_by_name(self, valuation_engine):
        holdings = [
            make_holding("zeta", "AAPL", "1"),
            make_holding("Alpha", "AAPL", "1"),
            make_holding("beta", "AAPL", "1"),
        ]

        accounts = valuation_engine.compute_account_valuations(holdings)

        assert [a.account for a in accounts] == ["Alpha", "beta", "zeta"]

    def test_sample_portfolio_totals(self, valuation_engine, sample_holdings):
        accounts = {a.account: a for a in valuation_engine.compute_account_valuations(sample_holdings)}

        # Brokerage: 2 * 10.00 + 3 * 100.50 ; change 2 * 1.00 + 3 * -0.25
        assert accounts["Brokerage"].total_value == Decimal("321.50")
        assert accounts["Brokerage"].total_change == Decimal("1.25")
        # IRA: 1 * 10.00 + 0.5 * 250.00 ; change 1.00 + 0.5 * 2.50
        assert accounts["IRA"].total_value == Decimal("135.00")
        assert accounts["IRA"].total_change == Decimal("2.25")

    def test_unavailable_quotes_count_toward_stock_count(self, failing_symbols):
        engine = ValuationEngine(failing_symbols)
        holdings = [
            make_holding("A", "AAPL", "1"),
            make_holding("A", "SLOW", "1"),
            make_holding("A", "BROKEN", "1"),
            make_holding("A", "JUNK", "1"),
            make_holding("A", "BAD", "1"),
        ]

        (account,) = engine.compute_account_valuations(holdings)

        assert account.stock_count == 5
        assert account.total_value == Decimal("10.00")
        assert [s.quote_status for s in account.stocks] == [
            QuoteStatus.OK,
            QuoteStatus.TIMEOUT,
            QuoteStatus.TRANSPORT_ERROR,
            QuoteStatus.MALFORMED,
            QuoteStatus.NOT_FOUND,
        ]

    def test_account_with_no_priced_holdings(self, valuation_engine):
        holdings = [make_holding("A", "AAPL", "1"), make_holding("B", "UNKNOWN", "3")]

        accounts = valuation_engine.compute_account_valuations(holdings)

        assert accounts[1].account == "B"
        assert accounts[1].total_value == Decimal("0.00")
        assert accounts[1].total_change == Decimal("0.00")
        assert accounts[1].stock_count == 1

    def test_no_holdings(self, valuation_engine, mock_provider):
        assert valuation_engine.compute_account_valuations([]) == []
        assert mock_provider.call_count == 0

        portfolio = valuation_engine.compute_portfolio_valuation([])
        assert portfolio.is_empty
        assert portfolio.grand_total_value == Decimal("0.00")


class TestValueAccount:
    """Tests for value_account() (stocks view)."""

    def test_only_requested_account_fetched(self, valuation_engine, mock_provider, sample_holdings):
        account = valuation_engine.value_account(sample_holdings, "IRA")

        assert [s.symbol for s in account.stocks] == ["AAPL", "VTI"]
        assert sorted(mock_provider.calls) == ["AAPL", "VTI"]
        assert account.total_value == Decimal("135.00")

    def test_error_entry_keeps_quantity_without_prices(self, valuation_engine):
        holdings = [make_holding("A", "UNKNOWN", "4")]

        (stock,) = valuation_engine.value_account(holdings, "A").stocks

        assert stock.error
        assert stock.quantity == Decimal("4")
        assert stock.current_price is None
        assert stock.stock_value is None

    def test_unknown_account(self, valuation_engine, mock_provider, sample_holdings):
        account = valuation_engine.value_account(sample_holdings, "Nope")

        assert account.stock_count == 0
        assert account.stocks == ()
        assert account.total_value == Decimal("0.00")
        assert mock_provider.call_count == 0

# backend/portfolio_tracker/services/valuation/engine.py
"""
Valuation Engine - values holdings against live quotes.

Entry points:
- get_accounts(): distinct account names, sorted
- fetch_quotes(): one quote per distinct symbol
- value_account(): one account with per-stock detail (stocks view)
- compute_account_valuations(): every account, sorted by name
- compute_portfolio_valuation(): every account plus grand totals

Quotes are fetched once per distinct symbol per call and never reused
across calls. With max_workers > 1 the fetches run on a thread pool;
totals do not depend on fetch order because they are sums of values
that were already rounded.

Usage:
    engine = ValuationEngine(provider=YahooChartProvider(), max_workers=8)
    portfolio = engine.compute_portfolio_valuation(HoldingsStore(db).load())
"""

import contextvars
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from portfolio_tracker.services.market_data.base import QuoteResult
from portfolio_tracker.services.protocols import QuoteSource
from portfolio_tracker.services.stores.types import HoldingRecord
from portfolio_tracker.services.valuation.calculators import (
    AccountRollupCalculator,
    PortfolioRollupCalculator,
    StockValuationCalculator,
)
from portfolio_tracker.services.valuation.types import (
    AccountValuation,
    PortfolioValuation,
)

logger = logging.getLogger(__name__)


class ValuationEngine:
    """
    Computes stock, account and portfolio valuations.

    Attributes:
        _provider: Injected quote provider
        _max_workers: Concurrent fetches (1 = sequential, in first-seen order)
    """

    def __init__(self, provider: QuoteSource, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._provider = provider
        self._max_workers = max_workers

        self._stock_calc = StockValuationCalculator()
        self._account_calc = AccountRollupCalculator()
        self._portfolio_calc = PortfolioRollupCalculator()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @staticmethod
    def get_accounts(holdings: Iterable[HoldingRecord]) -> list[str]:
        """Distinct account names, sorted ascending."""
        return sorted({h.account for h in holdings})

    def fetch_quotes(self, symbols: Iterable[str]) -> dict[str, QuoteResult]:
        """
        Fetch one quote per distinct symbol.

        Returns:
            Dict mapping symbol -> QuoteResult (available or not)
        """
        distinct = list(dict.fromkeys(symbols))
        if not distinct:
            return {}

        if self._max_workers == 1 or len(distinct) == 1:
            results = [self._provider.fetch(symbol) for symbol in distinct]
        else:
            workers = min(self._max_workers, len(distinct))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="quote") as pool:
                results = list(pool.map(self._fetch_in_context(), distinct))

        quotes = dict(zip(distinct, results))
        unavailable = [s for s, r in quotes.items() if not r.is_available]
        logger.info(
            f"Fetched {len(quotes)} quotes via {self._provider.name} "
            f"({len(unavailable)} unavailable)"
        )
        return quotes

    def _fetch_in_context(self) -> Callable[[str], QuoteResult]:
        """provider.fetch bound to a copy of the caller's context (correlation id) per task."""
        ctx = contextvars.copy_context()

        def fetch(symbol: str) -> QuoteResult:
            return ctx.copy().run(self._provider.fetch, symbol)

        return fetch

    def value_account(
            self,
            holdings: list[HoldingRecord],
            account: str,
            quotes: dict[str, QuoteResult] | None = None,
    ) -> AccountValuation:
        """
        Value every holding of one account.

        An account with no holdings yields zero totals and no stocks.

        Args:
            holdings: Full holdings list (filtered to the account here)
            account: Account name
            quotes: Pre-fetched quotes; fetched for this account if omitted
        """
        account_holdings = [h for h in holdings if h.account == account]
        if quotes is None:
            quotes = self.fetch_quotes(h.symbol for h in account_holdings)

        stocks = [
            self._stock_calc.calculate(h, quotes[h.symbol])
            for h in account_holdings
        ]
        return self._account_calc.calculate(account, stocks)

    def compute_account_valuations(self, holdings: list[HoldingRecord]) -> list[AccountValuation]:
        """
        Value every account.

        Returns:
            AccountValuations sorted by account name (empty for no holdings)
        """
        if not holdings:
            return []

        quotes = self.fetch_quotes(h.symbol for h in holdings)
        return [
            self.value_account(holdings, account, quotes)
            for account in self.get_accounts(holdings)
        ]

    def compute_portfolio_valuation(self, holdings: list[HoldingRecord]) -> PortfolioValuation:
        """Value every account and sum the grand totals."""
        accounts = self.compute_account_valuations(holdings)
        portfolio = self._portfolio_calc.calculate(accounts)
        logger.debug(
            f"Portfolio valued: {len(accounts)} accounts, "
            f"total={portfolio.grand_total_value}, change={portfolio.grand_total_change}"
        )
        return portfolio

# backend/portfolio_tracker/services/valuation/calculators.py
"""
Valuation calculators.

Each calculator follows the Single Responsibility Principle:
- StockValuationCalculator: Values one holding against its quote
- AccountRollupCalculator: Sums stock valuations into account totals
- PortfolioRollupCalculator: Sums account totals into grand totals

Rounding rule: every product is rounded to 2 places where it is computed,
and every total is a plain sum of already-rounded figures. A total is
therefore never re-derived from unrounded intermediates.

Usage:
    stock_calc = StockValuationCalculator()
    stock = stock_calc.calculate(holding, quote_result)
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from portfolio_tracker.services.constants import ZERO
from portfolio_tracker.services.market_data.base import QuoteResult
from portfolio_tracker.services.stores.types import HoldingRecord
from portfolio_tracker.services.valuation.types import (
    AccountValuation,
    PortfolioValuation,
    StockValuation,
)
from portfolio_tracker.utils.money import round_money

logger = logging.getLogger(__name__)


# =============================================================================
# STOCK VALUATION
# =============================================================================

class StockValuationCalculator:
    """
    Values a single holding.

    stock_value = round2(quantity * current_price)
    stock_price_change = round2(quantity * price_change)
    """

    def calculate(self, holding: HoldingRecord, result: QuoteResult) -> StockValuation:
        if not result.is_available:
            return StockValuation(
                symbol=holding.symbol,
                quantity=holding.quantity,
                quote_status=result.status,
            )

        quote = result.quote
        return StockValuation(
            symbol=holding.symbol,
            quantity=holding.quantity,
            quote_status=result.status,
            current_price=quote.current_price,
            price_change=quote.price_change,
            stock_value=round_money(holding.quantity * quote.current_price),
            stock_price_change=round_money(holding.quantity * quote.price_change),
        )


# =============================================================================
# ACCOUNT ROLLUP
# =============================================================================

class AccountRollupCalculator:
    """
    Aggregates stock valuations for one account.

    Unpriced stocks count toward stock_count but add nothing to the totals.
    """

    def calculate(self, account: str, stocks: Iterable[StockValuation]) -> AccountValuation:
        stocks = tuple(stocks)
        priced = [s for s in stocks if not s.error]

        total_value = sum((s.stock_value for s in priced), ZERO)
        total_change = sum((s.stock_price_change for s in priced), ZERO)

        if len(priced) < len(stocks):
            logger.debug(
                f"Account {account}: {len(stocks) - len(priced)} of "
                f"{len(stocks)} holdings unpriced"
            )

        return AccountValuation(
            account=account,
            total_value=round_money(total_value),
            total_change=round_money(total_change),
            stock_count=len(stocks),
            stocks=stocks,
        )


# =============================================================================
# PORTFOLIO ROLLUP
# =============================================================================

class PortfolioRollupCalculator:
    """Sums account totals into grand totals."""

    def calculate(self, accounts: Iterable[AccountValuation]) -> PortfolioValuation:
        accounts = tuple(accounts)
        return PortfolioValuation(
            accounts=accounts,
            grand_total_value=round_money(sum((a.total_value for a in accounts), ZERO)),
            grand_total_change=round_money(sum((a.total_change for a in accounts), ZERO)),
        )

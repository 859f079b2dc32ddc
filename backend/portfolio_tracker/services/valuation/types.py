# backend/portfolio_tracker/services/valuation/types.py
"""
Internal data types for the Valuation Engine.

These dataclasses are NOT Pydantic schemas - those are defined in
portfolio_tracker/schemas/views.py for API serialization.

Design Principles:
- Immutable (frozen=True) value objects
- Decimal for ALL financial values (never float)
- Money fields already rounded to 2 places when constructed
- Optional fields use None, not sentinel values

Type Hierarchy:
    StockValuation      - One holding valued against its quote
    AccountValuation    - Totals for one account (+ its stocks)
    PortfolioValuation  - All accounts plus grand totals
"""

from dataclasses import dataclass, field
from decimal import Decimal

from portfolio_tracker.services.market_data.base import QuoteStatus


@dataclass(frozen=True)
class StockValuation:
    """
    A single holding valued against its quote.

    When the quote was unavailable, every price field is None and the
    holding is an error entry: it contributes nothing to the account
    totals but still counts toward stock_count.

    Attributes:
        symbol: Ticker symbol
        quantity: Shares held
        quote_status: Outcome of the quote fetch
        current_price: Price per share (None if unpriced)
        price_change: Per-share change since previous close (None if unpriced)
        stock_value: round2(quantity * current_price)
        stock_price_change: round2(quantity * price_change)
    """

    symbol: str
    quantity: Decimal
    quote_status: QuoteStatus
    current_price: Decimal | None = None
    price_change: Decimal | None = None
    stock_value: Decimal | None = None
    stock_price_change: Decimal | None = None

    @property
    def error(self) -> bool:
        """True when no quote was available for this holding."""
        return self.stock_value is None


@dataclass(frozen=True)
class AccountValuation:
    """
    Aggregated valuation of one account.

    Attributes:
        account: Account name
        total_value: Sum of priced stock values (0.00 if none priced)
        total_change: Sum of priced stock changes (0.00 if none priced)
        stock_count: Number of holdings in the account, priced or not
        stocks: Per-holding valuations in upload order
    """

    account: str
    total_value: Decimal
    total_change: Decimal
    stock_count: int
    stocks: tuple[StockValuation, ...] = field(default_factory=tuple)

    @property
    def priced_count(self) -> int:
        return sum(1 for s in self.stocks if not s.error)

    @property
    def error_count(self) -> int:
        return self.stock_count - self.priced_count


@dataclass(frozen=True)
class PortfolioValuation:
    """
    Valuation of every account with grand totals.

    Attributes:
        accounts: Account valuations sorted by account name
        grand_total_value: Sum of the (rounded) account totals
        grand_total_change: Sum of the (rounded) account changes
    """

    accounts: tuple[AccountValuation, ...]
    grand_total_value: Decimal
    grand_total_change: Decimal

    @property
    def account_names(self) -> list[str]:
        return [a.account for a in self.accounts]

    @property
    def is_empty(self) -> bool:
        return not self.accounts

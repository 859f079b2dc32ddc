# backend/portfolio_tracker/services/stores/types.py
"""
Domain records exchanged with the stores.

These are plain frozen dataclasses, independent of the ORM rows in
models.py, so the upload parser, valuation engine and snapshot service
never hold a database session.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class HoldingRecord:
    """
    One position: a quantity of a symbol held in a named account.

    Attributes:
        account: Account name, trimmed
        symbol: Ticker symbol, trimmed and upper-case
        quantity: Share count, always > 0 (fractional allowed)
    """

    account: str
    symbol: str
    quantity: Decimal

    def __post_init__(self) -> None:
        if not self.account:
            raise ValueError("account is required")
        if not self.symbol:
            raise ValueError("symbol is required")
        if not self.quantity > 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")


@dataclass(frozen=True)
class SnapshotRecord:
    """
    Account totals captured on one calendar date.

    Attributes:
        date: Snapshot date (unique across the history)
        accounts: Account name -> total value (2 decimal places)
    """

    date: date
    accounts: dict[str, Decimal] = field(default_factory=dict)

    @property
    def total_value(self) -> Decimal:
        return sum(self.accounts.values(), Decimal("0"))

# backend/portfolio_tracker/schemas/views.py
"""
Pydantic schemas for the three views served at GET /.

- accounts: one summary row per account plus grand totals
- stocks: every holding of one account, priced or flagged as an error
- history: stored daily snapshots, plus per-account series for charting

Money values are Decimal with 2 decimal places and serialize as strings.
"""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# SHARED
# =============================================================================

class ViewBase(BaseModel):
    """Fields every view carries for navigation."""

    has_portfolio: bool = Field(
        ...,
        description="True when any holdings are stored"
    )
    all_accounts: list[str] = Field(
        default_factory=list,
        description="Distinct account names, sorted"
    )


# =============================================================================
# ACCOUNTS VIEW
# =============================================================================

class AccountSummary(BaseModel):
    """Totals for one account."""

    model_config = ConfigDict(from_attributes=True)

    account: str
    total_value: Decimal = Field(
        ...,
        description="Sum of priced holdings' values"
    )
    total_change: Decimal = Field(
        ...,
        description="Sum of priced holdings' change since previous close"
    )
    stock_count: int = Field(
        ...,
        description="Holdings in the account, including unpriced ones"
    )


class AccountsViewResponse(ViewBase):
    """Summary of every account with grand totals."""

    view: Literal["accounts"] = "accounts"
    accounts: list[AccountSummary] = Field(default_factory=list)
    grand_total_value: Decimal
    grand_total_change: Decimal


# =============================================================================
# STOCKS VIEW
# =============================================================================

class StockView(BaseModel):
    """
    One holding in the stocks view.

    When no quote was available, error is True and every price field is None.
    """

    symbol: str
    quantity: Decimal
    status: str = Field(
        ...,
        description="Quote outcome (OK, NOT_FOUND, TIMEOUT, ...)"
    )
    error: bool = Field(
        default=False,
        description="True if the holding could not be priced"
    )
    current_price: Decimal | None = None
    price_change: Decimal | None = None
    stock_value: Decimal | None = None
    stock_price_change: Decimal | None = None


class StocksViewResponse(ViewBase):
    """Holdings of one account."""

    view: Literal["stocks"] = "stocks"
    selected_account: str
    stocks: list[StockView] = Field(default_factory=list)
    total_value: Decimal
    total_change: Decimal
    stock_count: int


# =============================================================================
# HISTORY VIEW
# =============================================================================

class SnapshotPoint(BaseModel):
    """Account totals on one date."""

    date: dt.date
    accounts: dict[str, Decimal] = Field(default_factory=dict)
    total_value: Decimal


class HistoryViewResponse(ViewBase):
    """
    Snapshot history, oldest first.

    series maps every account that appears in any snapshot to one value
    per entry of dates (None where the account was absent that day).
    """

    view: Literal["history"] = "history"
    snapshots: list[SnapshotPoint] = Field(default_factory=list)
    dates: list[dt.date] = Field(default_factory=list)
    series: dict[str, list[Decimal | None]] = Field(default_factory=dict)

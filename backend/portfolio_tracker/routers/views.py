# backend/portfolio_tracker/routers/views.py
"""
Portfolio view endpoint.

GET / serves one of three views selected by ?view=:
- accounts (default): per-account totals and grand totals
- stocks: holdings of ?account=, each priced or flagged as an error
- history: stored daily snapshots

An unknown view, or stocks without an account, redirects to
/?view=accounts. Quotes are fetched fresh on every request.
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies import get_snapshot_service, get_valuation_engine
from portfolio_tracker.middleware.rate_limit import RATE_LIMIT_DEFAULT, limiter
from portfolio_tracker.schemas.views import (
    AccountSummary,
    AccountsViewResponse,
    HistoryViewResponse,
    SnapshotPoint,
    StocksViewResponse,
    StockView,
)
from portfolio_tracker.services.snapshots import SnapshotService
from portfolio_tracker.services.stores import HoldingsStore, SnapshotRecord
from portfolio_tracker.services.valuation import (
    AccountValuation,
    PortfolioValuation,
    StockValuation,
    ValuationEngine,
)

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(tags=["Views"])

DEFAULT_VIEW_URL = "/?view=accounts"

ViewResponse = AccountsViewResponse | StocksViewResponse | HistoryViewResponse


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_stock(stock: StockValuation) -> StockView:
    """Map internal StockValuation to Pydantic schema."""
    return StockView(
        symbol=stock.symbol,
        quantity=stock.quantity,
        status=stock.quote_status.value,
        error=stock.error,
        current_price=stock.current_price,
        price_change=stock.price_change,
        stock_value=stock.stock_value,
        stock_price_change=stock.stock_price_change,
    )


def _map_account(account: AccountValuation) -> AccountSummary:
    """Map internal AccountValuation to Pydantic schema."""
    return AccountSummary(
        account=account.account,
        total_value=account.total_value,
        total_change=account.total_change,
        stock_count=account.stock_count,
    )


def _map_accounts_view(
        portfolio: PortfolioValuation,
        has_portfolio: bool,
        all_accounts: list[str],
) -> AccountsViewResponse:
    return AccountsViewResponse(
        has_portfolio=has_portfolio,
        all_accounts=all_accounts,
        accounts=[_map_account(a) for a in portfolio.accounts],
        grand_total_value=portfolio.grand_total_value,
        grand_total_change=portfolio.grand_total_change,
    )


def _map_stocks_view(
        account: AccountValuation,
        has_portfolio: bool,
        all_accounts: list[str],
) -> StocksViewResponse:
    return StocksViewResponse(
        has_portfolio=has_portfolio,
        all_accounts=all_accounts,
        selected_account=account.account,
        stocks=[_map_stock(s) for s in account.stocks],
        total_value=account.total_value,
        total_change=account.total_change,
        stock_count=account.stock_count,
    )


def _map_history_view(
        snapshots: list[SnapshotRecord],
        has_portfolio: bool,
        all_accounts: list[str],
) -> HistoryViewResponse:
    """
    Map the snapshot history, adding one series per account.

    Series cover every account seen in any snapshot (first-seen order),
    so accounts that were removed later still chart their past values.
    """
    series_accounts: dict[str, None] = {}
    for snapshot in snapshots:
        series_accounts.update(dict.fromkeys(snapshot.accounts))

    series: dict[str, list[Decimal | None]] = {
        account: [s.accounts.get(account) for s in snapshots]
        for account in series_accounts
    }

    return HistoryViewResponse(
        has_portfolio=has_portfolio,
        all_accounts=all_accounts,
        snapshots=[
            SnapshotPoint(date=s.date, accounts=s.accounts, total_value=s.total_value)
            for s in snapshots
        ],
        dates=[s.date for s in snapshots],
        series=series,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/",
    response_model=ViewResponse,
    summary="Portfolio views",
    responses={status.HTTP_302_FOUND: {"description": "Redirect to the accounts view"}},
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_view(
        request: Request,
        view: str = Query(default="accounts", description="accounts | stocks | history"),
        account: str | None = Query(default=None, description="Account for the stocks view"),
        db: Session = Depends(get_db),
        engine: ValuationEngine = Depends(get_valuation_engine),
        snapshot_service: SnapshotService = Depends(get_snapshot_service),
):
    """
    Render a portfolio view as JSON.

    **Views:**
    - `accounts`: totals per account (sorted by name) plus grand totals
    - `stocks`: requires `account`; unpriced holdings are returned with
      `error: true` and no price fields
    - `history`: up to 90 daily snapshots, oldest first

    Any other view, or `stocks` without an account, redirects (302) to
    `/?view=accounts`.
    """
    if view == "stocks" and not account:
        return RedirectResponse(DEFAULT_VIEW_URL, status_code=status.HTTP_302_FOUND)
    if view not in ("accounts", "stocks", "history"):
        logger.debug(f"Unknown view {view!r}, redirecting")
        return RedirectResponse(DEFAULT_VIEW_URL, status_code=status.HTTP_302_FOUND)

    holdings = HoldingsStore(db).load()
    has_portfolio = bool(holdings)
    all_accounts = engine.get_accounts(holdings)

    if view == "history":
        return _map_history_view(
            snapshot_service.get_history(db), has_portfolio, all_accounts
        )

    if view == "stocks":
        return _map_stocks_view(
            engine.value_account(holdings, account), has_portfolio, all_accounts
        )

    return _map_accounts_view(
        engine.compute_portfolio_valuation(holdings), has_portfolio, all_accounts
    )

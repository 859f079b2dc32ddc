# backend/tests/routers/test_views_api.py
"""
Tests for GET / (accounts, stocks and history views).

Quotes come from MockQuoteProvider via the client fixture's overrides.
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_tracker.services.stores import HoldingsStore, SnapshotRecord, SnapshotStore

from tests.conftest import make_holding


class TestAccountsView:
    """GET / and GET /?view=accounts."""

    def test_default_view_is_accounts(self, client, stored_holdings):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["view"] == "accounts"
        assert data["has_portfolio"] is True
        assert data["all_accounts"] == ["Brokerage", "IRA"]

    def test_account_totals_and_grand_totals(self, client, stored_holdings):
        data = client.get("/?view=accounts").json()

        accounts = {a["account"]: a for a in data["accounts"]}
        assert [a["account"] for a in data["accounts"]] == ["Brokerage", "IRA"]
        assert Decimal(accounts["Brokerage"]["total_value"]) == Decimal("321.50")
        assert Decimal(accounts["Brokerage"]["total_change"]) == Decimal("1.25")
        assert accounts["Brokerage"]["stock_count"] == 2
        assert Decimal(data["grand_total_value"]) == Decimal("456.50")
        assert Decimal(data["grand_total_change"]) == Decimal("3.50")

    def test_end_to_end_example(self, client, db):
        HoldingsStore(db).replace_all([
            make_holding("A", "AAPL", "2"),
            make_holding("A", "NOQUOTE", "1"),
            make_holding("B", "AAPL", "1"),
        ])

        data = client.get("/").json()

        assert [
            (a["account"], a["stock_count"], Decimal(a["total_value"]), Decimal(a["total_change"]))
            for a in data["accounts"]
        ] == [
            ("A", 2, Decimal("20.00"), Decimal("2.00")),
            ("B", 1, Decimal("10.00"), Decimal("1.00")),
        ]
        assert Decimal(data["grand_total_value"]) == Decimal("30.00")
        assert Decimal(data["grand_total_change"]) == Decimal("3.00")

    def test_empty_portfolio(self, client):
        data = client.get("/").json()

        assert data["has_portfolio"] is False
        assert data["accounts"] == []
        assert data["all_accounts"] == []
        assert Decimal(data["grand_total_value"]) == Decimal("0")

    def test_unpriced_holding_counted(self, client, db):
        HoldingsStore(db).replace_all([
            make_holding("A", "AAPL", "1"),
            make_holding("A", "UNKNOWN", "5"),
        ])

        (account,) = client.get("/").json()["accounts"]

        assert account["stock_count"] == 2
        assert Decimal(account["total_value"]) == Decimal("10.00")


class TestStocksView:
    """GET /?view=stocks&account=..."""

    def test_holdings_of_one_account(self, client, stored_holdings):
        response = client.get("/", params={"view": "stocks", "account": "IRA"})

        assert response.status_code == 200
        data = response.json()
        assert data["view"] == "stocks"
        assert data["selected_account"] == "IRA"
        assert data["all_accounts"] == ["Brokerage", "IRA"]
        assert [s["symbol"] for s in data["stocks"]] == ["AAPL", "VTI"]
        vti = data["stocks"][1]
        assert Decimal(vti["quantity"]) == Decimal("0.5")
        assert Decimal(vti["current_price"]) == Decimal("250.00")
        assert Decimal(vti["stock_value"]) == Decimal("125.00")
        assert Decimal(vti["stock_price_change"]) == Decimal("1.25")
        assert vti["error"] is False
        assert vti["status"] == "OK"
        assert Decimal(data["total_value"]) == Decimal("135.00")
        assert data["stock_count"] == 2

    def test_unpriced_holding_is_error_row(self, client, db):
        HoldingsStore(db).replace_all([make_holding("A", "UNKNOWN", "3")])

        data = client.get("/", params={"view": "stocks", "account": "A"}).json()

        (stock,) = data["stocks"]
        assert stock["error"] is True
        assert stock["status"] == "NOT_FOUND"
        assert Decimal(stock["quantity"]) == Decimal("3")
        assert stock["current_price"] is None
        assert stock["price_change"] is None
        assert stock["stock_value"] is None
        assert stock["stock_price_change"] is None
        assert Decimal(data["total_value"]) == Decimal("0")
        assert data["stock_count"] == 1

    def test_account_name_with_spaces(self, client, db):
        HoldingsStore(db).replace_all([make_holding("Joint Brokerage", "AAPL", "1")])

        data = client.get("/", params={"view": "stocks", "account": "Joint Brokerage"}).json()

        assert data["selected_account"] == "Joint Brokerage"
        assert data["stock_count"] == 1

    @pytest.mark.parametrize("url", ["/?view=stocks", "/?view=stocks&account="])
    def test_missing_account_redirects(self, client, url):
        response = client.get(url)

        assert response.status_code == 302
        assert response.headers["location"] == "/?view=accounts"


class TestHistoryView:
    """GET /?view=history."""

    def test_snapshots_oldest_first(self, client, db, stored_holdings):
        SnapshotStore(db).replace_all([
            SnapshotRecord(date(2024, 1, 2), {"Brokerage": Decimal("300.00"), "IRA": Decimal("100.00")}),
            SnapshotRecord(date(2024, 1, 1), {"Brokerage": Decimal("290.00")}),
        ])

        data = client.get("/?view=history").json()

        assert data["view"] == "history"
        assert data["has_portfolio"] is True
        assert data["dates"] == ["2024-01-01", "2024-01-02"]
        assert [s["date"] for s in data["snapshots"]] == ["2024-01-01", "2024-01-02"]
        assert Decimal(data["snapshots"][1]["total_value"]) == Decimal("400.00")
        assert [Decimal(v) for v in data["series"]["Brokerage"]] == [Decimal("290.00"), Decimal("300.00")]
        ira = data["series"]["IRA"]
        assert ira[0] is None
        assert Decimal(ira[1]) == Decimal("100.00")

    def test_history_does_not_fetch_quotes(self, client, stored_holdings, mock_provider):
        client.get("/?view=history")

        assert mock_provider.call_count == 0

    def test_empty_history(self, client):
        data = client.get("/?view=history").json()

        assert data["snapshots"] == []
        assert data["series"] == {}
        assert data["has_portfolio"] is False


class TestRedirects:
    """Unknown views redirect to the accounts view."""

    @pytest.mark.parametrize("view", ["charts", "ACCOUNTS", ""])
    def test_unknown_view_redirects(self, client, view):
        response = client.get("/", params={"view": view})

        assert response.status_code == 302
        assert response.headers["location"] == "/?view=accounts"

    def test_redirect_target_serves_accounts(self, client):
        response = client.get("/?view=unknown", follow_redirects=True)

        assert response.status_code == 200
        assert response.json()["view"] == "accounts"

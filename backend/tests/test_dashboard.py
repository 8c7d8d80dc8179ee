# Overview: Pytest coverage for dashboard aggregates.

from datetime import datetime

import pytest

from conftest import add_expense, add_revenue
from mizan.extensions import db
from mizan.models import Notification, Product
from mizan.services import dashboard_service


@pytest.fixture
def owner_headers(users_a, auth_headers):
    return auth_headers("owner_a")


class TestStats:
    def test_empty_tenant(self, client, owner_headers):
        body = client.get("/api/dashboard/stats", headers=owner_headers).get_json()
        assert body["total_revenue"] == "0.00"
        assert body["total_expenses"] == "0.00"
        assert body["net_profit"] == "0.00"
        assert body["revenue_by_currency"] == []

    def test_totals_and_counts(self, client, db_session, ctx_a, owner_headers):
        add_revenue(ctx_a, 1050, quantity=3)
        add_expense(ctx_a, 1000)
        db.session.add_all([
            Product(tenant_id=ctx_a.tenant_id, name="Low", unit="pc", quantity=1, min_stock_level=1,
                    purchase_price_cents=100, sale_price_cents=200),
            Product(tenant_id=ctx_a.tenant_id, name="Fine", unit="pc", quantity=9, min_stock_level=1,
                    purchase_price_cents=100, sale_price_cents=200),
            Notification(tenant_id=ctx_a.tenant_id, title="t", message="m", type="low_stock", is_read=False),
            Notification(tenant_id=ctx_a.tenant_id, title="t", message="m", type="low_stock", is_read=True),
        ])
        db.session.commit()

        body = client.get("/api/dashboard/stats", headers=owner_headers).get_json()
        assert body["total_revenue"] == "31.50"
        assert body["total_expenses"] == "10.00"
        assert body["net_profit"] == "21.50"
        assert body["product_count"] == 2
        assert body["low_stock_count"] == 1
        assert body["unread_notifications"] == 1

    def test_net_profit_can_be_negative(self, db_session, ctx_a):
        add_revenue(ctx_a, 500)
        add_expense(ctx_a, 1000)
        stats = dashboard_service.get_dashboard_stats(tenant_id=ctx_a.tenant_id)
        assert stats["net_profit"] == "-5.00"

    def test_per_currency_split(self, db_session, ctx_a):
        add_revenue(ctx_a, 1000, currency="USD")
        add_revenue(ctx_a, 250000, currency="SYP")
        add_revenue(ctx_a, 500, currency="USD")

        stats = dashboard_service.get_dashboard_stats(tenant_id=ctx_a.tenant_id)
        assert stats["revenue_by_currency"] == [
            {"currency": "SYP", "total": "2500.00", "count": 1},
            {"currency": "USD", "total": "15.00", "count": 2},
        ]

    def test_date_range_bounds_totals(self, db_session, ctx_a):
        add_revenue(ctx_a, 100, created_at=datetime(2026, 1, 10))
        add_revenue(ctx_a, 200, created_at=datetime(2026, 2, 28, 23, 59))
        add_revenue(ctx_a, 400, created_at=datetime(2026, 3, 1))

        stats = dashboard_service.get_dashboard_stats(
            tenant_id=ctx_a.tenant_id, start="2026-02-01", end="2026-02-28"
        )
        assert stats["total_revenue"] == "2.00"
        assert stats["start"] == "2026-02-01T00:00:00Z"

    def test_bad_range_is_400(self, client, owner_headers):
        resp = client.get("/api/dashboard/stats?start=yesterday", headers=owner_headers)
        assert resp.status_code == 400
        assert resp.get_json()["errors"][0]["field"] == "start"


class TestRecentTransactions:
    def test_merged_newest_first(self, client, db_session, ctx_a, owner_headers):
        add_revenue(ctx_a, 100, created_at=datetime(2026, 5, 1))
        add_revenue(ctx_a, 200, created_at=datetime(2026, 5, 3))
        add_expense(ctx_a, 300, created_at=datetime(2026, 5, 2))
        add_expense(ctx_a, 400, created_at=datetime(2026, 5, 4))

        body = client.get("/api/dashboard/recent-transactions", headers=owner_headers).get_json()
        assert [(i["type"], i["amount"]) for i in body["items"]] == [
            ("expense", "4.00"),
            ("revenue", "2.00"),
            ("expense", "3.00"),
            ("revenue", "1.00"),
        ]

    def test_limit_with_sparse_kind(self, db_session, ctx_a):
        # Only one expense, and it is the newest row
        for day in range(1, 6):
            add_revenue(ctx_a, day * 100, created_at=datetime(2026, 4, day))
        add_expense(ctx_a, 999, created_at=datetime(2026, 4, 30))

        body = dashboard_service.get_recent_transactions(tenant_id=ctx_a.tenant_id, limit=3)
        assert body["count"] == 3
        assert [i["type"] for i in body["items"]] == ["expense", "revenue", "revenue"]
        assert [i["amount"] for i in body["items"]] == ["9.99", "5.00", "4.00"]

    def test_row_shape(self, db_session, ctx_a):
        add_expense(ctx_a, 300)
        [item] = dashboard_service.get_recent_transactions(tenant_id=ctx_a.tenant_id, limit=5)["items"]
        assert set(item) == {
            "id", "type", "operation_number", "description", "party",
            "amount", "currency", "payment_method", "created_at",
        }


class TestCurrencyDistribution:
    def test_revenue_only(self, db_session, ctx_a):
        add_revenue(ctx_a, 100, currency="TRY")
        add_expense(ctx_a, 100, currency="SYP")

        body = dashboard_service.get_currency_distribution(tenant_id=ctx_a.tenant_id)
        assert body["items"] == [{"currency": "TRY", "total": "1.00", "count": 1}]

    def test_with_expenses(self, client, db_session, ctx_a, owner_headers):
        add_revenue(ctx_a, 100, currency="TRY")
        add_expense(ctx_a, 250, currency="SYP")

        body = client.get(
            "/api/dashboard/currency-distribution?include_expenses=true", headers=owner_headers
        ).get_json()
        assert body["items"] == [
            {"currency": "SYP", "total": "0.00", "count": 0, "expense_total": "2.50", "expense_count": 1},
            {"currency": "TRY", "total": "1.00", "count": 1, "expense_total": "0.00", "expense_count": 0},
        ]


class TestMonthlyRevenue:
    def test_twelve_months_always(self, client, db_session, ctx_a, owner_headers):
        add_revenue(ctx_a, 1000, created_at=datetime(2026, 1, 15))
        add_revenue(ctx_a, 500, created_at=datetime(2026, 1, 31, 23, 59))
        add_revenue(ctx_a, 700, currency="SYP", created_at=datetime(2026, 3, 2))
        add_revenue(ctx_a, 9999, created_at=datetime(2025, 12, 31, 23, 59))

        body = client.get("/api/dashboard/monthly-revenue?year=2026", headers=owner_headers).get_json()
        assert body["year"] == 2026
        assert [m["month"] for m in body["months"]] == list(range(1, 13))
        assert body["months"][0] == {"month": 1, "total": "15.00", "count": 2}
        assert body["months"][2] == {"month": 3, "total": "7.00", "count": 1}
        assert body["months"][11] == {"month": 12, "total": "0.00", "count": 0}

    def test_currency_filter(self, db_session, ctx_a):
        add_revenue(ctx_a, 1000, currency="USD", created_at=datetime(2026, 3, 1))
        add_revenue(ctx_a, 700, currency="SYP", created_at=datetime(2026, 3, 2))

        body = dashboard_service.get_monthly_revenue(tenant_id=ctx_a.tenant_id, year=2026, currency="SYP")
        assert body["months"][2]["total"] == "7.00"
        assert body["currency"] == "SYP"

    def test_defaults_to_current_year(self, client, owner_headers):
        body = client.get("/api/dashboard/monthly-revenue", headers=owner_headers).get_json()
        assert body["year"] == dashboard_service.current_year()

    @pytest.mark.parametrize("query", ["year=abc", "year=0", "year=10000", "currency=EUR"])
    def test_bad_params_are_400(self, client, owner_headers, query):
        resp = client.get(f"/api/dashboard/monthly-revenue?{query}", headers=owner_headers)
        assert resp.status_code == 400

    def test_unknown_currency_reports_allowed_values(self, client, owner_headers):
        resp = client.get("/api/dashboard/monthly-revenue?currency=EUR", headers=owner_headers)
        assert resp.get_json()["errors"] == [{
            "field": "currency",
            "message": "is not an allowed value",
            "value": "EUR",
            "allowed": ["SYP", "TRY", "USD"],
        }]

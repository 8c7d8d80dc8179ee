"""
Dashboard aggregation.

Read-only summaries over a single tenant's rows. All sums run in SQL on
integer cents and are formatted only at the edge. Amounts in different
currencies are never converted: the headline totals add raw amounts
across currencies, and every response also carries the per-currency split.
"""
from __future__ import annotations

from sqlalchemy import extract, func

from ..extensions import db
from ..models import Expense, Notification, Product, Revenue
from mizan.money import format_cents
from mizan.time_utils import to_utc_z, utcnow, year_bounds
from .products_service import count_low_stock
from .reporting_service import parse_range, sum_cents, totals_by_currency
from .repository import TenantRepository
from .tenant_service import require_tenant_id


def _currency_rows(rows: list[tuple[str, int, int]]) -> list[dict]:
    return [{"currency": c, "total": format_cents(t), "count": n} for c, t, n in rows]


def get_dashboard_stats(*, tenant_id: str, start: str | None = None, end: str | None = None) -> dict:
    """
    Headline numbers. start/end (inclusive) bound the revenue and expense
    totals only; stock and notification counts are always current.

    net_profit == total_revenue - total_expenses, computed on cents.
    """
    start_dt, end_dt = parse_range(start, end)

    total_revenue = sum_cents(Revenue, Revenue.total_amount_cents, tenant_id, start_dt, end_dt)
    total_expenses = sum_cents(Expense, Expense.amount_cents, tenant_id, start_dt, end_dt)

    products = TenantRepository(Product, tenant_id)
    notifications = TenantRepository(Notification, tenant_id)

    return {
        "total_revenue": format_cents(total_revenue),
        "total_expenses": format_cents(total_expenses),
        "net_profit": format_cents(total_revenue - total_expenses),
        "product_count": products.count(),
        "low_stock_count": count_low_stock(tenant_id),
        "unread_notifications": notifications.count(Notification.is_read.is_(False)),
        "revenue_by_currency": _currency_rows(
            totals_by_currency(Revenue, Revenue.total_amount_cents, tenant_id, start_dt, end_dt)
        ),
        "expenses_by_currency": _currency_rows(
            totals_by_currency(Expense, Expense.amount_cents, tenant_id, start_dt, end_dt)
        ),
        "start": to_utc_z(start_dt) if start_dt else None,
        "end": to_utc_z(end_dt) if end_dt else None,
    }


def _revenue_row(r: Revenue) -> dict:
    return {
        "id": r.id,
        "type": "revenue",
        "operation_number": r.operation_number,
        "description": r.product_service,
        "party": r.customer_name,
        "amount": format_cents(r.total_amount_cents),
        "currency": r.currency,
        "payment_method": r.payment_method,
        "created_at": to_utc_z(r.created_at),
        "_sort": r.created_at,
    }


def _expense_row(e: Expense) -> dict:
    return {
        "id": e.id,
        "type": "expense",
        "operation_number": e.operation_number,
        "description": e.description,
        "party": e.supplier_name,
        "amount": format_cents(e.amount_cents),
        "currency": e.currency,
        "payment_method": e.payment_method,
        "created_at": to_utc_z(e.created_at),
        "_sort": e.created_at,
    }


def get_recent_transactions(*, tenant_id: str, limit: int = 10) -> dict:
    """
    The `limit` newest revenues and the `limit` newest expenses, tagged,
    merged, re-sorted newest first and cut to `limit`.

    Fetching `limit` of each is enough: the true top-N can hold at most N
    rows of either kind.
    """
    revenues = TenantRepository(Revenue, tenant_id).list(
        Revenue.created_at.desc(), Revenue.id.desc(), limit=limit
    )
    expenses = TenantRepository(Expense, tenant_id).list(
        Expense.created_at.desc(), Expense.id.desc(), limit=limit
    )

    merged = [_revenue_row(r) for r in revenues] + [_expense_row(e) for e in expenses]
    merged.sort(key=lambda row: row["_sort"], reverse=True)

    items = []
    for row in merged[:limit]:
        row.pop("_sort")
        items.append(row)
    return {"items": items, "count": len(items)}


def get_currency_distribution(*, tenant_id: str, include_expenses: bool = False) -> dict:
    """
    One entry per currency present in revenue data (and expense data when
    include_expenses is set), ordered by currency code.
    """
    revenue = {c: (t, n) for c, t, n in totals_by_currency(Revenue, Revenue.total_amount_cents, tenant_id)}
    expense: dict[str, tuple[int, int]] = {}
    if include_expenses:
        expense = {c: (t, n) for c, t, n in totals_by_currency(Expense, Expense.amount_cents, tenant_id)}

    items = []
    for currency in sorted(set(revenue) | set(expense)):
        total, count = revenue.get(currency, (0, 0))
        item = {"currency": currency, "total": format_cents(total), "count": count}
        if include_expenses:
            exp_total, exp_count = expense.get(currency, (0, 0))
            item["expense_total"] = format_cents(exp_total)
            item["expense_count"] = exp_count
        items.append(item)

    return {"items": items, "count": len(items)}


def get_monthly_revenue(*, tenant_id: str, year: int, currency: str | None = None) -> dict:
    """
    Revenue totals per calendar month of `year`: always 12 entries, January first.

    Without `currency`, amounts in different currencies are added as-is.
    """
    tenant_id = require_tenant_id(tenant_id)
    start, end = year_bounds(year)
    month = extract("month", Revenue.created_at)

    query = db.session.query(
        month.label("month"),
        func.coalesce(func.sum(Revenue.total_amount_cents), 0).label("total_cents"),
        func.count(Revenue.id).label("row_count"),
    ).filter(
        Revenue.tenant_id == tenant_id,
        Revenue.created_at >= start,
        Revenue.created_at < end,
    )
    if currency:
        query = query.filter(Revenue.currency == currency)

    found = {int(row.month): (int(row.total_cents or 0), int(row.row_count or 0)) for row in query.group_by(month).all()}

    months = []
    for m in range(1, 13):
        total, count = found.get(m, (0, 0))
        months.append({"month": m, "total": format_cents(total), "count": count})

    return {"year": year, "currency": currency, "months": months}


def current_year() -> int:
    return utcnow().year

# Overview: Revenue/expense statistics grouped by currency over a date range.

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func

from mizan.extensions import db
from mizan.models import Revenue, Expense
from mizan.money import format_cents
from mizan.time_utils import parse_iso_datetime, to_utc_z
from mizan.validation import ValidationError
from mizan.services.tenant_service import require_tenant_id


def parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    """Parse optional ISO bounds; both are inclusive. Raises ValidationError on bad input."""
    try:
        start_dt = parse_iso_datetime(start) if start else None
    except ValueError:
        raise ValidationError("must be an ISO-8601 date or datetime", field="start")
    try:
        end_dt = parse_iso_datetime(end) if end else None
    except ValueError:
        raise ValidationError("must be an ISO-8601 date or datetime", field="end")

    # A bare end date covers that whole day
    if end_dt and len(end.strip()) == 10:
        end_dt = end_dt + timedelta(days=1, microseconds=-1)

    if start_dt and end_dt and start_dt > end_dt:
        raise ValidationError("must not be after end", field="start")
    return start_dt, end_dt


def totals_by_currency(
    model,
    amount_col,
    tenant_id: str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[tuple[str, int, int]]:
    """[(currency, total_cents, count)] for currencies present in data, ordered by code."""
    tenant_id = require_tenant_id(tenant_id)

    query = db.session.query(
        model.currency,
        func.coalesce(func.sum(amount_col), 0).label("total_cents"),
        func.count(model.id).label("row_count"),
    ).filter(model.tenant_id == tenant_id)

    if start:
        query = query.filter(model.created_at >= start)
    if end:
        query = query.filter(model.created_at <= end)

    rows = query.group_by(model.currency).order_by(model.currency).all()
    return [(row.currency, int(row.total_cents or 0), int(row.row_count or 0)) for row in rows]


def sum_cents(model, amount_col, tenant_id: str, start: datetime | None = None, end: datetime | None = None) -> int:
    """Sum of amount_col across all currencies (no conversion)."""
    tenant_id = require_tenant_id(tenant_id)

    query = db.session.query(func.coalesce(func.sum(amount_col), 0)).filter(model.tenant_id == tenant_id)
    if start:
        query = query.filter(model.created_at >= start)
    if end:
        query = query.filter(model.created_at <= end)
    return int(query.scalar() or 0)


def _stats_payload(rows: list[tuple[str, int, int]], start_dt, end_dt) -> dict:
    items = [
        {"currency": currency, "total": format_cents(total), "count": count}
        for currency, total, count in rows
    ]
    return {
        "start": to_utc_z(start_dt) if start_dt else None,
        "end": to_utc_z(end_dt) if end_dt else None,
        "items": items,
        "count": len(items),
    }


def revenue_stats(*, tenant_id: str, start: str | None = None, end: str | None = None) -> dict:
    start_dt, end_dt = parse_range(start, end)
    rows = totals_by_currency(Revenue, Revenue.total_amount_cents, tenant_id, start_dt, end_dt)
    return _stats_payload(rows, start_dt, end_dt)


def expense_stats(*, tenant_id: str, start: str | None = None, end: str | None = None) -> dict:
    start_dt, end_dt = parse_range(start, end)
    rows = totals_by_currency(Expense, Expense.amount_cents, tenant_id, start_dt, end_dt)
    return _stats_payload(rows, start_dt, end_dt)

# Overview: Flask API routes for dashboard aggregates.

"""
Dashboard routes. Read-only; any authenticated role (VIEW_DASHBOARD).

Amounts are two-place decimal strings. Totals across currencies are raw
sums without conversion; per-currency splits are included alongside.
"""
from flask import Blueprint, current_app, request, g
from ..services import dashboard_service
from ..models import CURRENCIES
from ..validation import FieldError, ValidationError
from ..decorators import require_auth, require_permission

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/stats")
@require_auth
@require_permission("VIEW_DASHBOARD")
def stats():
    """
    Query params:
    - start, end: ISO date/datetime (optional, inclusive) - bound revenue/expense totals
    """
    try:
        return dashboard_service.get_dashboard_stats(
            tenant_id=g.tenant_id,
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to compute dashboard stats")
        return {"error": "Internal server error"}, 500


@dashboard_bp.get("/recent-transactions")
@require_auth
@require_permission("VIEW_DASHBOARD")
def recent_transactions():
    """
    Query params:
    - limit: int (optional, default 10)
    """
    limit = request.args.get("limit", type=int)
    if limit is None or limit < 1:
        limit = current_app.config["RECENT_TRANSACTIONS_LIMIT"]
    limit = min(limit, current_app.config["MAX_LIST_LIMIT"])

    try:
        return dashboard_service.get_recent_transactions(tenant_id=g.tenant_id, limit=limit)
    except Exception:
        current_app.logger.exception("Failed to load recent transactions")
        return {"error": "Internal server error"}, 500


@dashboard_bp.get("/currency-distribution")
@require_auth
@require_permission("VIEW_DASHBOARD")
def currency_distribution():
    """
    Query params:
    - include_expenses: true (optional) - add expense totals per currency
    """
    include_expenses = (request.args.get("include_expenses") or "").lower() in ("1", "true", "yes")

    try:
        return dashboard_service.get_currency_distribution(
            tenant_id=g.tenant_id,
            include_expenses=include_expenses,
        )
    except Exception:
        current_app.logger.exception("Failed to compute currency distribution")
        return {"error": "Internal server error"}, 500


@dashboard_bp.get("/monthly-revenue")
@require_auth
@require_permission("VIEW_DASHBOARD")
def monthly_revenue():
    """
    Query params:
    - year: int (optional, default current UTC year)
    - currency: SYP|TRY|USD (optional) - only that currency
    """
    year_raw = request.args.get("year")
    if year_raw is None or year_raw == "":
        year = dashboard_service.current_year()
    else:
        try:
            year = int(year_raw)
        except ValueError:
            return ValidationError("must be an integer", field="year").to_dict(), 400
        if not 1 <= year <= 9998:
            return ValidationError("must be between 1 and 9998", field="year").to_dict(), 400

    currency = request.args.get("currency") or None
    if currency is not None and currency not in CURRENCIES:
        error = FieldError("currency", "is not an allowed value", value=currency, allowed=CURRENCIES)
        return ValidationError([error]).to_dict(), 400

    try:
        return dashboard_service.get_monthly_revenue(tenant_id=g.tenant_id, year=year, currency=currency)
    except Exception:
        current_app.logger.exception("Failed to compute monthly revenue")
        return {"error": "Internal server error"}, 500

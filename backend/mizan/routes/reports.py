# Overview: Flask API routes for currency statistics reports.

from flask import Blueprint, current_app, request, g
from ..services import reporting_service
from ..validation import ValidationError
from ..decorators import require_auth, require_permission

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/revenue-stats")
@require_auth
@require_permission("VIEW_REVENUES")
def revenue_stats():
    """Per-currency revenue totals and counts; ?start=&end= (inclusive, optional)."""
    try:
        return reporting_service.revenue_stats(
            tenant_id=g.tenant_id,
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to compute revenue stats")
        return {"error": "Internal server error"}, 500


@reports_bp.get("/expense-stats")
@require_auth
@require_permission("VIEW_EXPENSES")
def expense_stats():
    """Per-currency expense totals and counts; ?start=&end= (inclusive, optional)."""
    try:
        return reporting_service.expense_stats(
            tenant_id=g.tenant_id,
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to compute expense stats")
        return {"error": "Internal server error"}, 500

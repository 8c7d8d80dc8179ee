# Overview: Flask API routes for expense transactions.

from flask import Blueprint, current_app, request, g
from ..services import expenses_service
from ..models import Expense, CURRENCIES, EXPENSE_TYPES, PAYMENT_METHODS
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_permission

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={
        "supplier_name", "expense_type", "description", "amount",
        "currency", "payment_method", "notes",
    },
    required_on_create={"expense_type", "description", "amount", "currency", "payment_method"},
    enum_fields={
        "expense_type": EXPENSE_TYPES,
        "currency": CURRENCIES,
        "payment_method": PAYMENT_METHODS,
    },
    money_fields={"amount": "amount_cents"},
)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
@require_permission("VIEW_EXPENSES")
def list_expenses():
    try:
        return expenses_service.list_expenses(
            g.tenant_id,
            limit=request.args.get("limit", type=int),
            page=request.args.get("page", type=int),
            per_page=request.args.get("per_page", type=int),
            default_limit=current_app.config["DEFAULT_LIST_LIMIT"],
            max_limit=current_app.config["MAX_LIST_LIMIT"],
        )
    except Exception:
        current_app.logger.exception("Failed to list expenses")
        return {"error": "Internal server error"}, 500


@expenses_bp.get("/<expense_id>")
@require_auth
@require_permission("VIEW_EXPENSES")
def get_expense(expense_id: str):
    expense = expenses_service.get_expense(expense_id=expense_id, tenant_id=g.tenant_id)
    if expense is None:
        return {"error": "Expense not found"}, 404
    return expense


@expenses_bp.post("")
@require_auth
@require_permission("MANAGE_EXPENSES")
def create_expense_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
        created = expenses_service.create_expense(patch=patch, ctx=g.auth)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create expense")
        return {"error": "Internal server error"}, 500

    return created, 201


@expenses_bp.put("/<expense_id>")
@require_auth
@require_permission("MANAGE_EXPENSES")
def update_expense_route(expense_id: str):
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=True)
        updated = expenses_service.update_expense(expense_id=expense_id, patch=patch, tenant_id=g.tenant_id)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update expense")
        return {"error": "Internal server error"}, 500

    if not updated:
        return {"error": "Expense not found"}, 404

    return updated, 200


@expenses_bp.delete("/<expense_id>")
@require_auth
@require_permission("MANAGE_EXPENSES")
def delete_expense_route(expense_id: str):
    try:
        deleted = expenses_service.delete_expense(expense_id=expense_id, tenant_id=g.tenant_id)
    except Exception:
        current_app.logger.exception("Failed to delete expense")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Expense not found"}, 404

    return {"ok": True}, 200

# Overview: Flask API routes for revenue transactions.

"""
Revenue routes.

Reads require VIEW_REVENUES; create, update and delete require
MANAGE_REVENUES (super_admin, owner, manager, accountant).

operation_number, created_by and the timestamps are server-assigned;
total_amount is derived from quantity x unit_price.
"""
from flask import Blueprint, current_app, request, g
from ..services import revenues_service
from ..models import Revenue, CURRENCIES, PAYMENT_METHODS, TRANSACTION_TYPES
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_permission

REVENUE_POLICY = ModelValidationPolicy(
    writable_fields={
        "customer_name", "transaction_type", "product_service", "quantity",
        "unit_price", "total_amount", "currency", "payment_method", "notes",
    },
    required_on_create={"transaction_type", "product_service", "unit_price", "currency", "payment_method"},
    enum_fields={
        "transaction_type": TRANSACTION_TYPES,
        "currency": CURRENCIES,
        "payment_method": PAYMENT_METHODS,
    },
    money_fields={"unit_price": "unit_price_cents", "total_amount": "total_amount_cents"},
    min_values={"quantity": 1},
)

revenues_bp = Blueprint("revenues", __name__, url_prefix="/api/revenues")


@revenues_bp.get("")
@require_auth
@require_permission("VIEW_REVENUES")
def list_revenues():
    """
    Newest first.

    Query params:
    - limit: int (optional, default 50)
    - page / per_page: int (optional) - paginated listing instead of limit
    """
    try:
        return revenues_service.list_revenues(
            g.tenant_id,
            limit=request.args.get("limit", type=int),
            page=request.args.get("page", type=int),
            per_page=request.args.get("per_page", type=int),
            default_limit=current_app.config["DEFAULT_LIST_LIMIT"],
            max_limit=current_app.config["MAX_LIST_LIMIT"],
        )
    except Exception:
        current_app.logger.exception("Failed to list revenues")
        return {"error": "Internal server error"}, 500


@revenues_bp.get("/<revenue_id>")
@require_auth
@require_permission("VIEW_REVENUES")
def get_revenue(revenue_id: str):
    revenue = revenues_service.get_revenue(revenue_id=revenue_id, tenant_id=g.tenant_id)
    if revenue is None:
        return {"error": "Revenue not found"}, 404
    return revenue


@revenues_bp.post("")
@require_auth
@require_permission("MANAGE_REVENUES")
def create_revenue_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Revenue, payload=payload, policy=REVENUE_POLICY, partial=False)
        created = revenues_service.create_revenue(patch=patch, ctx=g.auth)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create revenue")
        return {"error": "Internal server error"}, 500

    return created, 201


@revenues_bp.put("/<revenue_id>")
@require_auth
@require_permission("MANAGE_REVENUES")
def update_revenue_route(revenue_id: str):
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Revenue, payload=payload, policy=REVENUE_POLICY, partial=True)
        updated = revenues_service.update_revenue(revenue_id=revenue_id, patch=patch, tenant_id=g.tenant_id)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update revenue")
        return {"error": "Internal server error"}, 500

    if not updated:
        return {"error": "Revenue not found"}, 404

    return updated, 200


@revenues_bp.delete("/<revenue_id>")
@require_auth
@require_permission("MANAGE_REVENUES")
def delete_revenue_route(revenue_id: str):
    try:
        deleted = revenues_service.delete_revenue(revenue_id=revenue_id, tenant_id=g.tenant_id)
    except Exception:
        current_app.logger.exception("Failed to delete revenue")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Revenue not found"}, 404

    return {"ok": True}, 200

# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product management routes with multi-tenant support.

MULTI-TENANT: All product operations are scoped to the caller's tenant
(g.tenant_id, set by @require_auth).

SECURITY: All routes require authentication.
- Read operations require VIEW_PRODUCTS
- Create/update require MANAGE_PRODUCTS
- Delete requires DELETE_PRODUCTS (warehouse keepers cannot delete)
"""
from flask import Blueprint, current_app, request, g
from ..services import products_service
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_permission

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "category", "unit", "quantity", "min_stock_level",
        "purchase_price", "sale_price", "supplier",
    },
    required_on_create={"name", "unit", "purchase_price", "sale_price"},
    read_only_fields=frozenset({"id", "tenant_id", "created_at", "updated_at", "is_low_stock"}),
    money_fields={"purchase_price": "purchase_price_cents", "sale_price": "sale_price_cents"},
    min_values={"quantity": 0, "min_stock_level": 0},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission("VIEW_PRODUCTS")
def list_products():
    """
    List products ordered by name.

    Query params:
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20)
    """
    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", type=int)

    try:
        return products_service.list_products(
            g.tenant_id,
            page=page,
            per_page=per_page,
            max_per_page=current_app.config["MAX_LIST_LIMIT"],
        )
    except Exception:
        current_app.logger.exception("Failed to list products")
        return {"error": "Internal server error"}, 500


# Registered before /<product_id> so "low-stock" is never taken for an id
@products_bp.get("/low-stock")
@require_auth
@require_permission("VIEW_PRODUCTS")
def list_low_stock():
    """Products with quantity <= min_stock_level."""
    try:
        return products_service.list_low_stock_products(g.tenant_id)
    except Exception:
        current_app.logger.exception("Failed to list low-stock products")
        return {"error": "Internal server error"}, 500


@products_bp.get("/<product_id>")
@require_auth
@require_permission("VIEW_PRODUCTS")
def get_product(product_id: str):
    product = products_service.get_product(product_id=product_id, tenant_id=g.tenant_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    except ValidationError as e:
        return e.to_dict(), 400

    try:
        created = products_service.create_product(patch=patch, tenant_id=g.tenant_id)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created, 201


@products_bp.put("/<product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def update_product_route(product_id: str):
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    except ValidationError as e:
        return e.to_dict(), 400

    try:
        updated = products_service.update_product(product_id=product_id, patch=patch, tenant_id=g.tenant_id)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    if not updated:
        return {"error": "Product not found"}, 404

    return updated, 200


@products_bp.delete("/<product_id>")
@require_auth
@require_permission("DELETE_PRODUCTS")
def delete_product_route(product_id: str):
    try:
        deleted = products_service.delete_product(product_id=product_id, tenant_id=g.tenant_id)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Product not found"}, 404

    return {"ok": True}, 200

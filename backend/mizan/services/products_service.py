# backend/mizan/services/products_service.py
"""
Products Service with Multi-Tenant Support

MULTI-TENANT: All product operations are tenant-scoped through
TenantRepository; a product of another tenant is simply "not found".

Products are hard-deleted. Stock quantities are edited directly
(there is no movement ledger).
"""
from __future__ import annotations

from ..models import Product
from .repository import TenantRepository, paginate

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "category",
    "unit",
    "quantity",
    "min_stock_level",
    "purchase_price_cents",
    "sale_price_cents",
    "supplier",
}


def _repo(tenant_id: str) -> TenantRepository:
    return TenantRepository(Product, tenant_id)


def _mutable(patch: dict) -> dict:
    return {k: v for k, v in patch.items() if k in PRODUCT_MUTABLE_FIELDS}


def list_products(
    tenant_id: str,
    page: int | None = None,
    per_page: int | None = None,
    max_per_page: int = 500,
) -> dict:
    """
    Tenant-scoped product listing ordered by name, with optional pagination.

    Without `page` every product of the tenant is returned.
    """
    query = _repo(tenant_id).query().order_by(Product.name.asc(), Product.id.asc())

    if page is None:
        products = query.all()
        return {
            "items": [p.to_dict() for p in products],
            "count": len(products),
        }

    return paginate(query, page=page, per_page=per_page, default_per_page=20, max_per_page=max_per_page)


def list_low_stock_products(tenant_id: str) -> dict:
    """Products where quantity <= min_stock_level (inclusive), ordered by name."""
    products = (
        _repo(tenant_id)
        .query()
        .filter(Product.quantity <= Product.min_stock_level)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


def get_product(*, product_id: str, tenant_id: str) -> dict | None:
    p = _repo(tenant_id).get(product_id)
    return p.to_dict() if p else None


def create_product(*, patch: dict, tenant_id: str) -> dict:
    """
    Create product using a validated patch dict.

    Returns:
        Created product dict
    """
    p = _repo(tenant_id).add(**_mutable(patch))
    return p.to_dict()


def update_product(*, product_id: str, patch: dict, tenant_id: str) -> dict | None:
    """
    Update a product.

    Returns:
        Updated product dict, or None if not found in this tenant
    """
    p = _repo(tenant_id).update(product_id, _mutable(patch))
    return p.to_dict() if p else None


def delete_product(*, product_id: str, tenant_id: str) -> bool:
    """
    Permanently delete a product.

    Returns:
        True if deleted, False if not found in this tenant
    """
    return _repo(tenant_id).delete(product_id)


def count_low_stock(tenant_id: str) -> int:
    return _repo(tenant_id).count(Product.quantity <= Product.min_stock_level)

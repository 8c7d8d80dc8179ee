"""
Revenue transactions.

MULTI-TENANT: every call takes the caller's AuthContext (or its tenant_id)
explicitly. operation_number, created_by and total_amount are assigned here,
never taken from the client.
"""
from __future__ import annotations

from ..models import Revenue
from ..validation import enforce_rules_revenue
from .document_service import REVENUE_PREFIX, next_operation_number
from .permission_service import AuthContext
from .repository import TenantRepository, clamp_limit, paginate

REVENUE_MUTABLE_FIELDS = {
    "customer_name",
    "transaction_type",
    "product_service",
    "quantity",
    "unit_price_cents",
    "total_amount_cents",
    "currency",
    "payment_method",
    "notes",
}


def _mutable(patch: dict) -> dict:
    return {k: v for k, v in patch.items() if k in REVENUE_MUTABLE_FIELDS}


def list_revenues(
    tenant_id: str,
    *,
    limit: int | None = None,
    page: int | None = None,
    per_page: int | None = None,
    default_limit: int = 50,
    max_limit: int = 500,
) -> dict:
    """Newest first. Bounded by `limit` (default 50), or paginated when `page` is given."""
    query = TenantRepository(Revenue, tenant_id).query().order_by(Revenue.created_at.desc(), Revenue.id.desc())

    if page is not None:
        return paginate(query, page=page, per_page=per_page, default_per_page=default_limit, max_per_page=max_limit)

    rows = query.limit(clamp_limit(limit, default_limit, max_limit)).all()
    return {"items": [r.to_dict() for r in rows], "count": len(rows)}


def get_revenue(*, revenue_id: str, tenant_id: str) -> dict | None:
    r = TenantRepository(Revenue, tenant_id).get(revenue_id)
    return r.to_dict() if r else None


def create_revenue(*, patch: dict, ctx: AuthContext) -> dict:
    """
    Create a revenue from a validated patch.

    Raises:
        ValidationError: total_amount mismatch or overflow
        ConflictError: no free operation number / concurrent duplicate
    """
    values = _mutable(patch)
    enforce_rules_revenue(values)

    repo = TenantRepository(Revenue, ctx.tenant_id)
    op_number = next_operation_number(model=Revenue, tenant_id=ctx.tenant_id, prefix=REVENUE_PREFIX)

    r = repo.add(operation_number=op_number, created_by=ctx.user_id, **values)
    return r.to_dict()


def update_revenue(*, revenue_id: str, patch: dict, tenant_id: str) -> dict | None:
    """
    Update a revenue; total_amount is recomputed from the resulting quantity/unit_price.

    Returns None if not found in this tenant.
    """
    repo = TenantRepository(Revenue, tenant_id)
    r = repo.get(revenue_id)
    if r is None:
        return None

    values = _mutable(patch)
    enforce_rules_revenue(values, quantity=r.quantity, unit_price_cents=r.unit_price_cents)

    r = repo.update(revenue_id, values)
    return r.to_dict()


def delete_revenue(*, revenue_id: str, tenant_id: str) -> bool:
    return TenantRepository(Revenue, tenant_id).delete(revenue_id)

"""
Expense transactions. Same lifecycle as revenues with a single amount.
"""
from __future__ import annotations

from ..models import Expense
from .document_service import EXPENSE_PREFIX, next_operation_number
from .permission_service import AuthContext
from .repository import TenantRepository, clamp_limit, paginate

EXPENSE_MUTABLE_FIELDS = {
    "supplier_name",
    "expense_type",
    "description",
    "amount_cents",
    "currency",
    "payment_method",
    "notes",
}


def _mutable(patch: dict) -> dict:
    return {k: v for k, v in patch.items() if k in EXPENSE_MUTABLE_FIELDS}


def list_expenses(
    tenant_id: str,
    *,
    limit: int | None = None,
    page: int | None = None,
    per_page: int | None = None,
    default_limit: int = 50,
    max_limit: int = 500,
) -> dict:
    query = TenantRepository(Expense, tenant_id).query().order_by(Expense.created_at.desc(), Expense.id.desc())

    if page is not None:
        return paginate(query, page=page, per_page=per_page, default_per_page=default_limit, max_per_page=max_limit)

    rows = query.limit(clamp_limit(limit, default_limit, max_limit)).all()
    return {"items": [e.to_dict() for e in rows], "count": len(rows)}


def get_expense(*, expense_id: str, tenant_id: str) -> dict | None:
    e = TenantRepository(Expense, tenant_id).get(expense_id)
    return e.to_dict() if e else None


def create_expense(*, patch: dict, ctx: AuthContext) -> dict:
    repo = TenantRepository(Expense, ctx.tenant_id)
    op_number = next_operation_number(model=Expense, tenant_id=ctx.tenant_id, prefix=EXPENSE_PREFIX)

    e = repo.add(operation_number=op_number, created_by=ctx.user_id, **_mutable(patch))
    return e.to_dict()


def update_expense(*, expense_id: str, patch: dict, tenant_id: str) -> dict | None:
    e = TenantRepository(Expense, tenant_id).update(expense_id, _mutable(patch))
    return e.to_dict() if e else None


def delete_expense(*, expense_id: str, tenant_id: str) -> bool:
    return TenantRepository(Expense, tenant_id).delete(expense_id)

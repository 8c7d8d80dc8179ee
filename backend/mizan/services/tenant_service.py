"""
Multi-Tenant Service: Tenant Validation and Scoping Helpers

Every request is scoped to exactly one tenant, fixed when the session was
created. Tenant ids are never read from client input.

SECURITY INVARIANTS:
1. Every repository call carries an explicit tenant_id
2. Every query touching tenant-owned data filters on tenant_id
3. A row belonging to another tenant is indistinguishable from a missing row
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ..extensions import db
from ..models import Tenant
from mizan.time_utils import utcnow


class TenantAccessError(Exception):
    """Raised when an operation runs without tenant context."""
    pass


def require_tenant_id(tenant_id: str | None) -> str:
    """
    Return tenant_id or raise.

    SECURITY: A missing tenant id is a programming error, never "all tenants".
    """
    if not tenant_id:
        raise TenantAccessError("Tenant context not established")
    return tenant_id


def scoped_query(model, tenant_id: str | None):
    """
    Base query for a tenant-owned model.

    Usage:
        products = scoped_query(Product, ctx.tenant_id).order_by(Product.name).all()
    """
    tenant_id = require_tenant_id(tenant_id)
    return db.session.query(model).filter(model.tenant_id == tenant_id)


def get_tenant(tenant_id: str) -> Tenant | None:
    return db.session.query(Tenant).filter_by(id=tenant_id).first()


def list_tenants() -> list[Tenant]:
    return db.session.query(Tenant).order_by(Tenant.name.asc()).all()


def create_tenant(*, name: str, subscription_expires_at: datetime, is_active: bool = True) -> Tenant:
    name = (name or "").strip()
    if not name:
        raise ValueError("Tenant name is required")
    if len(name) > 100:
        raise ValueError("Tenant name exceeds max length 100")

    tenant = Tenant(name=name, subscription_expires_at=subscription_expires_at, is_active=is_active)
    db.session.add(tenant)
    db.session.commit()
    return tenant


def tenants_expiring_within(days: int) -> list[Tenant]:
    """Active tenants whose subscription ends within `days` (including already expired)."""
    cutoff = utcnow() + timedelta(days=days)
    return (
        db.session.query(Tenant)
        .filter(Tenant.is_active.is_(True), Tenant.subscription_expires_at <= cutoff)
        .order_by(Tenant.subscription_expires_at.asc())
        .all()
    )

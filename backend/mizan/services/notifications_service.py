from __future__ import annotations

from ..extensions import db
from ..models import Notification, Product, Tenant
from mizan.time_utils import utcnow
from .repository import TenantRepository, clamp_limit
from .tenant_service import tenants_expiring_within


TYPE_LOW_STOCK = "low_stock"
TYPE_SUBSCRIPTION_EXPIRY = "subscription_expiry"


def _repo(tenant_id: str) -> TenantRepository:
    return TenantRepository(Notification, tenant_id)


def list_notifications(
    tenant_id: str,
    *,
    limit: int | None = None,
    unread_only: bool = False,
    default_limit: int = 20,
    max_limit: int = 500,
) -> dict:
    query = _repo(tenant_id).query()
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    rows = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(clamp_limit(limit, default_limit, max_limit))
        .all()
    )
    return {"items": [n.to_dict() for n in rows], "count": len(rows)}


def create_notification(*, patch: dict, tenant_id: str) -> dict:
    n = _repo(tenant_id).add(
        title=patch["title"],
        message=patch["message"],
        type=patch["type"],
        is_read=False,
    )
    return n.to_dict()


def mark_read(*, notification_id: str, tenant_id: str) -> dict | None:
    """
    Idempotent: marking an already read notification succeeds unchanged.

    Returns None if the notification is not in this tenant.
    """
    repo = _repo(tenant_id)
    n = repo.get(notification_id)
    if n is None:
        return None
    if not n.is_read:
        n.is_read = True
        repo.commit()
    return n.to_dict()


def unread_count(tenant_id: str) -> int:
    return _repo(tenant_id).count(Notification.is_read.is_(False))


def _has_unread(tenant_id: str, notification_type: str) -> bool:
    return _repo(tenant_id).count(
        Notification.is_read.is_(False),
        Notification.type == notification_type,
    ) > 0


def scan_low_stock() -> list[Notification]:
    """
    One low_stock notification per active tenant that has low-stock products.

    Tenants that still have an unread low_stock notification are skipped.
    """
    created: list[Notification] = []
    tenants = db.session.query(Tenant).filter(Tenant.is_active.is_(True)).all()

    for tenant in tenants:
        names = [
            row.name
            for row in TenantRepository(Product, tenant.id)
            .query()
            .filter(Product.quantity <= Product.min_stock_level)
            .order_by(Product.name.asc())
            .all()
        ]
        if not names or _has_unread(tenant.id, TYPE_LOW_STOCK):
            continue

        preview = ", ".join(names[:5])
        if len(names) > 5:
            preview += f" and {len(names) - 5} more"

        created.append(
            Notification(
                tenant_id=tenant.id,
                title="Low stock",
                message=f"{len(names)} product(s) at or below minimum stock: {preview}",
                type=TYPE_LOW_STOCK,
                is_read=False,
                created_at=utcnow(),
            )
        )

    db.session.add_all(created)
    db.session.commit()
    return created


def scan_subscriptions(days: int = 7) -> list[Notification]:
    """subscription_expiry notification for tenants expiring within `days`."""
    created: list[Notification] = []

    for tenant in tenants_expiring_within(days):
        if _has_unread(tenant.id, TYPE_SUBSCRIPTION_EXPIRY):
            continue

        expires = tenant.subscription_expires_at.date().isoformat()
        if tenant.subscription_expires_at < utcnow():
            message = f"Your subscription expired on {expires}."
        else:
            message = f"Your subscription expires on {expires}."

        created.append(
            Notification(
                tenant_id=tenant.id,
                title="Subscription expiry",
                message=message,
                type=TYPE_SUBSCRIPTION_EXPIRY,
                is_read=False,
                created_at=utcnow(),
            )
        )

    db.session.add_all(created)
    db.session.commit()
    return created

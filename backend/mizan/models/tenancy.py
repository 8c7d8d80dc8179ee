from __future__ import annotations

from ..extensions import db
from mizan.time_utils import to_utc_z, utcnow
from .base import new_id


class Tenant(db.Model):
    """
    Multi-tenant root: every business using the system is a Tenant.

    All users, products, transactions and notifications belong to exactly
    one tenant via tenant_id. No data may cross tenant boundaries.

    Tenants are created at onboarding (CLI) and are never hard-deleted;
    billing/admin flows toggle is_active and move subscription_expires_at.
    """
    __tablename__ = "tenants"
    __table_args__ = (
        db.Index("ix_tenants_subscription_expires_at", "subscription_expires_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    subscription_expires_at = db.Column(db.DateTime, nullable=False)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Tenant id={self.id} name={self.name!r}>"

    @property
    def subscription_active(self) -> bool:
        return bool(self.is_active) and self.subscription_expires_at >= utcnow()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "subscription_expires_at": to_utc_z(self.subscription_expires_at),
            "subscription_active": self.subscription_active,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

from __future__ import annotations

from ..extensions import db
from mizan.time_utils import to_utc_z, utcnow
from .base import new_id


NOTIFICATION_TYPES = ("low_stock", "subscription_expiry", "high_spending", "backup_success")


class Notification(db.Model):
    """
    Tenant-wide notification shown on the dashboard.

    Created by system scans (low stock, subscription expiry) or by
    owner/manager/super_admin users. The only mutation is mark-as-read.
    """
    __tablename__ = "notifications"
    __table_args__ = (
        db.Index("ix_notifications_tenant_read", "tenant_id", "is_read"),
        db.Index("ix_notifications_tenant_created", "tenant_id", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenants.id"), nullable=False, index=True)

    title = db.Column(db.String(100), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False)  # one of NOTIFICATION_TYPES
    is_read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "is_read": self.is_read,
            "created_at": to_utc_z(self.created_at),
        }

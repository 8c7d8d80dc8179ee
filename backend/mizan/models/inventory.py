from __future__ import annotations

from ..extensions import db
from mizan.money import format_cents
from mizan.time_utils import to_utc_z, utcnow
from .base import new_id


class Product(db.Model):
    """
    Product master data with on-hand stock.

    MULTI-TENANT: Products carry tenant_id directly.

    LOW STOCK: a product is low on stock when quantity <= min_stock_level
    (the boundary is inclusive).

    Products are physically deleted; there is no soft-delete flag.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_tenant_name", "tenant_id", "name"),
        db.Index("ix_products_tenant_quantity", "tenant_id", "quantity"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenants.id"), nullable=False, index=True)

    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    unit = db.Column(db.String(20), nullable=False)  # piece, kg, liter, box...

    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_stock_level = db.Column(db.Integer, nullable=False, default=0)

    # Authoritative storage in cents
    purchase_price_cents = db.Column(db.BigInteger, nullable=False)
    sale_price_cents = db.Column(db.BigInteger, nullable=False)

    supplier = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} qty={self.quantity} tenant_id={self.tenant_id}>"

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock_level

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "quantity": self.quantity,
            "min_stock_level": self.min_stock_level,
            "purchase_price": format_cents(self.purchase_price_cents),
            "sale_price": format_cents(self.sale_price_cents),
            "supplier": self.supplier,
            "is_low_stock": self.is_low_stock,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

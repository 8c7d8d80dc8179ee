from __future__ import annotations

from ..extensions import db
from mizan.money import format_cents
from mizan.time_utils import to_utc_z, utcnow
from .base import new_id


CURRENCIES = ("SYP", "TRY", "USD")
PAYMENT_METHODS = ("cash", "card", "transfer", "other")
TRANSACTION_TYPES = ("sale", "service", "advance_payment", "other")
EXPENSE_TYPES = ("rent", "salaries", "services", "purchase", "utilities", "maintenance", "other")


class Revenue(db.Model):
    """
    Incoming money: a sale, service, advance payment or other income.

    MULTI-TENANT: Revenues carry tenant_id directly.

    INVARIANT: total_amount_cents == quantity * unit_price_cents.
    operation_number is human readable (REV########XXXX) and unique per tenant.
    """
    __tablename__ = "revenues"
    __table_args__ = (
        db.UniqueConstraint("tenant_id", "operation_number", name="uq_revenues_tenant_operation_number"),
        db.Index("ix_revenues_tenant_created", "tenant_id", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenants.id"), nullable=False, index=True)

    operation_number = db.Column(db.String(20), nullable=False)
    customer_name = db.Column(db.String(100), nullable=True)
    transaction_type = db.Column(db.String(32), nullable=False)
    product_service = db.Column(db.String(100), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price_cents = db.Column(db.BigInteger, nullable=False)
    total_amount_cents = db.Column(db.BigInteger, nullable=False)

    currency = db.Column(db.String(3), nullable=False)
    payment_method = db.Column(db.String(16), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    # No FK cascade: attribution survives user deactivation
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Revenue id={self.id} op={self.operation_number} total_cents={self.total_amount_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "operation_number": self.operation_number,
            "customer_name": self.customer_name,
            "transaction_type": self.transaction_type,
            "product_service": self.product_service,
            "quantity": self.quantity,
            "unit_price": format_cents(self.unit_price_cents),
            "total_amount": format_cents(self.total_amount_cents),
            "currency": self.currency,
            "payment_method": self.payment_method,
            "notes": self.notes,
            "created_by": self.created_by,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Expense(db.Model):
    """
    Outgoing money: rent, salaries, purchases and other spending.

    MULTI-TENANT: Expenses carry tenant_id directly.
    """
    __tablename__ = "expenses"
    __table_args__ = (
        db.UniqueConstraint("tenant_id", "operation_number", name="uq_expenses_tenant_operation_number"),
        db.Index("ix_expenses_tenant_created", "tenant_id", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    tenant_id = db.Column(db.String(36), db.ForeignKey("tenants.id"), nullable=False, index=True)

    operation_number = db.Column(db.String(20), nullable=False)
    supplier_name = db.Column(db.String(100), nullable=True)
    expense_type = db.Column(db.String(32), nullable=False)
    description = db.Column(db.String(200), nullable=False)

    amount_cents = db.Column(db.BigInteger, nullable=False)

    currency = db.Column(db.String(3), nullable=False)
    payment_method = db.Column(db.String(16), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Expense id={self.id} op={self.operation_number} amount_cents={self.amount_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "operation_number": self.operation_number,
            "supplier_name": self.supplier_name,
            "expense_type": self.expense_type,
            "description": self.description,
            "amount": format_cents(self.amount_cents),
            "currency": self.currency,
            "payment_method": self.payment_method,
            "notes": self.notes,
            "created_by": self.created_by,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

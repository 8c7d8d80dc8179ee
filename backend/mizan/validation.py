from __future__ import annotations
import re
from datetime import datetime
from mizan.time_utils import parse_iso_datetime
from mizan.money import MAX_AMOUNT_CENTS, format_cents, parse_money

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Integer columns are 32-bit on every supported backend.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

# Always assigned by the server; clients may never send them.
SERVER_FIELDS = frozenset({"id", "tenant_id", "operation_number", "created_by", "created_at", "updated_at"})


@dataclass(frozen=True)
class FieldError:
    """One failing field. value/allowed are only set for enum violations."""
    field: str
    message: str
    value: Any = None
    allowed: tuple | None = None

    def to_dict(self) -> dict:
        out = {"field": self.field, "message": self.message}
        if self.allowed is not None:
            out["value"] = self.value
            out["allowed"] = list(self.allowed)
        return out


class ValidationError(ValueError):
    """400-level input problem; carries every failing field."""

    def __init__(self, errors: list[FieldError] | str, field: str | None = None):
        if isinstance(errors, str):
            errors = [FieldError(field or "_", errors)]
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    def to_dict(self) -> dict:
        return {"error": "Validation error", "errors": [e.to_dict() for e in self.errors]}


class ConflictError(ValueError):
    """409-level conflict (duplicate username, operation number race)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    - read_only_fields: server-computed fields, rejected with "is read-only"
    - enum_fields: field -> allowed values
    - money_fields: wire name -> *_cents column (values must be > 0)
    - min_values: integer field -> inclusive lower bound
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    read_only_fields: frozenset[str] = SERVER_FIELDS
    enum_fields: dict[str, tuple] = field(default_factory=dict)
    money_fields: dict[str, str] = field(default_factory=dict)
    min_values: dict[str, int] = field(default_factory=dict)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    """Coerce a non-null raw value by column type. Raises ValueError with a bare message."""
    coltype = col.type

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            number = value
        # String input - must be plain digits (with optional leading minus)
        elif isinstance(value, str):
            stripped = value.strip()
            if not stripped or "e" in stripped.lower() or "." in stripped:
                raise ValueError("must be an integer")
            try:
                number = int(stripped)
            except ValueError:
                raise ValueError("must be an integer")
        else:
            raise ValueError("must be an integer")
        if number > INT_MAX:
            raise ValueError(f"must be <= {INT_MAX}")
        if number < INT_MIN:
            raise ValueError(f"must be >= {INT_MIN}")
        return number

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValueError("must be a boolean")

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                dt = None
            if dt is None:
                raise ValueError("must be an ISO-8601 datetime")
            return dt
        raise ValueError("must be an ISO-8601 datetime")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list, bool)):
            raise ValueError("must be a string")
        return str(value).strip()

    return value


def _coerce_money(value: Any) -> int:
    cents = parse_money(value)
    if cents <= 0:
        raise ValueError("must be greater than 0")
    if cents > MAX_AMOUNT_CENTS:
        raise ValueError(f"cannot exceed {format_cents(MAX_AMOUNT_CENTS)}")
    return cents


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: Any,
    policy: ModelValidationPolicy,
    partial: bool,
    errors: list[FieldError] | None = None,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields) and read-only set
    - enum membership, money format and numeric lower bounds
    - required_on_create (if partial=False)

    Returns a cleaned patch dict keyed by column name (money fields land in
    their *_cents column). Every failing field is collected; a single
    ValidationError listing all of them is raised at the end.

    errors: failures already found by the caller (e.g. write-only fields)
    that should be reported together with these.
    """
    errors = list(errors or [])

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        for f in sorted(policy.required_on_create):
            if f not in payload:
                errors.append(FieldError(f, "is required"))

    cols = _columns_by_key(model)
    patch: dict = {}

    for k, raw in payload.items():
        if k in policy.read_only_fields:
            errors.append(FieldError(k, "is read-only"))
            continue
        if k not in policy.writable_fields:
            errors.append(FieldError(k, "is not an allowed field"))
            continue

        col_key = policy.money_fields.get(k, k)
        col = cols.get(col_key)
        if col is None:
            errors.append(FieldError(k, "is not an allowed field"))
            continue

        # NULL handling
        if raw is None:
            if not col.nullable:
                errors.append(FieldError(k, "cannot be null"))
            else:
                patch[col_key] = None
            continue

        try:
            if k in policy.money_fields:
                val = _coerce_money(raw)
            else:
                val = _coerce_value(col, raw)
        except ValueError as e:
            errors.append(FieldError(k, str(e)))
            continue

        if isinstance(col.type, (String, Text)) and isinstance(val, str):
            if val == "":
                # Blank optional text is stored as NULL
                if col.nullable:
                    patch[col_key] = None
                    continue
                errors.append(FieldError(k, "cannot be blank"))
                continue
            if isinstance(col.type, String) and col.type.length and len(val) > col.type.length:
                errors.append(FieldError(k, f"exceeds max length {col.type.length}"))
                continue

        # Enum values must match exactly; " USD " is not USD.
        allowed = policy.enum_fields.get(k)
        if allowed is not None and raw not in allowed:
            errors.append(FieldError(k, "is not an allowed value", value=raw, allowed=tuple(allowed)))
            continue

        minimum = policy.min_values.get(k)
        if minimum is not None and val < minimum:
            errors.append(FieldError(k, f"must be >= {minimum}"))
            continue

        patch[col_key] = val

    if errors:
        raise ValidationError(errors)

    return patch


def enforce_rules_revenue(patch: dict, *, quantity: int | None = None, unit_price_cents: int | None = None) -> None:
    """
    total_amount is always quantity * unit_price. A client-sent total must match
    exactly; otherwise the server value is filled in.

    quantity / unit_price_cents: the stored values, for partial updates.
    """
    qty = patch.get("quantity", quantity)
    if qty is None:
        qty = 1
    price = patch.get("unit_price_cents", unit_price_cents)
    if price is None:
        return

    total = qty * price
    if total > MAX_AMOUNT_CENTS:
        raise ValidationError(f"cannot exceed {format_cents(MAX_AMOUNT_CENTS)}", field="total_amount")

    supplied = patch.get("total_amount_cents")
    if supplied is not None and supplied != total:
        raise ValidationError(
            f"must equal quantity x unit_price ({format_cents(total)})", field="total_amount"
        )

    patch["quantity"] = qty
    patch["total_amount_cents"] = total


def validate_email(email: str | None) -> FieldError | None:
    if email is None:
        return None
    if not EMAIL_RE.match(email):
        return FieldError("email", "must be a valid email address")
    return None


def validate_password(password: Any) -> FieldError | None:
    if not isinstance(password, str):
        return FieldError("password", "must be a string")
    if len(password) < 6:
        return FieldError("password", "must be at least 6 characters")
    return None

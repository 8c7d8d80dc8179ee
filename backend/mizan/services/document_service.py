# Overview: Operation number allocation for revenue and expense documents.

from __future__ import annotations

import secrets
import string
import time

from ..extensions import db
from ..validation import ConflictError
from .tenant_service import require_tenant_id

REVENUE_PREFIX = "REV"
EXPENSE_PREFIX = "EXP"

SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
MAX_ATTEMPTS = 5


def generate_operation_number(prefix: str, now_ms: int | None = None) -> str:
    """
    <PREFIX><last 8 digits of epoch millis><4 chars of [A-Z0-9]>, e.g. REV12345678K3Q9.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    digits = str(now_ms)[-8:].rjust(8, "0")
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(4))
    return f"{prefix}{digits}{suffix}"


def next_operation_number(*, model, tenant_id: str, prefix: str) -> str:
    """
    Allocate an operation number not yet used by this tenant.

    Candidates already taken are regenerated up to MAX_ATTEMPTS times.
    The (tenant_id, operation_number) unique constraint still guards
    concurrent inserts; that race surfaces as ConflictError on commit.
    """
    tenant_id = require_tenant_id(tenant_id)

    for _ in range(MAX_ATTEMPTS):
        candidate = generate_operation_number(prefix)
        taken = (
            db.session.query(model.id)
            .filter(model.tenant_id == tenant_id, model.operation_number == candidate)
            .first()
        )
        if taken is None:
            return candidate

    raise ConflictError("Could not allocate a unique operation number")

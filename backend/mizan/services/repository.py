"""
Tenant-scoped repository.

The one place services touch the session for tenant-owned rows. Each
instance is bound to a model and a tenant id at construction; every
query it builds starts from `tenant_id = <value>`.

A row that exists under another tenant is reported exactly like a
missing row (None / False), never as an error.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..validation import ConflictError
from .tenant_service import require_tenant_id, scoped_query


class TenantRepository:
    """get / list / add / update / delete for one tenant-owned model."""

    def __init__(self, model, tenant_id: str | None):
        self.model = model
        self.tenant_id = require_tenant_id(tenant_id)

    def query(self):
        return scoped_query(self.model, self.tenant_id)

    def get(self, entity_id: str):
        if not entity_id:
            return None
        return self.query().filter(self.model.id == entity_id).first()

    def list(self, *order_by, limit: int | None = None, offset: int | None = None) -> list:
        q = self.query()
        if order_by:
            q = q.order_by(*order_by)
        if offset:
            q = q.offset(offset)
        if limit is not None:
            q = q.limit(limit)
        return q.all()

    def count(self, *criteria) -> int:
        return self.query().filter(*criteria).count()

    def add(self, **values):
        """Insert a row for this tenant. tenant_id in values is ignored."""
        values.pop("tenant_id", None)
        obj = self.model(tenant_id=self.tenant_id, **values)
        db.session.add(obj)
        self.commit()
        return obj

    def update(self, entity_id: str, patch: dict[str, Any]):
        """Apply patch; None if the id is absent for this tenant."""
        obj = self.get(entity_id)
        if obj is None:
            return None
        for k, v in patch.items():
            if k in ("id", "tenant_id"):
                continue
            setattr(obj, k, v)
        self.commit()
        return obj

    def delete(self, entity_id: str) -> bool:
        """Hard delete; False if the id is absent for this tenant."""
        obj = self.get(entity_id)
        if obj is None:
            return False
        db.session.delete(obj)
        self.commit()
        return True

    @staticmethod
    def commit() -> None:
        """Commit, surfacing constraint violations as ConflictError."""
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ConflictError("Conflicts with an existing record") from e


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None or limit < 1:
        return default
    return min(limit, maximum)


def paginate(query, *, page: int, per_page: int | None, default_per_page: int, max_per_page: int) -> dict:
    """
    Run query for one page and return the list envelope with pagination metadata.
    """
    per_page = clamp_limit(per_page, default_per_page, max_per_page)
    page = max(page, 1)

    total = query.order_by(None).count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    rows = query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [r.to_dict() for r in rows],
        "count": len(rows),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }

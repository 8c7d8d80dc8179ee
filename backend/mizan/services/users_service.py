"""
User management within a tenant.

Users are never physically deleted: DELETE deactivates. Username is unique
across all tenants, email too when present (both enforced here and by
unique constraints).

Only super_admin may create, promote to, modify or deactivate a
super_admin. Nobody may deactivate their own account.
"""
from __future__ import annotations

from ..extensions import db
from ..models import User
from ..validation import ConflictError
from .auth_service import hash_password
from .permission_service import AuthContext, PermissionDeniedError, require_role_assignable
from .repository import TenantRepository
from .session_service import revoke_all_user_sessions

USER_MUTABLE_FIELDS = {
    "username",
    "email",
    "first_name",
    "last_name",
    "role",
    "is_active",
    "profile_image_url",
}


def _repo(tenant_id: str) -> TenantRepository:
    return TenantRepository(User, tenant_id)


def _ensure_unique(username: str | None, email: str | None, exclude_id: str | None = None) -> None:
    if username is not None:
        q = db.session.query(User.id).filter(User.username == username)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise ConflictError("Username already exists")

    if email is not None:
        q = db.session.query(User.id).filter(User.email == email)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise ConflictError("Email already exists")


def list_users(tenant_id: str, *, active: bool | None = None) -> dict:
    query = _repo(tenant_id).query()
    if active is not None:
        query = query.filter(User.is_active.is_(active))
    users = query.order_by(User.username.asc()).all()
    return {"items": [u.to_dict() for u in users], "count": len(users)}


def get_user(*, user_id: str, tenant_id: str) -> dict | None:
    u = _repo(tenant_id).get(user_id)
    return u.to_dict() if u else None


def create_user(
    *,
    tenant_id: str,
    patch: dict,
    password: str,
    actor: AuthContext | None = None,
) -> dict:
    """
    Create a user in tenant_id from a validated patch.

    actor is None for system callers (CLI onboarding).

    Raises:
        PermissionDeniedError: non super_admin creating a super_admin
        ConflictError: username or email taken
    """
    values = {k: v for k, v in patch.items() if k in USER_MUTABLE_FIELDS}
    if actor is not None:
        require_role_assignable(actor, values.get("role"))

    _ensure_unique(values.get("username"), values.get("email"))

    u = _repo(tenant_id).add(password_hash=hash_password(password), **values)
    return u.to_dict()


def update_user(
    *,
    user_id: str,
    patch: dict,
    actor: AuthContext,
    password: str | None = None,
) -> dict | None:
    """
    Update a user of the actor's tenant. Returns None if not found there.

    Deactivation, role changes and password changes revoke the user's sessions.
    """
    repo = _repo(actor.tenant_id)
    u = repo.get(user_id)
    if u is None:
        return None

    values = {k: v for k, v in patch.items() if k in USER_MUTABLE_FIELDS}
    require_role_assignable(actor, values.get("role"), u.role)

    if values.get("is_active") is False and u.id == actor.user_id:
        raise PermissionDeniedError("You cannot deactivate your own account")

    _ensure_unique(
        values.get("username") if values.get("username") != u.username else None,
        values.get("email") if values.get("email") != u.email else None,
        exclude_id=u.id,
    )

    revoke = (
        values.get("is_active") is False
        or ("role" in values and values["role"] != u.role)
        or password is not None
    )

    if password is not None:
        values["password_hash"] = hash_password(password)

    u = repo.update(user_id, values)
    if revoke:
        revoke_all_user_sessions(u.id, reason="Account changed")
    return u.to_dict()


def deactivate_user(*, user_id: str, actor: AuthContext) -> dict | None:
    """Soft delete. Returns None if not found in the actor's tenant."""
    return update_user(user_id=user_id, patch={"is_active": False}, actor=actor)

# Overview: Service-layer access control gate; role -> permission checks and security event logging.

"""
Permission Checking and Security Event Logging with Multi-Tenant Support

The role table is fixed (see mizan.permissions.roles). This module never
authenticates anyone: it consumes an already resolved AuthContext
(user_id, role, tenant_id) and answers allow/deny.

DESIGN PRINCIPLES:
- Fail closed: unknown roles, entities, operations and codes are denied
- Log denials only: grants are not logged
- Tenant isolation: security events carry tenant_id
"""

from __future__ import annotations

from dataclasses import dataclass

from ..extensions import db
from ..models import SecurityEvent
from ..permissions import (
    SUPER_ADMIN,
    get_operation_permission,
    get_role_permissions,
)
from mizan.time_utils import utcnow


class PermissionDeniedError(Exception):
    """Raised when the acting role lacks a required permission."""

    def __init__(self, message: str, permission_code: str | None = None):
        super().__init__(message)
        self.permission_code = permission_code


@dataclass(frozen=True)
class AuthContext:
    """
    The resolved identity every service call receives explicitly.

    tenant_id is fixed at login and never taken from client input.
    """
    user_id: str
    role: str
    tenant_id: str


def log_security_event(
    user_id: str | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    tenant_id: str | None = None,
) -> SecurityEvent:
    """
    Log security event to audit trail with tenant context.

    event_type examples:
    - PERMISSION_DENIED
    - LOGIN_FAILED
    - LOGIN_BLOCKED
    - LOGOUT
    """
    event = SecurityEvent(
        user_id=user_id,
        tenant_id=tenant_id,
        event_type=event_type,
        resource=resource,
        action=action,
        success=success,
        reason=reason,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
        occurred_at=utcnow(),
    )

    db.session.add(event)
    db.session.commit()

    return event


def role_has_permission(role: str | None, permission_code: str) -> bool:
    """True if the role grants permission_code. Unknown roles grant nothing."""
    return permission_code in get_role_permissions(role)


def is_operation_allowed(role: str | None, entity: str, operation: str) -> bool:
    """
    Gate check for (role, entity, operation).

    entity: dashboard | revenue | expense | product | user | notification
    operation: read | create | update | delete | mark_read
    """
    code = get_operation_permission(entity, operation)
    if code is None:
        return False
    return role_has_permission(role, code)


def require_permission(
    ctx: AuthContext,
    permission_code: str,
    resource: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """
    Require the acting role to hold permission_code, raise PermissionDeniedError if not.

    Denials are written to security_events with the caller's tenant.

    Usage:
        require_permission(ctx, "MANAGE_REVENUES", resource="/api/revenues")
    """
    if role_has_permission(ctx.role, permission_code):
        return

    log_security_event(
        user_id=ctx.user_id,
        event_type="PERMISSION_DENIED",
        success=False,
        resource=resource,
        action=permission_code,
        reason=f"Role {ctx.role} lacks {permission_code}",
        ip_address=ip_address,
        user_agent=user_agent,
        tenant_id=ctx.tenant_id,
    )
    raise PermissionDeniedError(f"Permission denied: {permission_code}", permission_code)


def require_role_assignable(ctx: AuthContext, target_role: str | None, current_role: str | None = None) -> None:
    """
    Only super_admin may create, promote to, modify or deactivate a super_admin.

    target_role: role being assigned (None when unchanged)
    current_role: the target user's present role (None on create)
    """
    touches_super_admin = SUPER_ADMIN in (target_role, current_role)
    if touches_super_admin and ctx.role != SUPER_ADMIN:
        raise PermissionDeniedError("Only super_admin may manage super_admin accounts")

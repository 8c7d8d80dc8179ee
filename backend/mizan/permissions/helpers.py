# Overview: Lookups over the permission and role tables.

from .definitions import PERMISSION_DEFINITIONS, OPERATION_PERMISSIONS
from .roles import DEFAULT_ROLE_PERMISSIONS


def get_all_permission_codes() -> list[str]:
    """Get list of all permission codes."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def get_permission_definition(code: str) -> dict | None:
    """Get full definition for a permission code."""
    for perm in PERMISSION_DEFINITIONS:
        if perm[0] == code:
            return {
                "code": perm[0],
                "name": perm[1],
                "description": perm[2],
                "category": perm[3],
            }
    return None


def get_role_permissions(role: str | None) -> frozenset[str]:
    """Permission codes granted to a role; empty for unknown roles."""
    return frozenset(DEFAULT_ROLE_PERMISSIONS.get(role or "", ()))


def get_operation_permission(entity: str, operation: str) -> str | None:
    """Permission code guarding (entity, operation), or None if the pair is not defined."""
    return OPERATION_PERMISSIONS.get((entity, operation))

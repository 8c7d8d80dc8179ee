# Overview: Permission system package.
# Re-exports the role set, permission codes and lookup helpers.

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    OPERATION_PERMISSIONS,
    DASHBOARD_PERMISSIONS,
    REVENUE_PERMISSIONS,
    EXPENSE_PERMISSIONS,
    INVENTORY_PERMISSIONS,
    USER_PERMISSIONS,
    NOTIFICATION_PERMISSIONS,
)
from .roles import (
    SUPER_ADMIN,
    OWNER,
    MANAGER,
    ACCOUNTANT,
    WAREHOUSE_KEEPER,
    VIEWER,
    USER_ROLES,
    DEFAULT_ROLE_PERMISSIONS,
)
from .helpers import (
    get_all_permission_codes,
    get_permission_definition,
    get_role_permissions,
    get_operation_permission,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "OPERATION_PERMISSIONS",
    "DASHBOARD_PERMISSIONS",
    "REVENUE_PERMISSIONS",
    "EXPENSE_PERMISSIONS",
    "INVENTORY_PERMISSIONS",
    "USER_PERMISSIONS",
    "NOTIFICATION_PERMISSIONS",
    "SUPER_ADMIN",
    "OWNER",
    "MANAGER",
    "ACCOUNTANT",
    "WAREHOUSE_KEEPER",
    "VIEWER",
    "USER_ROLES",
    "DEFAULT_ROLE_PERMISSIONS",
    "get_all_permission_codes",
    "get_permission_definition",
    "get_role_permissions",
    "get_operation_permission",
]

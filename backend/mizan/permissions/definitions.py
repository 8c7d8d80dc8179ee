# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- DASHBOARD --

DASHBOARD_PERMISSIONS = [
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View dashboard statistics, charts and reports",
        PermissionCategory.DASHBOARD,
    ),
]


# -- REVENUES --

REVENUE_PERMISSIONS = [
    (
        "VIEW_REVENUES",
        "View Revenues",
        "List and read revenue transactions",
        PermissionCategory.REVENUES,
    ),
    (
        "MANAGE_REVENUES",
        "Manage Revenues",
        "Create, edit and delete revenue transactions",
        PermissionCategory.REVENUES,
    ),
]


# -- EXPENSES --

EXPENSE_PERMISSIONS = [
    (
        "VIEW_EXPENSES",
        "View Expenses",
        "List and read expense transactions",
        PermissionCategory.EXPENSES,
    ),
    (
        "MANAGE_EXPENSES",
        "Manage Expenses",
        "Create, edit and delete expense transactions",
        PermissionCategory.EXPENSES,
    ),
]


# -- INVENTORY --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_PRODUCTS",
        "View Products",
        "List products, stock levels and low-stock alerts",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Create and edit products and stock quantities",
        PermissionCategory.INVENTORY,
    ),
    (
        "DELETE_PRODUCTS",
        "Delete Products",
        "Permanently delete products",
        PermissionCategory.INVENTORY,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "VIEW_USERS",
        "View Users",
        "List users of the organization",
        PermissionCategory.USERS,
    ),
    (
        "MANAGE_USERS",
        "Manage Users",
        "Create, edit and deactivate users",
        PermissionCategory.USERS,
    ),
]


# -- NOTIFICATIONS --

NOTIFICATION_PERMISSIONS = [
    (
        "VIEW_NOTIFICATIONS",
        "View Notifications",
        "List notifications and unread counts",
        PermissionCategory.NOTIFICATIONS,
    ),
    (
        "CREATE_NOTIFICATIONS",
        "Create Notifications",
        "Post notifications to the organization",
        PermissionCategory.NOTIFICATIONS,
    ),
    (
        "MARK_NOTIFICATIONS_READ",
        "Mark Notifications Read",
        "Mark a notification as read",
        PermissionCategory.NOTIFICATIONS,
    ),
]


PERMISSION_DEFINITIONS = (
    DASHBOARD_PERMISSIONS
    + REVENUE_PERMISSIONS
    + EXPENSE_PERMISSIONS
    + INVENTORY_PERMISSIONS
    + USER_PERMISSIONS
    + NOTIFICATION_PERMISSIONS
)


# (entity, operation) -> permission code. Anything not listed is denied.
OPERATION_PERMISSIONS = {
    ("dashboard", "read"): "VIEW_DASHBOARD",
    ("revenue", "read"): "VIEW_REVENUES",
    ("revenue", "create"): "MANAGE_REVENUES",
    ("revenue", "update"): "MANAGE_REVENUES",
    ("revenue", "delete"): "MANAGE_REVENUES",
    ("expense", "read"): "VIEW_EXPENSES",
    ("expense", "create"): "MANAGE_EXPENSES",
    ("expense", "update"): "MANAGE_EXPENSES",
    ("expense", "delete"): "MANAGE_EXPENSES",
    ("product", "read"): "VIEW_PRODUCTS",
    ("product", "create"): "MANAGE_PRODUCTS",
    ("product", "update"): "MANAGE_PRODUCTS",
    ("product", "delete"): "DELETE_PRODUCTS",
    ("user", "read"): "VIEW_USERS",
    ("user", "create"): "MANAGE_USERS",
    ("user", "update"): "MANAGE_USERS",
    ("user", "delete"): "MANAGE_USERS",
    ("notification", "read"): "VIEW_NOTIFICATIONS",
    ("notification", "create"): "CREATE_NOTIFICATIONS",
    ("notification", "mark_read"): "MARK_NOTIFICATIONS_READ",
}

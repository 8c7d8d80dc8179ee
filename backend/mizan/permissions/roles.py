# Overview: The closed role set and the permissions each role is granted.


SUPER_ADMIN = "super_admin"
OWNER = "owner"
MANAGER = "manager"
ACCOUNTANT = "accountant"
WAREHOUSE_KEEPER = "warehouse_keeper"
VIEWER = "viewer"

USER_ROLES = (SUPER_ADMIN, OWNER, MANAGER, ACCOUNTANT, WAREHOUSE_KEEPER, VIEWER)

# Granted to every authenticated role.
READ_PERMISSIONS = {
    "VIEW_DASHBOARD",
    "VIEW_REVENUES",
    "VIEW_EXPENSES",
    "VIEW_PRODUCTS",
    "VIEW_USERS",
    "VIEW_NOTIFICATIONS",
    "MARK_NOTIFICATIONS_READ",
}

DEFAULT_ROLE_PERMISSIONS = {
    SUPER_ADMIN: READ_PERMISSIONS | {
        "MANAGE_REVENUES",
        "MANAGE_EXPENSES",
        "MANAGE_PRODUCTS",
        "DELETE_PRODUCTS",
        "MANAGE_USERS",
        "CREATE_NOTIFICATIONS",
    },
    OWNER: READ_PERMISSIONS | {
        "MANAGE_REVENUES",
        "MANAGE_EXPENSES",
        "MANAGE_PRODUCTS",
        "DELETE_PRODUCTS",
        "MANAGE_USERS",
        "CREATE_NOTIFICATIONS",
    },
    MANAGER: READ_PERMISSIONS | {
        "MANAGE_REVENUES",
        "MANAGE_EXPENSES",
        "MANAGE_PRODUCTS",
        "DELETE_PRODUCTS",
        "CREATE_NOTIFICATIONS",
    },
    ACCOUNTANT: READ_PERMISSIONS | {
        "MANAGE_REVENUES",
        "MANAGE_EXPENSES",
    },
    # May create and update products but not delete them.
    WAREHOUSE_KEEPER: READ_PERMISSIONS | {
        "MANAGE_PRODUCTS",
    },
    VIEWER: set(READ_PERMISSIONS),
}

# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories, one per guarded entity type."""
    DASHBOARD = "DASHBOARD"
    REVENUES = "REVENUES"
    EXPENSES = "EXPENSES"
    INVENTORY = "INVENTORY"
    USERS = "USERS"
    NOTIFICATIONS = "NOTIFICATIONS"

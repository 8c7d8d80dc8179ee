# Overview: Pytest coverage for the role/permission gate and its HTTP enforcement.

import pytest

from mizan.models import SecurityEvent
from mizan.permissions import (
    USER_ROLES,
    PermissionCategory,
    get_all_permission_codes,
    get_permission_definition,
    get_role_permissions,
)
from mizan.services.permission_service import (
    AuthContext,
    PermissionDeniedError,
    is_operation_allowed,
    require_permission,
    require_role_assignable,
    role_has_permission,
)

ALL = set(USER_ROLES)
FINANCE_WRITERS = {"super_admin", "owner", "manager", "accountant"}

# (entity, operation) -> roles that may perform it
EXPECTED = {
    ("dashboard", "read"): ALL,
    ("revenue", "read"): ALL,
    ("revenue", "create"): FINANCE_WRITERS,
    ("revenue", "update"): FINANCE_WRITERS,
    ("revenue", "delete"): FINANCE_WRITERS,
    ("expense", "read"): ALL,
    ("expense", "create"): FINANCE_WRITERS,
    ("expense", "update"): FINANCE_WRITERS,
    ("expense", "delete"): FINANCE_WRITERS,
    ("product", "read"): ALL,
    ("product", "create"): {"super_admin", "owner", "manager", "warehouse_keeper"},
    ("product", "update"): {"super_admin", "owner", "manager", "warehouse_keeper"},
    ("product", "delete"): {"super_admin", "owner", "manager"},
    ("user", "read"): ALL,
    ("user", "create"): {"super_admin", "owner"},
    ("user", "update"): {"super_admin", "owner"},
    ("user", "delete"): {"super_admin", "owner"},
    ("notification", "read"): ALL,
    ("notification", "create"): {"super_admin", "owner", "manager"},
    ("notification", "mark_read"): ALL,
}


@pytest.mark.parametrize("entity,operation", sorted(EXPECTED))
@pytest.mark.parametrize("role", USER_ROLES)
def test_role_table(role, entity, operation):
    assert is_operation_allowed(role, entity, operation) == (role in EXPECTED[(entity, operation)])


class TestFailClosed:
    def test_unknown_role_denied(self):
        assert not is_operation_allowed("cashier", "revenue", "read")
        assert not is_operation_allowed(None, "revenue", "read")
        assert get_role_permissions("cashier") == frozenset()

    def test_unknown_entity_or_operation_denied(self):
        assert not is_operation_allowed("super_admin", "payroll", "read")
        assert not is_operation_allowed("super_admin", "revenue", "approve")

    def test_unknown_code_denied(self):
        assert not role_has_permission("super_admin", "LAUNCH_ROCKETS")

    def test_every_granted_code_is_defined(self):
        defined = set(get_all_permission_codes())
        for role in USER_ROLES:
            assert get_role_permissions(role) <= defined

    def test_definition_lookup(self):
        definition = get_permission_definition("DELETE_PRODUCTS")
        assert definition["category"] == PermissionCategory.INVENTORY
        assert get_permission_definition("NOPE") is None


class TestRequirePermission:
    def test_grant_is_silent(self, db_session):
        ctx = AuthContext(user_id=None, role="owner", tenant_id=None)
        require_permission(ctx, "MANAGE_USERS")
        assert db_session.query(SecurityEvent).count() == 0

    def test_denial_raises_and_is_logged(self, db_session, tenant_a, users_a):
        viewer = users_a["viewer"]
        ctx = AuthContext(user_id=viewer["id"], role="viewer", tenant_id=tenant_a.id)

        with pytest.raises(PermissionDeniedError) as exc_info:
            require_permission(ctx, "MANAGE_REVENUES", resource="/api/revenues")
        assert exc_info.value.permission_code == "MANAGE_REVENUES"

        event = db_session.query(SecurityEvent).filter_by(event_type="PERMISSION_DENIED").one()
        assert event.user_id == viewer["id"]
        assert event.tenant_id == tenant_a.id
        assert event.action == "MANAGE_REVENUES"
        assert event.success is False


class TestSuperAdminGuard:
    def test_owner_cannot_assign_super_admin(self):
        ctx = AuthContext(user_id="u1", role="owner", tenant_id="t1")
        with pytest.raises(PermissionDeniedError):
            require_role_assignable(ctx, "super_admin")

    def test_owner_cannot_touch_existing_super_admin(self):
        ctx = AuthContext(user_id="u1", role="owner", tenant_id="t1")
        with pytest.raises(PermissionDeniedError):
            require_role_assignable(ctx, None, "super_admin")

    def test_owner_can_assign_other_roles(self):
        ctx = AuthContext(user_id="u1", role="owner", tenant_id="t1")
        require_role_assignable(ctx, "manager", "viewer")

    def test_super_admin_can_assign_super_admin(self):
        ctx = AuthContext(user_id="u1", role="super_admin", tenant_id="t1")
        require_role_assignable(ctx, "super_admin")


class TestHttpEnforcement:
    def test_missing_token_is_401(self, client):
        resp = client.get("/api/revenues")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Authentication required"

    def test_bogus_token_is_401(self, client):
        resp = client.get("/api/revenues", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_viewer_cannot_create_revenue(self, client, users_a, auth_headers):
        resp = client.post("/api/revenues", json={}, headers=auth_headers("viewer_a"))
        assert resp.status_code == 403
        body = resp.get_json()
        assert body["error"] == "Permission denied"
        assert body["required_permission"] == "MANAGE_REVENUES"

    def test_warehouse_keeper_cannot_delete_product(self, client, users_a, auth_headers):
        resp = client.delete("/api/products/anything", headers=auth_headers("warehouse_keeper_a"))
        assert resp.status_code == 403
        assert resp.get_json()["required_permission"] == "DELETE_PRODUCTS"

    def test_accountant_cannot_manage_users(self, client, users_a, auth_headers):
        resp = client.post("/api/users", json={}, headers=auth_headers("accountant_a"))
        assert resp.status_code == 403

    def test_denial_is_logged_with_tenant(self, client, db_session, tenant_a, users_a, auth_headers):
        client.post("/api/notifications", json={}, headers=auth_headers("viewer_a"))
        event = db_session.query(SecurityEvent).filter_by(event_type="PERMISSION_DENIED").one()
        assert event.tenant_id == tenant_a.id
        assert event.resource == "/api/notifications"

    def test_every_role_can_read_dashboard(self, client, users_a, auth_headers):
        for role in USER_ROLES:
            resp = client.get("/api/dashboard/stats", headers=auth_headers(f"{role}_a"))
            assert resp.status_code == 200, role

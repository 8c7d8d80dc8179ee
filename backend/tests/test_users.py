# Overview: Pytest coverage for user management within a tenant.

import pytest

from mizan.models import SessionToken


@pytest.fixture
def owner_headers(users_a, auth_headers):
    return auth_headers("owner_a")


def _payload(**overrides):
    payload = {
        "username": "nadia",
        "email": "nadia@example.com",
        "password": "secret123",
        "role": "accountant",
        "first_name": "Nadia",
    }
    payload.update(overrides)
    return payload


class TestCreate:
    def test_owner_creates_user(self, client, tenant_a, owner_headers):
        resp = client.post("/api/users", json=_payload(), headers=owner_headers)
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["tenant_id"] == tenant_a.id
        assert body["role"] == "accountant"
        assert "password" not in body
        assert "password_hash" not in body

        login = client.post("/api/auth/login", json={"username": "nadia", "password": "secret123"})
        assert login.status_code == 200

    def test_password_required_and_checked(self, client, owner_headers):
        payload = _payload()
        del payload["password"]
        resp = client.post("/api/users", json=payload, headers=owner_headers)
        assert resp.status_code == 400
        assert {"field": "password", "message": "is required"} in resp.get_json()["errors"]

        resp = client.post("/api/users", json=_payload(password="123"), headers=owner_headers)
        assert resp.status_code == 400

    def test_field_errors_reported_together(self, client, owner_headers):
        resp = client.post(
            "/api/users",
            json=_payload(email="bad", password="1", role="janitor"),
            headers=owner_headers,
        )
        assert resp.status_code == 400
        fields = {e["field"] for e in resp.get_json()["errors"]}
        assert fields == {"email", "password", "role"}

    @pytest.mark.parametrize("email", [12345, True, ["a@b.co"]])
    def test_non_string_email_rejected(self, client, owner_headers, email):
        resp = client.post("/api/users", json=_payload(email=email), headers=owner_headers)
        assert resp.status_code == 400
        assert resp.get_json()["errors"] == [{"field": "email", "message": "must be a string"}]

    def test_non_string_email_rejected_on_update(self, client, users_a, owner_headers):
        viewer_id = users_a["viewer"]["id"]
        resp = client.put(f"/api/users/{viewer_id}", json={"email": 12345}, headers=owner_headers)
        assert resp.status_code == 400
        assert resp.get_json()["errors"] == [{"field": "email", "message": "must be a string"}]

    def test_username_unique_across_tenants(self, client, users_b, owner_headers):
        resp = client.post("/api/users", json=_payload(username="viewer_b", email=None), headers=owner_headers)
        assert resp.status_code == 409

    def test_email_unique(self, client, owner_headers):
        client.post("/api/users", json=_payload(), headers=owner_headers)
        resp = client.post("/api/users", json=_payload(username="other"), headers=owner_headers)
        assert resp.status_code == 409

    def test_owner_cannot_create_super_admin(self, client, owner_headers):
        resp = client.post("/api/users", json=_payload(role="super_admin"), headers=owner_headers)
        assert resp.status_code == 403

    def test_super_admin_can_create_super_admin(self, client, users_a, auth_headers):
        resp = client.post("/api/users", json=_payload(role="super_admin"), headers=auth_headers("super_admin_a"))
        assert resp.status_code == 201

    def test_manager_cannot_create(self, client, users_a, auth_headers):
        resp = client.post("/api/users", json=_payload(), headers=auth_headers("manager_a"))
        assert resp.status_code == 403


class TestUpdate:
    def test_update_profile(self, client, users_a, owner_headers):
        target = users_a["viewer"]["id"]
        resp = client.put(f"/api/users/{target}", json={"first_name": "Rami", "role": "manager"}, headers=owner_headers)
        assert resp.status_code == 200
        assert resp.get_json()["first_name"] == "Rami"
        assert resp.get_json()["role"] == "manager"

    def test_owner_cannot_modify_super_admin(self, client, users_a, owner_headers):
        target = users_a["super_admin"]["id"]
        resp = client.put(f"/api/users/{target}", json={"first_name": "X"}, headers=owner_headers)
        assert resp.status_code == 403

    def test_owner_cannot_promote_to_super_admin(self, client, users_a, owner_headers):
        target = users_a["viewer"]["id"]
        resp = client.put(f"/api/users/{target}", json={"role": "super_admin"}, headers=owner_headers)
        assert resp.status_code == 403

    def test_password_change_revokes_sessions(self, client, users_a, owner_headers, auth_headers):
        viewer_headers = auth_headers("viewer_a")
        target = users_a["viewer"]["id"]

        resp = client.put(f"/api/users/{target}", json={"password": "brandnew1"}, headers=owner_headers)
        assert resp.status_code == 200

        assert client.get("/api/auth/user", headers=viewer_headers).status_code == 401
        login = client.post("/api/auth/login", json={"username": "viewer_a", "password": "brandnew1"})
        assert login.status_code == 200

    def test_unknown_user_is_404(self, client, owner_headers):
        resp = client.put("/api/users/nope", json={"first_name": "X"}, headers=owner_headers)
        assert resp.status_code == 404


class TestDeactivate:
    def test_deactivate_revokes_sessions(self, client, db_session, users_a, owner_headers, auth_headers):
        viewer_headers = auth_headers("viewer_a")
        target = users_a["viewer"]["id"]

        resp = client.delete(f"/api/users/{target}", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.get_json()["is_active"] is False

        assert client.get("/api/auth/user", headers=viewer_headers).status_code == 401
        assert db_session.query(SessionToken).filter_by(user_id=target, is_revoked=False).count() == 0

        login = client.post("/api/auth/login", json={"username": "viewer_a", "password": "secret123"})
        assert login.status_code == 401

    def test_cannot_deactivate_self(self, client, users_a, owner_headers):
        resp = client.delete(f"/api/users/{users_a['owner']['id']}", headers=owner_headers)
        assert resp.status_code == 403

        resp = client.put(f"/api/users/{users_a['owner']['id']}", json={"is_active": False}, headers=owner_headers)
        assert resp.status_code == 403

    def test_active_filter(self, client, users_a, owner_headers):
        client.delete(f"/api/users/{users_a['viewer']['id']}", headers=owner_headers)

        everyone = client.get("/api/users", headers=owner_headers).get_json()
        active = client.get("/api/users?active=true", headers=owner_headers).get_json()
        inactive = client.get("/api/users?active=false", headers=owner_headers).get_json()

        assert everyone["count"] == 6
        assert active["count"] == 5
        assert [u["username"] for u in inactive["items"]] == ["viewer_a"]

# Overview: Pytest coverage for login, logout and session validation.

from datetime import timedelta

from conftest import PASSWORD, make_tenant, make_user
from mizan.extensions import db
from mizan.models import SecurityEvent, SessionToken, Tenant
from mizan.services.session_service import hash_token
from mizan.time_utils import utcnow


def _login(client, username, password=PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


class TestLogin:
    def test_success(self, client, tenant_a, users_a):
        resp = _login(client, "accountant_a")
        assert resp.status_code == 200
        body = resp.get_json()
        assert len(body["token"]) == 64
        assert body["user"]["username"] == "accountant_a"
        assert body["tenant"]["id"] == tenant_a.id
        assert "MANAGE_REVENUES" in body["permissions"]
        assert "MANAGE_USERS" not in body["permissions"]

    def test_token_stored_hashed(self, client, db_session, users_a):
        token = _login(client, "owner_a").get_json()["token"]
        session = db_session.query(SessionToken).one()
        assert session.token_hash == hash_token(token)
        assert session.token_hash != token

    def test_last_login_recorded(self, client, users_a):
        body = _login(client, "owner_a").get_json()
        assert body["user"]["last_login_at"] is not None

    def test_wrong_password_is_401_and_logged(self, client, db_session, users_a):
        resp = _login(client, "owner_a", "wrong-password")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid credentials"

        event = db_session.query(SecurityEvent).filter_by(event_type="LOGIN_FAILED").one()
        assert event.user_id == users_a["owner"]["id"]

    def test_unknown_user_is_401(self, client, db_session):
        assert _login(client, "ghost").status_code == 401

    def test_missing_fields_is_400(self, client, db_session):
        assert client.post("/api/auth/login", json={"username": "x"}).status_code == 400
        assert client.post("/api/auth/login", data="not json").status_code == 400

    def test_inactive_tenant_is_403(self, client, db_session):
        tenant = make_tenant("Suspended", is_active=False)
        make_user(tenant.id, "suspended_owner", "owner")

        resp = _login(client, "suspended_owner")
        assert resp.status_code == 403
        assert resp.get_json()["reason"] == "tenant_inactive"
        assert db_session.query(SecurityEvent).filter_by(event_type="LOGIN_BLOCKED").count() == 1

    def test_expired_subscription_is_403(self, client, db_session):
        tenant = make_tenant("Lapsed", days=-1)
        make_user(tenant.id, "lapsed_owner", "owner")

        resp = _login(client, "lapsed_owner")
        assert resp.status_code == 403
        assert resp.get_json()["reason"] == "subscription_expired"

    def test_expired_subscription_wrong_password_is_401(self, client, db_session):
        tenant = make_tenant("Lapsed", days=-1)
        make_user(tenant.id, "lapsed_owner", "owner")

        assert _login(client, "lapsed_owner", "nope").status_code == 401


class TestSession:
    def test_current_user(self, client, tenant_a, users_a, auth_headers):
        body = client.get("/api/auth/user", headers=auth_headers("viewer_a")).get_json()
        assert body["user"]["role"] == "viewer"
        assert body["tenant"]["id"] == tenant_a.id
        assert "MANAGE_REVENUES" not in body["permissions"]
        assert "MARK_NOTIFICATIONS_READ" in body["permissions"]

    def test_logout_revokes_token(self, client, users_a, auth_headers):
        headers = auth_headers("owner_a")
        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/user", headers=headers).status_code == 401
        assert client.post("/api/auth/logout", headers=headers).status_code == 401

    def test_logout_without_token_is_401(self, client, db_session):
        assert client.post("/api/auth/logout").status_code == 401

    def test_tenant_suspension_ends_sessions(self, client, tenant_a, users_a, auth_headers):
        headers = auth_headers("owner_a")
        tenant = db.session.get(Tenant, tenant_a.id)
        tenant.is_active = False
        db.session.commit()

        assert client.get("/api/auth/user", headers=headers).status_code == 401

    def test_expired_session_rejected(self, client, db_session, users_a, auth_headers):
        headers = auth_headers("owner_a")
        session = db_session.query(SessionToken).one()
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert client.get("/api/auth/user", headers=headers).status_code == 401

    def test_idle_session_rejected(self, app, client, db_session, users_a, auth_headers):
        headers = auth_headers("owner_a")
        session = db_session.query(SessionToken).one()
        idle = app.config["SESSION_IDLE_TIMEOUT_HOURS"]
        session.last_used_at = utcnow() - timedelta(hours=idle, minutes=1)
        db_session.commit()

        assert client.get("/api/auth/user", headers=headers).status_code == 401
        db_session.refresh(session)
        assert session.is_revoked is True
        assert session.revoked_reason == "Idle timeout"

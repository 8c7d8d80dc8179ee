# Overview: Bearer session lifecycle; issue, resolve and revoke tokens bound to a tenant.

"""
Sessions

The client holds a random 64-hex-char token; the database holds only its
SHA-256 digest. Each session row records the tenant the user belonged to
at login, and every authenticated request runs under that tenant.

A session stops working when it passes its absolute lifetime, sits idle
longer than the idle window, is revoked, or when its user or tenant is
deactivated. Both windows come from app config.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, User
from mizan.time_utils import utcnow
from .permission_service import AuthContext


@dataclass
class SessionContext:
    """What require_auth puts on flask.g for a valid token."""
    user: User
    session: SessionToken
    tenant_id: str

    @property
    def auth(self) -> AuthContext:
        return AuthContext(user_id=self.user.id, role=self.user.role, tenant_id=self.tenant_id)


def _hours(key: str, default: int) -> timedelta:
    return timedelta(hours=current_app.config.get(key, default))


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """Plain SHA-256 is enough for 256-bit random tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _live(token: str) -> SessionToken | None:
    return (
        db.session.query(SessionToken)
        .filter(SessionToken.token_hash == hash_token(token), SessionToken.is_revoked.is_(False))
        .first()
    )


def _mark_revoked(row: SessionToken, reason: str) -> None:
    row.is_revoked = True
    row.revoked_at = utcnow()
    row.revoked_reason = reason


def create_session(
    user: User,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[SessionToken, str]:
    """Open a session for user under user.tenant_id. Returns (row, plaintext token)."""
    token = generate_token()
    issued = utcnow()

    row = SessionToken(
        user_id=user.id,
        tenant_id=user.tenant_id,
        token_hash=hash_token(token),
        created_at=issued,
        last_used_at=issued,
        expires_at=issued + _hours("SESSION_ABSOLUTE_TIMEOUT_HOURS", 24),
        is_revoked=False,
        user_agent=(user_agent or "")[:512] or None,
        ip_address=ip_address,
    )
    db.session.add(row)
    db.session.commit()
    return row, token


def validate_session(token: str) -> SessionContext | None:
    """
    Resolve a token to its SessionContext and touch last_used_at.

    None for unknown, revoked or expired tokens. Idle sessions and sessions
    whose user or tenant is no longer active are revoked on the way out.
    """
    row = _live(token)
    if row is None:
        return None

    now = utcnow()
    if now > row.expires_at:
        return None

    reason = None
    if now - row.last_used_at > _hours("SESSION_IDLE_TIMEOUT_HOURS", 2):
        reason = "Idle timeout"
    elif row.user is None or not row.user.is_active:
        reason = "User account deactivated"
    elif row.tenant is None or not row.tenant.is_active:
        reason = "Tenant deactivated"

    if reason:
        _mark_revoked(row, reason)
        db.session.commit()
        return None

    row.last_used_at = now
    db.session.commit()
    return SessionContext(user=row.user, session=row, tenant_id=row.tenant_id)


def revoke_session(token: str, reason: str = "User logout") -> bool:
    """False when the token is unknown or already revoked."""
    row = _live(token)
    if row is None:
        return False
    _mark_revoked(row, reason)
    db.session.commit()
    return True


def revoke_all_user_sessions(user_id: str, reason: str = "Revoke all sessions") -> int:
    """Revoke every live session of a user. Returns how many were open."""
    rows = (
        db.session.query(SessionToken)
        .filter(SessionToken.user_id == user_id, SessionToken.is_revoked.is_(False))
        .all()
    )
    for row in rows:
        _mark_revoked(row, reason)
    db.session.commit()
    return len(rows)

# Overview: Service-layer operations for auth; password hashing and credential checks.

"""
Authentication Service

Passwords are hashed with bcrypt (cost from BCRYPT_ROUNDS). Usernames are
globally unique, so a login resolves the tenant from the username alone.

The tenant subscription check happens here too: a correct password for a
tenant that is inactive or past its subscription is reported separately so
the route can answer 403 instead of 401.
"""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from mizan.time_utils import utcnow


# Outcomes of authenticate()
LOGIN_OK = "ok"
LOGIN_INVALID = "invalid_credentials"
LOGIN_TENANT_INACTIVE = "tenant_inactive"
LOGIN_SUBSCRIPTION_EXPIRED = "subscription_expired"


@dataclass
class LoginResult:
    outcome: str
    user: User | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == LOGIN_OK


def hash_password(password: str) -> str:
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt comparison; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def authenticate(username: str, password: str) -> LoginResult:
    """
    Check credentials for an active user.

    Updates last_login_at on success.
    """
    user = db.session.query(User).filter(
        User.username == username,
        User.is_active.is_(True),
    ).first()

    if not user or not verify_password(password, user.password_hash):
        return LoginResult(LOGIN_INVALID, user)

    tenant = user.tenant
    if not tenant or not tenant.is_active:
        return LoginResult(LOGIN_TENANT_INACTIVE, user)
    if tenant.subscription_expires_at < utcnow():
        return LoginResult(LOGIN_SUBSCRIPTION_EXPIRED, user)

    user.last_login_at = utcnow()
    db.session.commit()
    return LoginResult(LOGIN_OK, user)

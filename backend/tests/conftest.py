"""
Pytest fixtures for Mizan backend tests.

Provides an in-memory database, two tenants with one user per role each,
and a login helper that returns bearer headers for the test client.
"""

from datetime import datetime, timedelta
from itertools import count

import pytest

from mizan import create_app
from mizan.extensions import db
from mizan.models import Expense, Revenue
from mizan.permissions import USER_ROLES
from mizan.services import tenant_service, users_service
from mizan.services.permission_service import AuthContext
from mizan.time_utils import utcnow

PASSWORD = "secret123"

_seq = count(1)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Fresh data for each test; the schema is kept."""
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    return app.test_client()


def make_tenant(name, days=365, is_active=True):
    return tenant_service.create_tenant(
        name=name,
        subscription_expires_at=utcnow() + timedelta(days=days),
        is_active=is_active,
    )


def make_user(tenant_id, username, role, password=PASSWORD, **extra):
    return users_service.create_user(
        tenant_id=tenant_id,
        patch={"username": username, "role": role, **extra},
        password=password,
    )


@pytest.fixture(scope='function')
def tenant_a(db_session):
    """First tenant."""
    return make_tenant("Tenant A - Al Noor Trading")


@pytest.fixture(scope='function')
def tenant_b(db_session):
    """Second tenant."""
    return make_tenant("Tenant B - Barada Supplies")


@pytest.fixture(scope='function')
def users_a(tenant_a):
    """role -> user dict in tenant A; usernames are <role>_a."""
    return {role: make_user(tenant_a.id, f"{role}_a", role) for role in USER_ROLES}


@pytest.fixture(scope='function')
def users_b(tenant_b):
    """role -> user dict in tenant B; usernames are <role>_b."""
    return {role: make_user(tenant_b.id, f"{role}_b", role) for role in USER_ROLES}


@pytest.fixture(scope='function')
def ctx_a(users_a):
    """AuthContext for tenant A's owner."""
    owner = users_a["owner"]
    return AuthContext(user_id=owner["id"], role="owner", tenant_id=owner["tenant_id"])


@pytest.fixture(scope='function')
def ctx_b(users_b):
    owner = users_b["owner"]
    return AuthContext(user_id=owner["id"], role="owner", tenant_id=owner["tenant_id"])


@pytest.fixture(scope='function')
def auth_headers(client):
    """
    auth_headers("owner_a") -> {"Authorization": "Bearer <token>"}

    Logs in through the API once per username per test.
    """
    tokens = {}

    def _headers(username, password=PASSWORD):
        if username not in tokens:
            resp = client.post("/api/auth/login", json={"username": username, "password": password})
            assert resp.status_code == 200, resp.get_json()
            tokens[username] = resp.get_json()["token"]
        return {"Authorization": f"Bearer {tokens[username]}"}

    return _headers


def add_revenue(ctx, cents, currency="USD", created_at=None, quantity=1):
    """Insert a revenue row directly, with a chosen created_at."""
    row = Revenue(
        tenant_id=ctx.tenant_id,
        operation_number=f"REV{next(_seq):08d}TEST",
        transaction_type="sale",
        product_service="Item",
        quantity=quantity,
        unit_price_cents=cents,
        total_amount_cents=cents * quantity,
        currency=currency,
        payment_method="cash",
        created_by=ctx.user_id,
        created_at=created_at or datetime(2026, 6, 1, 12, 0),
    )
    db.session.add(row)
    db.session.commit()
    return row


def add_expense(ctx, cents, currency="USD", created_at=None):
    row = Expense(
        tenant_id=ctx.tenant_id,
        operation_number=f"EXP{next(_seq):08d}TEST",
        expense_type="rent",
        description="Rent",
        amount_cents=cents,
        currency=currency,
        payment_method="cash",
        created_by=ctx.user_id,
        created_at=created_at or datetime(2026, 6, 1, 12, 0),
    )
    db.session.add(row)
    db.session.commit()
    return row

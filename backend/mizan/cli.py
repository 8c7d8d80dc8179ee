# Overview: Flask CLI command groups for bootstrap, onboarding, and notification scans.

# backend/mizan/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create any missing tables (use `flask db upgrade` for migrated deployments).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed-demo [--password demo123]
#   Demo tenant with one user per role plus sample products and transactions.
#
# Tenant onboarding:
# - python -m flask tenants list
# - python -m flask tenants create --name "Acme Trading" --days 365
#
# Users:
# - python -m flask users list [--tenant-id <uuid>]
# - python -m flask users create --tenant-id <uuid> --username owner --password secret1 --role owner
#
# System notifications:
# - python -m flask notifications scan-low-stock
# - python -m flask notifications scan-subscriptions --days 7

import click
from datetime import timedelta
from flask.cli import with_appcontext

from .extensions import db
from .models import Tenant, User, Product, Revenue, Expense
from .permissions import USER_ROLES
from .services import notifications_service, tenant_service, users_service
from .services.document_service import EXPENSE_PREFIX, REVENUE_PREFIX, next_operation_number
from .validation import ConflictError, validate_email, validate_password
from .time_utils import utcnow


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed-demo' for sample data.")


DEMO_PRODUCTS = [
    # name, category, unit, qty, min, purchase, sale
    ("Olive Oil 1L", "Food", "bottle", 40, 10, 52000, 65000),
    ("Rice 5kg", "Food", "bag", 4, 8, 90000, 115000),
    ("Printer Paper A4", "Office", "box", 12, 12, 30000, 42000),
]


@system_group.command('seed-demo')
@click.option('--tenant-name', default='Demo Business', help='Tenant name')
@click.option('--password', default='demo123', help='Password for every demo user')
@with_appcontext
def seed_demo(tenant_name, password):
    """
    Demo tenant with one user per role (<role>_demo), products and transactions.

    Idempotent: does nothing if a tenant with the same name exists.
    """
    if db.session.query(Tenant).filter_by(name=tenant_name).first():
        click.echo(f"SKIP Tenant '{tenant_name}' already exists")
        return

    tenant = tenant_service.create_tenant(
        name=tenant_name,
        subscription_expires_at=utcnow() + timedelta(days=365),
    )
    click.echo(f"PASS Created tenant: {tenant.name} ({tenant.id})")

    owner_id = None
    for role in USER_ROLES:
        user = users_service.create_user(
            tenant_id=tenant.id,
            patch={"username": f"{role}_demo", "role": role, "first_name": role.replace("_", " ").title()},
            password=password,
        )
        if role == "owner":
            owner_id = user["id"]
        click.echo(f"PASS Created user: {role}_demo ({role})")

    for name, category, unit, qty, min_level, purchase, sale in DEMO_PRODUCTS:
        db.session.add(Product(
            tenant_id=tenant.id,
            name=name,
            category=category,
            unit=unit,
            quantity=qty,
            min_stock_level=min_level,
            purchase_price_cents=purchase,
            sale_price_cents=sale,
        ))

    now = utcnow()
    for i, (currency, qty, price) in enumerate([("SYP", 2, 65000), ("USD", 1, 2500), ("TRY", 3, 15000)]):
        db.session.add(Revenue(
            tenant_id=tenant.id,
            operation_number=next_operation_number(model=Revenue, tenant_id=tenant.id, prefix=REVENUE_PREFIX),
            transaction_type="sale",
            product_service=DEMO_PRODUCTS[i][0],
            quantity=qty,
            unit_price_cents=price,
            total_amount_cents=qty * price,
            currency=currency,
            payment_method="cash",
            created_by=owner_id,
            created_at=now - timedelta(days=30 * i),
        ))
        db.session.flush()

    db.session.add(Expense(
        tenant_id=tenant.id,
        operation_number=next_operation_number(model=Expense, tenant_id=tenant.id, prefix=EXPENSE_PREFIX),
        expense_type="rent",
        description="Shop rent",
        amount_cents=50000,
        currency="USD",
        payment_method="transfer",
        created_by=owner_id,
    ))
    db.session.commit()

    click.echo(f"PASS Seeded {len(DEMO_PRODUCTS)} products, 3 revenues and 1 expense")
    click.echo(f"     All demo users share the password: {password}")


# =============================================================================
# TENANT COMMANDS
# =============================================================================

@click.group('tenants')
def tenants_group():
    """Tenant onboarding commands."""


@tenants_group.command('list')
@with_appcontext
def list_tenants_cli():
    """List all tenants."""
    tenants = tenant_service.list_tenants()

    if not tenants:
        click.echo("No tenants found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<37} {'Name':<30} {'Active':<8} {'Expires':<12} {'Users'}")
    click.echo("="*100)

    for tenant in tenants:
        user_count = db.session.query(User).filter_by(tenant_id=tenant.id).count()
        active_str = "Yes" if tenant.is_active else "No"
        expires = tenant.subscription_expires_at.date().isoformat()

        click.echo(f"{tenant.id:<37} {tenant.name:<30} {active_str:<8} {expires:<12} {user_count}")

    click.echo("="*100 + "\n")


@tenants_group.command('create')
@click.option('--name', required=True, help='Tenant (business) name')
@click.option('--days', type=int, default=365, show_default=True, help='Subscription length in days')
@with_appcontext
def create_tenant_cli(name, days):
    """Create a new tenant."""
    try:
        tenant = tenant_service.create_tenant(
            name=name,
            subscription_expires_at=utcnow() + timedelta(days=days),
        )
    except ValueError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created tenant: {tenant.name} (ID: {tenant.id})")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--tenant-id', required=True, help='Tenant ID')
@click.option('--username', prompt=True, help='Username (unique across all tenants)')
@click.option('--email', default=None, help='Email address (optional)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(USER_ROLES), prompt=True, help='Role')
@with_appcontext
def create_user_cli(tenant_id, username, email, password, role):
    """Create a user in a tenant."""
    tenant = tenant_service.get_tenant(tenant_id)
    if not tenant:
        click.echo(f"FAIL Tenant {tenant_id} not found")
        return

    for error in (validate_password(password), validate_email(email)):
        if error:
            click.echo(f"FAIL {error.field} {error.message}")
            return

    patch = {"username": username.strip(), "role": role}
    if email:
        patch["email"] = email.strip()

    try:
        users_service.create_user(tenant_id=tenant.id, patch=patch, password=password)
    except ConflictError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created user: {username} with role '{role}'")
    click.echo(f"     Tenant: {tenant.name} (ID: {tenant.id})")


@users_group.command('list')
@click.option('--tenant-id', help='Filter by tenant ID')
@with_appcontext
def list_users_cli(tenant_id):
    """List users with role and active status."""
    query = db.session.query(User)

    if tenant_id:
        query = query.filter_by(tenant_id=tenant_id)

    users = query.order_by(User.username.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'Username':<20} {'Role':<18} {'Active':<8} {'Tenant'}")
    click.echo("="*100)

    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.username:<20} {user.role:<18} {active_str:<8} {user.tenant_id}")

    click.echo("="*100 + "\n")


# =============================================================================
# NOTIFICATION SCANS
# =============================================================================

@click.group('notifications')
def notifications_group():
    """System-triggered notifications (run from cron)."""


@notifications_group.command('scan-low-stock')
@with_appcontext
def scan_low_stock_cli():
    """One low_stock notification per tenant with products at or below minimum."""
    created = notifications_service.scan_low_stock()
    click.echo(f"PASS Created {len(created)} low-stock notification(s)")


@notifications_group.command('scan-subscriptions')
@click.option('--days', type=int, default=7, show_default=True, help='Warn this many days ahead')
@with_appcontext
def scan_subscriptions_cli(days):
    """subscription_expiry notification for tenants expiring within --days."""
    created = notifications_service.scan_subscriptions(days)
    click.echo(f"PASS Created {len(created)} subscription notification(s)")


def register_commands(app):
    """Register all CLI commands with the Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(tenants_group)
    app.cli.add_command(users_group)
    app.cli.add_command(notifications_group)

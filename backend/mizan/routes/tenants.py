# Overview: Flask API route for the caller's own tenant.

from flask import Blueprint, g
from ..services import tenant_service
from ..decorators import require_auth

tenants_bp = Blueprint("tenants", __name__, url_prefix="/api/tenants")


@tenants_bp.get("/current")
@require_auth
def current_tenant():
    """Tenant the session was opened under. Other tenants are never exposed."""
    tenant = tenant_service.get_tenant(g.tenant_id)
    if tenant is None:
        return {"error": "Tenant not found"}, 404
    return tenant.to_dict()

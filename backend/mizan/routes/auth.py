# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- POST /api/auth/login   username + password -> bearer token
- POST /api/auth/logout  revoke the presented token
- GET  /api/auth/user    current user, tenant and granted permissions

Accounts are created by owners/super_admins (POST /api/users) or the CLI;
there is no self-registration.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..services import permission_service
from ..permissions import get_role_permissions
from ..decorators import require_auth, bearer_token


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    401: unknown user, wrong password or deactivated account
    403: correct credentials but the tenant is inactive or its subscription expired
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
            return jsonify({"error": "username and password required"}), 400

        user_agent = request.headers.get("User-Agent")
        ip_address = request.remote_addr

        result = auth_service.authenticate(username.strip(), password)

        if result.outcome == auth_service.LOGIN_INVALID:
            permission_service.log_security_event(
                user_id=result.user.id if result.user else None,
                event_type="LOGIN_FAILED",
                success=False,
                resource=request.path,
                action="LOGIN",
                reason="Invalid credentials",
                ip_address=ip_address,
                user_agent=user_agent,
                tenant_id=result.user.tenant_id if result.user else None,
            )
            return jsonify({"error": "Invalid credentials"}), 401

        if not result.ok:
            permission_service.log_security_event(
                user_id=result.user.id,
                event_type="LOGIN_BLOCKED",
                success=False,
                resource=request.path,
                action="LOGIN",
                reason=result.outcome,
                ip_address=ip_address,
                user_agent=user_agent,
                tenant_id=result.user.tenant_id,
            )
            message = (
                "Subscription expired"
                if result.outcome == auth_service.LOGIN_SUBSCRIPTION_EXPIRED
                else "Account suspended"
            )
            return jsonify({"error": message, "reason": result.outcome}), 403

        user = result.user
        session, token = session_service.create_session(
            user,
            user_agent=user_agent,
            ip_address=ip_address,
        )

        return jsonify({
            "user": user.to_dict(),
            "tenant": user.tenant.to_dict(),
            "permissions": sorted(get_role_permissions(user.role)),
            "token": token,
            "session": session.to_dict(),
            "message": "Login successful"
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke session token (logout).

    Expects Authorization header: Bearer <token>
    """
    try:
        token = bearer_token()
        if token is None:
            return jsonify({"error": "Authentication required"}), 401

        revoked = session_service.revoke_session(token, reason="User logout")
        if not revoked:
            return jsonify({"error": "Invalid or expired token"}), 401

        return jsonify({"message": "Logout successful"}), 200

    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/user")
@require_auth
def current_user_route():
    """Current user with tenant and role permissions, for UI gating."""
    user = g.current_user
    return jsonify({
        "user": user.to_dict(),
        "tenant": user.tenant.to_dict(),
        "permissions": sorted(get_role_permissions(user.role)),
    }), 200

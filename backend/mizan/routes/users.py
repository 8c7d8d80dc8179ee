# Overview: Flask API routes for user management within the caller's tenant.

"""
User management routes.

SECURITY:
- Listing/reading users requires VIEW_USERS (any role)
- Create/update/deactivate require MANAGE_USERS (super_admin, owner)
- Only super_admin may touch super_admin accounts
- DELETE deactivates (is_active=false); users are never removed
"""
from flask import Blueprint, current_app, request, g
from ..services import users_service
from ..services.permission_service import PermissionDeniedError
from ..models import User
from ..permissions import USER_ROLES
from ..validation import (
    FieldError,
    ModelValidationPolicy,
    validate_payload,
    validate_email,
    validate_password,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_permission

USER_POLICY = ModelValidationPolicy(
    writable_fields={
        "username", "email", "first_name", "last_name",
        "role", "is_active", "profile_image_url",
    },
    required_on_create={"username", "role"},
    read_only_fields=frozenset({
        "id", "tenant_id", "created_at", "updated_at", "last_login_at", "password_hash",
    }),
    enum_fields={"role": USER_ROLES},
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


def _validated_user_payload(payload, *, partial: bool) -> tuple[dict, str | None]:
    """
    Validate a user payload. password is write-only and not a column, so it
    is checked here and reported together with the column errors.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    payload = dict(payload)
    errors: list[FieldError] = []

    password = payload.pop("password", None)
    if password is not None:
        password_error = validate_password(password)
        if password_error:
            errors.append(password_error)
    elif not partial:
        errors.append(FieldError("password", "is required"))

    email = payload.get("email")
    if email is not None and not isinstance(email, str):
        errors.append(FieldError("email", "must be a string"))
        payload.pop("email")
    elif email is not None and email.strip():
        email_error = validate_email(email.strip())
        if email_error:
            errors.append(email_error)

    patch = validate_payload(
        model=User,
        payload=payload,
        policy=USER_POLICY,
        partial=partial,
        errors=errors,
    )
    return patch, password


@users_bp.get("")
@require_auth
@require_permission("VIEW_USERS")
def list_users():
    """
    Query params:
    - active: true|false (optional)
    """
    active_param = request.args.get("active")
    active = None
    if active_param is not None:
        active = active_param.lower() in ("1", "true", "yes")

    try:
        return users_service.list_users(g.tenant_id, active=active)
    except Exception:
        current_app.logger.exception("Failed to list users")
        return {"error": "Internal server error"}, 500


@users_bp.get("/<user_id>")
@require_auth
@require_permission("VIEW_USERS")
def get_user(user_id: str):
    user = users_service.get_user(user_id=user_id, tenant_id=g.tenant_id)
    if user is None:
        return {"error": "User not found"}, 404
    return user


@users_bp.post("")
@require_auth
@require_permission("MANAGE_USERS")
def create_user_route():
    try:
        patch, password = _validated_user_payload(request.get_json(silent=True), partial=False)
        created = users_service.create_user(
            tenant_id=g.tenant_id,
            patch=patch,
            password=password,
            actor=g.auth,
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except PermissionDeniedError as e:
        return {"error": "Permission denied", "message": str(e)}, 403
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create user")
        return {"error": "Internal server error"}, 500

    return created, 201


@users_bp.put("/<user_id>")
@require_auth
@require_permission("MANAGE_USERS")
def update_user_route(user_id: str):
    try:
        patch, password = _validated_user_payload(request.get_json(silent=True), partial=True)
        updated = users_service.update_user(
            user_id=user_id,
            patch=patch,
            password=password,
            actor=g.auth,
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except PermissionDeniedError as e:
        return {"error": "Permission denied", "message": str(e)}, 403
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update user")
        return {"error": "Internal server error"}, 500

    if not updated:
        return {"error": "User not found"}, 404

    return updated, 200


@users_bp.delete("/<user_id>")
@require_auth
@require_permission("MANAGE_USERS")
def deactivate_user_route(user_id: str):
    try:
        deactivated = users_service.deactivate_user(user_id=user_id, actor=g.auth)
    except PermissionDeniedError as e:
        return {"error": "Permission denied", "message": str(e)}, 403
    except Exception:
        current_app.logger.exception("Failed to deactivate user")
        return {"error": "Internal server error"}, 500

    if not deactivated:
        return {"error": "User not found"}, 404

    return deactivated, 200

# Overview: Flask API routes for tenant notifications.

from flask import Blueprint, current_app, request, g
from ..services import notifications_service
from ..models import Notification, NOTIFICATION_TYPES
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
)
from ..decorators import require_auth, require_permission

NOTIFICATION_POLICY = ModelValidationPolicy(
    writable_fields={"title", "message", "type"},
    required_on_create={"title", "message", "type"},
    read_only_fields=frozenset({"id", "tenant_id", "created_at", "is_read"}),
    enum_fields={"type": NOTIFICATION_TYPES},
)

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
@require_auth
@require_permission("VIEW_NOTIFICATIONS")
def list_notifications():
    """
    Newest first.

    Query params:
    - limit: int (optional, default 20)
    - unread: true (optional) - only unread notifications
    """
    unread_only = (request.args.get("unread") or "").lower() in ("1", "true", "yes")

    try:
        return notifications_service.list_notifications(
            g.tenant_id,
            limit=request.args.get("limit", type=int),
            unread_only=unread_only,
            default_limit=current_app.config["NOTIFICATIONS_LIMIT"],
            max_limit=current_app.config["MAX_LIST_LIMIT"],
        )
    except Exception:
        current_app.logger.exception("Failed to list notifications")
        return {"error": "Internal server error"}, 500


@notifications_bp.get("/unread-count")
@require_auth
@require_permission("VIEW_NOTIFICATIONS")
def unread_count():
    try:
        return {"count": notifications_service.unread_count(g.tenant_id)}
    except Exception:
        current_app.logger.exception("Failed to count unread notifications")
        return {"error": "Internal server error"}, 500


@notifications_bp.post("")
@require_auth
@require_permission("CREATE_NOTIFICATIONS")
def create_notification_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Notification, payload=payload, policy=NOTIFICATION_POLICY, partial=False)
        created = notifications_service.create_notification(patch=patch, tenant_id=g.tenant_id)
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to create notification")
        return {"error": "Internal server error"}, 500

    return created, 201


@notifications_bp.put("/<notification_id>/read")
@require_auth
@require_permission("MARK_NOTIFICATIONS_READ")
def mark_read_route(notification_id: str):
    """Idempotent; repeating the call returns the same read notification."""
    try:
        notification = notifications_service.mark_read(notification_id=notification_id, tenant_id=g.tenant_id)
    except Exception:
        current_app.logger.exception("Failed to mark notification read")
        return {"error": "Internal server error"}, 500

    if notification is None:
        return {"error": "Notification not found"}, 404

    return notification, 200

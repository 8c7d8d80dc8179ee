# Overview: Unauthenticated liveness and build-info endpoints for load balancers and ops.

import sys
import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..models import SessionToken, Tenant
from mizan.time_utils import to_utc_z, utcnow

API_VERSION = "1.0.0"

system_bp = Blueprint("system", __name__)


def probe_database() -> tuple[bool, dict]:
    """Round-trip to the database. Returns (ok, report) where report carries timing and row counts."""
    started = time.perf_counter()
    report: dict = {}
    ok = True
    try:
        db.session.execute(text("SELECT 1"))
        report["tenants"] = db.session.query(Tenant).count()
        report["open_sessions"] = db.session.query(SessionToken).filter(SessionToken.is_revoked.is_(False)).count()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Database probe failed")
        ok = False
        report = {"error": "Database error"}

    report["status"] = "healthy" if ok else "unhealthy"
    report["latency_ms"] = round((time.perf_counter() - started) * 1000, 2)
    return ok, report


@system_bp.get("/health")
def health():
    """200 while the database answers, 503 otherwise."""
    ok, database = probe_database()
    body = {
        "status": database["status"],
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database},
    }
    return body, 200 if ok else 503


@system_bp.get("/version")
def version():
    return {
        "api_version": API_VERSION,
        "environment": "development" if current_app.debug else "production",
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }

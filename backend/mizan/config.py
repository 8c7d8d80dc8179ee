# backend/mizan/config.py
from __future__ import annotations
import os


def _origins_from_env(default: str) -> set[str]:
    raw = os.environ.get("CORS_ALLOWED_ORIGINS", default)
    return {o.strip() for o in raw.split(",") if o.strip()}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/mizan.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///mizan.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    CORS_ALLOWED_ORIGINS = _origins_from_env(
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173"
    )

    # bcrypt cost factor; tests drop this to the minimum (4)
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    SESSION_ABSOLUTE_TIMEOUT_HOURS = int(os.environ.get("SESSION_ABSOLUTE_TIMEOUT_HOURS", "24"))
    SESSION_IDLE_TIMEOUT_HOURS = int(os.environ.get("SESSION_IDLE_TIMEOUT_HOURS", "2"))

    # List sizes
    DEFAULT_LIST_LIMIT = 50
    MAX_LIST_LIMIT = 500
    RECENT_TRANSACTIONS_LIMIT = 10
    NOTIFICATIONS_LIMIT = 20

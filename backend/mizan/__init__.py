# backend/mizan/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    # Overrides must land before extensions read the config
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.tenants import tenants_bp
    from .routes.dashboard import dashboard_bp
    from .routes.revenues import revenues_bp
    from .routes.expenses import expenses_bp
    from .routes.products import products_bp
    from .routes.users import users_bp
    from .routes.notifications import notifications_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(tenants_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(revenues_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(reports_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    register_error_handlers(app)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def register_error_handlers(app: Flask) -> None:
    """JSON bodies for errors raised outside the routes' own handling."""
    from .services.tenant_service import TenantAccessError

    @app.errorhandler(404)
    def not_found(_e):
        return {"error": "Not found"}, 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(TenantAccessError)
    def tenant_context_missing(_e):
        app.logger.exception("Request ran without tenant context")
        db.session.rollback()
        return {"error": "Internal server error"}, 500

    @app.errorhandler(500)
    def internal_error(_e):
        db.session.rollback()
        return {"error": "Internal server error"}, 500

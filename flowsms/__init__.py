"""
Flow SMS Studio Dashboard
Flask Application Factory.

Usage:
    from flowsms import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from flowsms.config import config
from flowsms.core.exceptions import (
    FeedNotConfiguredError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from flowsms.middleware.diagnostics import run_startup_diagnostics
from flowsms.middleware.jwt_auth import init_jwt_middleware
from flowsms.middleware.logging_config import configure_logging
from flowsms.middleware.rate_limiter import init_rate_limits
from flowsms.middleware.timing import init_request_timing
from flowsms.models import db
from flowsms.utils.errors import E, api_error

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine  # noqa: E402


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit; applied per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def _register_error_handlers(app):
    """JSON error bodies for service exceptions and HTTP errors."""

    @app.errorhandler(NotFoundError)
    def _not_found_error(error):
        logger.info("Not found: %s", error)
        return api_error(E.NOT_FOUND, error.public_message)

    @app.errorhandler(ValidationError)
    def _validation_error(error):
        return api_error(E.VALIDATION_INVALID, str(error), details=error.details)

    @app.errorhandler(FeedNotConfiguredError)
    def _feed_not_configured(error):
        logger.warning("Feed not configured: %s", error)
        return api_error(E.FEED_NOT_CONFIGURED, str(error), details={"feed": error.feed})

    @app.errorhandler(UpstreamError)
    def _upstream_error(error):
        logger.warning("Upstream failure: %s", error)
        return api_error(E.UPSTREAM, str(error), details={"service": error.service})

    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to the APP_ENV env var, or "development".

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # Instantiated so ProductionConfig can refuse missing settings
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request middleware ───────────────────────────────────────────────
    init_request_timing(app)
    init_jwt_middleware(app)

    app.config.setdefault("MAX_CONTENT_LENGTH", 2 * 1024 * 1024)

    # ── Import all models so Alembic can detect them ─────────────────────
    from flowsms.models import user as _user_models        # noqa: F401
    from flowsms.models import project as _project_models  # noqa: F401
    from flowsms.models import task as _task_models        # noqa: F401
    from flowsms.models import monday as _monday_models    # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    if config_name != "testing":
        os.makedirs(app.instance_path, exist_ok=True)
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except Exception as e:
            app.logger.warning("db.create_all() failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    from flowsms.blueprints.auth_bp import auth_bp
    from flowsms.blueprints.dashboard_bp import dashboard_bp
    from flowsms.blueprints.feeds_bp import feeds_bp
    from flowsms.blueprints.health_bp import health_bp
    from flowsms.blueprints.monday_bp import monday_bp
    from flowsms.blueprints.program_bp import program_bp
    from flowsms.blueprints.project_bp import project_bp
    from flowsms.blueprints.task_bp import task_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(feeds_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(monday_bp)
    app.register_blueprint(program_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(task_bp)

    _register_error_handlers(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-test-users")
    def seed_test_users_cmd():
        """Create or reset the built-in test accounts."""
        from flowsms.services.auth_service import seed_test_users
        result = seed_test_users()
        db.session.commit()
        logger.info("Seeded test users: %s", ", ".join(u["email"] for u in result["users"]))

    @app.cli.command("flush-feed-cache")
    @click.argument("source", required=False)
    def flush_feed_cache_cmd(source):
        """Drop cached feed data (all feeds, or one of: sheets, airtable)."""
        from flowsms.services import cache_service
        if source:
            removed = cache_service.invalidate_feed(source)
            logger.info("Flushed %d cached entries for feed %s", removed, source)
        else:
            removed = cache_service.clear_all()
            logger.info("Flushed %d cached feed entries", removed)

    # ── Startup diagnostics ──────────────────────────────────────────────
    run_startup_diagnostics(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app

"""
Startup diagnostics — runs once when the Flask app starts.

Checks the database and Redis, reports which external feeds are
configured, and logs a summary banner.
"""

import logging
import sys

from flask import Flask

from flowsms.models import db

logger = logging.getLogger(__name__)

# (label, config keys that must all be set)
_FEEDS = (
    ("HR sheet", ("HR_SHEET_ID",)),
    ("Stats sheet", ("PROJECT_STATS_SHEET_ID",)),
    ("PXT sheet", ("PXT_SHEET_ID",)),
    ("Building info", ("BUILDING_INFO_SHEET_ID",)),
    ("Airtable", ("AIRTABLE_TOKEN", "AIRTABLE_BASE_ID")),
    ("Monday.com", ("MONDAY_API_TOKEN",)),
)


def feed_configuration(config) -> dict[str, bool]:
    """Feed label → whether every setting it needs is present."""
    return {label: all(config.get(key) for key in keys) for label, keys in _FEEDS}


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup (inside app context)."""
    if app.config.get("TESTING"):
        return

    issues: list[str] = []

    with app.app_context():
        py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

        # ── Database connectivity ────────────────────────────────────
        db_status = "ok"
        db_uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
        db_type = "PostgreSQL" if "postgresql" in db_uri else "SQLite" if "sqlite" in db_uri else "unknown"
        try:
            db.session.execute(db.text("SELECT 1"))
        except Exception as exc:
            db_status = "FAILED"
            issues.append(f"Database unreachable: {exc}")

        # ── Redis ────────────────────────────────────────────────────
        redis_url = app.config.get("REDIS_URL", "")
        redis_status = "not configured (in-memory cache)"
        if redis_url.startswith(("redis://", "rediss://")):
            import redis as redis_lib
            try:
                redis_lib.from_url(redis_url, socket_timeout=2).ping()
                redis_status = "ok"
            except redis_lib.RedisError:
                redis_status = "unreachable"
                issues.append("Redis unreachable — rate limiter and feed cache may not work")

        # ── Feeds ────────────────────────────────────────────────────
        feeds = feed_configuration(app.config)
        for label, ok in feeds.items():
            if not ok:
                issues.append(f"{label} not configured — its endpoints will return 503 or empty data")
        feed_lines = "\n".join(
            f"║  {label:<12}: {'configured' if ok else 'NOT SET':<46s}║" for label, ok in feeds.items()
        )

        banner = f"""
╔══════════════════════════════════════════════════════════════╗
║  Flow SMS Studio Dashboard — Startup Diagnostics             ║
╠══════════════════════════════════════════════════════════════╣
║  Python      : {py:<46s}║
║  Debug       : {str(app.debug):<46s}║
║  Database    : {f'{db_type} ({db_status})':<46s}║
║  Redis       : {redis_status:<46s}║
{feed_lines}
╚══════════════════════════════════════════════════════════════╝"""
        logger.info(banner)

        if issues:
            logger.warning("Startup issues detected:")
            for issue in issues:
                logger.warning("  ⚠ %s", issue)
        else:
            logger.info("✅ All startup checks passed")

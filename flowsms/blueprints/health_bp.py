"""
Health check blueprint.

Endpoints:
    GET /api/health        — liveness, 200 while the process is serving
    GET /api/health/ready  — readiness: database round-trip (503 on failure),
                             feed cache backend and which feeds are configured
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from flowsms.middleware.diagnostics import feed_configuration
from flowsms.models import db
from flowsms.services import cache_service

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("", methods=["GET"])
def live():
    return jsonify({"status": "ok", "app": "Flow SMS Studio Dashboard"}), 200


def _database_check():
    started = time.perf_counter()
    try:
        db.session.execute(db.text("SELECT 1"))
    except Exception as exc:
        logger.error("Readiness: database check failed: %s", exc)
        return {"status": "error", "detail": str(exc)}
    return {"status": "ok", "latency_ms": round((time.perf_counter() - started) * 1000, 1)}


@health_bp.route("/ready", methods=["GET"])
def ready():
    database = _database_check()
    healthy = database["status"] == "ok"
    body = {
        "status": "ok" if healthy else "degraded",
        "checks": {
            "database": database,
            # an unreachable cache only slows feeds down, so it never fails readiness
            "cache": cache_service.health_check(),
            "feeds": feed_configuration(current_app.config),
        },
    }
    return jsonify(body), 200 if healthy else 503

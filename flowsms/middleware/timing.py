"""
Request timing middleware.

Every response gets ``X-Request-ID`` (echoed from the request when the
caller sent one) and ``X-Request-Duration-Ms``.  Slow and 5xx requests
are logged; feed proxies wait on Google Sheets / Airtable / Monday.com,
so they get a looser slow threshold than database-backed routes.
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/api/health", "/api/health/ready"})

FEED_PREFIXES = (
    "/api/project-stats",
    "/api/hr",
    "/api/pxt",
    "/api/buildings",
    "/api/flow-standards",
    "/api/monday",
)

SLOW_MS = 1000
SLOW_FEED_MS = 3000


def _slow_threshold(path: str) -> int:
    return SLOW_FEED_MS if path.startswith(FEED_PREFIXES) else SLOW_MS


def init_request_timing(app: Flask):
    """Register the before/after request hooks."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _finish_timer(response):
        started = getattr(g, "request_start", None)
        if started is None:
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{elapsed_ms:.1f}"

        path = request.path
        if path in _QUIET_PATHS or path.startswith("/static"):
            return response

        extra = {
            "request_id": g.request_id,
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
            "user_id": getattr(g, "jwt_user_id", None),
        }
        summary = (request.method, path, response.status_code, elapsed_ms)
        if response.status_code >= 500:
            logger.error("Server error: %s %s %d (%.0fms)", *summary, extra=extra)
        elif elapsed_ms > _slow_threshold(path):
            logger.warning("Slow request: %s %s %d (%.0fms)", *summary, extra=extra)
        else:
            logger.debug("%s %s %d (%.0fms)", *summary, extra=extra)
        return response

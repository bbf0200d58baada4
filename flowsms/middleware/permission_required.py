"""
Permission decorators — JWT-aware role checks for route protection.

Usage:
    @hr_bp.route("/hr", methods=["GET"])
    @require_permission("hr:view")
    def hr_overview():
        ...

    @auth_bp.route("/auth/me", methods=["GET"])
    @require_login
    def me():
        ...

When no JWT user is present, ``require_permission`` passes through; the
dashboard is also used without login from the studio network.
"""

import functools
import logging

from flask import g, jsonify

from flowsms.services.permission_service import has_permission
from flowsms.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def require_permission(codename: str):
    """Decorator: the JWT user's role must grant *codename*."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            user_id = getattr(g, "jwt_user_id", None)
            if user_id is None:
                return f(*args, **kwargs)

            role = getattr(g, "jwt_role", None)
            if not has_permission(role, codename):
                logger.warning(
                    "User %d (%s) denied: missing permission '%s' on %s",
                    user_id, role, codename, f.__name__,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required": codename,
                }), 403

            return f(*args, **kwargs)
        return decorated
    return decorator


def require_login(f):
    """Decorator: reject the request with 401 unless a valid JWT was sent."""
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        if getattr(g, "jwt_user_id", None) is None:
            return api_error(E.UNAUTHORIZED, "Authentication required")
        return f(*args, **kwargs)
    return decorated

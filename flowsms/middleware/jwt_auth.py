"""
JWT Auth Middleware — parses a Bearer token and sets g.jwt_*.

Requests without a token (or with an invalid one) are not rejected here;
routes that need a user check ``g.jwt_user_id`` themselves or use the
permission decorators.

    g.jwt_user_id  → int user id, or None
    g.jwt_role     → database role from the token ("admin", "viewer", ...)
    g.jwt_email    → email claim
"""

import logging

import jwt as pyjwt
from flask import g, request

from flowsms.services.jwt_service import decode_access_token, extract_bearer_token

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/auth/login",
    "/api/health",
    "/static/",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.jwt_user_id = None
        g.jwt_role = None
        g.jwt_email = None

        path = request.path
        if not path.startswith("/api/"):
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        token = extract_bearer_token(request.headers.get("Authorization", ""))
        if token is None:
            return

        try:
            payload = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            logger.debug("Expired JWT on %s", path)
            return
        except pyjwt.InvalidTokenError:
            logger.debug("Invalid JWT on %s", path)
            return

        g.jwt_user_id = payload["sub"]
        g.jwt_role = payload.get("role")
        g.jwt_email = payload.get("email")

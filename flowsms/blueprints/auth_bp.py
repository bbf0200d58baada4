"""
Auth Blueprint — JWT authentication endpoints.

Endpoints:
    POST /api/auth/login   — Email + password → access token + user profile
    GET  /api/auth/me      — Current user profile (Bearer token required)
    POST /api/auth/seed    — Create / reset the built-in test accounts
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from flowsms.middleware.permission_required import require_login
from flowsms.models import db
from flowsms.models.user import User
from flowsms.services import auth_service
from flowsms.utils.errors import E, api_error
from flowsms.utils.helpers import db_commit_or_error

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

_AUTH_ERROR_CODES = {
    400: E.VALIDATION_REQUIRED,
    401: E.UNAUTHORIZED,
    403: E.FORBIDDEN,
}


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Body: { "email": "...", "password": "..." }
    """
    data = request.get_json(silent=True) or {}
    try:
        result = auth_service.authenticate(data.get("email"), data.get("password"))
    except auth_service.AuthServiceError as exc:
        code = _AUTH_ERROR_CODES.get(exc.status_code, E.VALIDATION_INVALID)
        return api_error(code, exc.message, status=exc.status_code)

    logger.info("User %s logged in", result["user"]["email"])
    return jsonify(result), 200


@auth_bp.route("/me", methods=["GET"])
@require_login
def me():
    user = db.session.get(User, g.jwt_user_id)
    if not user or not user.is_active:
        return api_error(E.UNAUTHORIZED, "User not found or inactive")
    return jsonify({"user": auth_service.user_profile(user)}), 200


@auth_bp.route("/seed", methods=["POST"])
def seed():
    if not (current_app.debug or current_app.testing):
        return api_error(E.FORBIDDEN, "Seeding is disabled in production")

    result = auth_service.seed_test_users()
    err = db_commit_or_error()
    if err:
        return err
    return jsonify(result), 200

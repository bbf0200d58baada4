"""Password login and the built-in test accounts."""

import logging

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from flowsms.models import db
from flowsms.models.user import User
from flowsms.services import jwt_service
from flowsms.services.permission_service import permissions_for, simplify_role
from flowsms.utils.crypto import hash_password, verify_password

logger = logging.getLogger(__name__)

TEST_USERS = (
    {"email": "admin@flow.life", "name": "Admin User", "role": "admin"},
    {"email": "manager@flow.life", "name": "Project Manager", "role": "project_manager"},
    {"email": "user@flow.life", "name": "Team Member", "role": "viewer"},
    {"email": "swapnil@flow.life", "name": "Swapnil Meena", "role": "admin"},
)


class AuthServiceError(Exception):
    """Login failure with the HTTP status to report."""
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def user_profile(user):
    """Public user fields plus the simplified app role and its permissions."""
    return {
        **user.to_dict(),
        "app_role": simplify_role(user.role),
        "permissions": permissions_for(user.role),
    }


def authenticate(email, password):
    """Email + password → ``{"token", "user"}``."""
    email = (email or "").strip().lower()
    if not email or not password:
        raise AuthServiceError("Email and password are required", 400)
    try:
        email = validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise AuthServiceError(f"Invalid email: {e}", 400)

    user = User.query.filter(db.func.lower(User.email) == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthServiceError("Invalid email or password", 401)
    if not user.is_active:
        raise AuthServiceError("Account is disabled", 403)

    return {
        "token": jwt_service.generate_access_token(user),
        "token_type": "Bearer",
        "expires_in": current_app.config.get("JWT_ACCESS_EXPIRES", jwt_service.DEFAULT_ACCESS_EXPIRES),
        "user": user_profile(user),
    }


def seed_test_users(password=None):
    """Create the four test accounts, or reset their passwords if present."""
    password = password or current_app.config.get("SEED_DEFAULT_PASSWORD", "flow123")
    password_hash = hash_password(password)

    results = []
    for account in TEST_USERS:
        user = User.query.filter_by(email=account["email"]).first()
        if user is None:
            user = User(**account)
            db.session.add(user)
        user.password_hash = password_hash
        results.append(user)
    db.session.flush()
    logger.info("Seeded %d test users", len(results))
    return {
        "message": "Test users created/updated",
        "users": [{"email": u.email, "name": u.name, "role": u.role} for u in results],
        "note": f"Default password for all users: {password}",
    }

"""
Dashboard Blueprint — home page summary.

Endpoints:
    GET /api/dashboard  — headline stats, recent projects, upcoming milestones, latest activity
"""

from flask import Blueprint, jsonify

from flowsms.middleware.permission_required import require_permission
from flowsms.services import dashboard_service

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.route("/dashboard", methods=["GET"])
@require_permission("analytics:view")
def dashboard():
    return jsonify(dashboard_service.get_dashboard()), 200

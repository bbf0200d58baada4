"""
Feeds Blueprint — read-only views over the external studio data sources.

Endpoints:
    GET /api/project-stats               — Design-stats sheet: projects + aggregates
    GET /api/hr                          — HR list: team, to-be-joined, office summaries
    GET /api/pxt                         — PXT register (?status=PIT|POT|PHT, ?location=MIA|RYD,
                                           ?debug=true for the raw column layout)
    GET /api/pxt/<sr_no>                 — One register project
    GET /api/buildings                   — Building information summary + portfolio stats
    GET /api/buildings/<plot_no>         — One building (plot no. or marketing name)
    GET /api/flow-standards              — SKU library overview (?category=<id> for detail)

Sheet-backed feeds answer 200 with empty data and ``feed_status:
"unavailable"`` when the source cannot be read.  Missing credentials
answer 503 through the app-wide FeedNotConfiguredError handler.
"""

import logging

from flask import Blueprint, jsonify, request

from flowsms.core.exceptions import NotFoundError
from flowsms.middleware.permission_required import require_permission
from flowsms.services import (
    building_info_service,
    flow_standards_service,
    hr_service,
    project_stats_service,
    pxt_service,
)

logger = logging.getLogger(__name__)

feeds_bp = Blueprint("feeds", __name__, url_prefix="/api")


@feeds_bp.route("/project-stats", methods=["GET"])
@require_permission("analytics:view")
def project_stats():
    return jsonify(project_stats_service.get_project_stats()), 200


@feeds_bp.route("/hr", methods=["GET"])
@require_permission("hr:view")
def hr_overview():
    return jsonify(hr_service.get_hr_overview()), 200


@feeds_bp.route("/pxt", methods=["GET"])
@require_permission("projects:view")
def pxt_register():
    debug = request.args.get("debug", "").lower() == "true"
    payload = pxt_service.get_pxt_register(
        status=request.args.get("status"),
        location=request.args.get("location"),
        debug=debug,
    )
    return jsonify(payload), 200


@feeds_bp.route("/pxt/<sr_no>", methods=["GET"])
@require_permission("projects:view")
def pxt_project(sr_no):
    project = pxt_service.find_project(sr_no)
    if project is None:
        raise NotFoundError(resource="PXT project", resource_id=sr_no)
    return jsonify(project), 200


@feeds_bp.route("/buildings", methods=["GET"])
@require_permission("projects:view")
def buildings():
    return jsonify(building_info_service.get_building_info()), 200


@feeds_bp.route("/buildings/<plot_no>", methods=["GET"])
@require_permission("projects:view")
def building_detail(plot_no):
    return jsonify(building_info_service.get_building(plot_no)), 200


@feeds_bp.route("/flow-standards", methods=["GET"])
@require_permission("projects:view")
def flow_standards():
    category = request.args.get("category")
    if category:
        return jsonify(flow_standards_service.get_category_detail(category)), 200
    return jsonify(flow_standards_service.get_overview()), 200

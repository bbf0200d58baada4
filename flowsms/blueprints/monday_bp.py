"""
Monday.com Blueprint — board metrics for PXT projects and board mappings.

Endpoints:
    GET    /api/monday/project/<sr_no>              — Linked board metrics (or has_board: false)
    GET    /api/monday/mappings                     — List mappings (newest first)
    POST   /api/monday/mappings                     — Create or update a mapping
    DELETE /api/monday/mappings?pxt_project_sr_no=  — Remove a mapping
"""

import logging

from flask import Blueprint, jsonify, request

from flowsms.middleware.permission_required import require_permission
from flowsms.services import monday_service
from flowsms.utils.helpers import db_commit_or_error

logger = logging.getLogger(__name__)

monday_bp = Blueprint("monday", __name__, url_prefix="/api/monday")


@monday_bp.route("/project/<sr_no>", methods=["GET"])
@require_permission("projects:view")
def project_board(sr_no):
    payload = monday_service.get_project_board(sr_no)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify(payload), 200


@monday_bp.route("/mappings", methods=["GET"])
@require_permission("projects:view")
def list_mappings():
    mappings = monday_service.list_mappings()
    return jsonify({"mappings": [m.to_dict() for m in mappings]}), 200


@monday_bp.route("/mappings", methods=["POST"])
@require_permission("projects:edit")
def upsert_mapping():
    data = request.get_json(silent=True) or {}
    mapping, created = monday_service.upsert_mapping(data)
    err = db_commit_or_error()
    if err:
        return err
    logger.info(
        "%s Monday mapping %s → board %s",
        "Created" if created else "Updated", mapping.pxt_project_sr_no, mapping.monday_board_id,
    )
    return jsonify({"mapping": mapping.to_dict()}), 201 if created else 200


@monday_bp.route("/mappings", methods=["DELETE"])
@require_permission("projects:edit")
def delete_mapping():
    sr_no = request.args.get("pxt_project_sr_no", "").strip()
    monday_service.delete_mapping(sr_no)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"success": True}), 200

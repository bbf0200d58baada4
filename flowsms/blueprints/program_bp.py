"""
Program Blueprint — project programme (Gantt) data.

Endpoints:
    GET /api/programs                       — All programmes
    GET /api/programs?projectName=<text>    — Name contains <text> (case-insensitive)
    GET /api/programs?projectId=<id>        — One programme, 404 when absent
"""

from flask import Blueprint, jsonify, request

from flowsms.core.exceptions import NotFoundError
from flowsms.middleware.permission_required import require_permission
from flowsms.services import program_service

program_bp = Blueprint("program", __name__, url_prefix="/api")


@program_bp.route("/programs", methods=["GET"])
@require_permission("projects:view")
def list_programs():
    project_id = request.args.get("projectId")
    if project_id:
        try:
            program = program_service.get_program(project_id)
        except NotFoundError:
            return jsonify({"error": "Program not found", "project_id": project_id}), 404
        return jsonify({"program": program}), 200

    programs = program_service.list_programs(request.args.get("projectName"))
    return jsonify({"programs": programs, "total_programs": len(programs)}), 200

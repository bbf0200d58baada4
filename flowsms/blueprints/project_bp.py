"""
Project Blueprint — CRUD API for studio projects.

Endpoints:
    GET    /api/projects          — List (newest updated first, with team + counts)
    POST   /api/projects          — Create
    GET    /api/projects/<id>     — Detail (phases, milestones, tasks, docs, activity)
    PATCH  /api/projects/<id>     — Partial update
    DELETE /api/projects/<id>     — Delete (cascades to all children)
"""

import logging

from flask import Blueprint, jsonify, request

from flowsms.middleware.permission_required import require_permission
from flowsms.models import db
from flowsms.models.project import Project
from flowsms.services import project_service
from flowsms.utils.helpers import db_commit_or_error, get_or_404

logger = logging.getLogger(__name__)

project_bp = Blueprint("project", __name__, url_prefix="/api")


@project_bp.route("/projects", methods=["GET"])
@require_permission("projects:view")
def list_projects():
    return jsonify(project_service.list_projects()), 200


@project_bp.route("/projects", methods=["POST"])
@require_permission("projects:edit")
def create_project():
    data = request.get_json(silent=True) or {}
    project, svc_err = project_service.create_project(data)
    if svc_err:
        return jsonify({"error": svc_err["error"]}), svc_err["status"]

    err = db_commit_or_error()
    if err:
        return err
    return jsonify(project_service.get_project_detail(project)), 201


@project_bp.route("/projects/<int:project_id>", methods=["GET"])
@require_permission("projects:view")
def get_project(project_id):
    project, err = get_or_404(Project, project_id)
    if err:
        return err
    return jsonify(project_service.get_project_detail(project)), 200


@project_bp.route("/projects/<int:project_id>", methods=["PATCH"])
@require_permission("projects:edit")
def update_project(project_id):
    project, err = get_or_404(Project, project_id)
    if err:
        return err

    data = request.get_json(silent=True) or {}
    project, svc_err = project_service.update_project(project, data)
    if svc_err:
        db.session.rollback()
        return jsonify({"error": svc_err["error"]}), svc_err["status"]

    err = db_commit_or_error()
    if err:
        return err
    return jsonify(project_service.get_project_detail(project)), 200


@project_bp.route("/projects/<int:project_id>", methods=["DELETE"])
@require_permission("projects:delete")
def delete_project(project_id):
    project, err = get_or_404(Project, project_id)
    if err:
        return err

    project_name = project.name
    project_service.delete_project(project)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"success": True, "message": f"Project '{project_name}' deleted"}), 200

"""
Task Blueprint — Kanban task board API.

Endpoints:
    GET    /api/tasks                  — List (?project_id, status, priority, assignee_id)
                                         with grouped-by-status view and stats
    POST   /api/tasks                  — Create
    GET    /api/tasks/<id>             — Detail (comments + subtasks)
    PATCH  /api/tasks/<id>             — Partial update
    DELETE /api/tasks/<id>             — Delete (comments + subtasks cascade)
    POST   /api/tasks/<id>/comments    — Add a comment
"""

import logging

from flask import Blueprint, g, jsonify, request

from flowsms.middleware.permission_required import require_permission
from flowsms.models import db
from flowsms.models.task import Task
from flowsms.services import task_service
from flowsms.utils.helpers import db_commit_or_error, get_or_404

logger = logging.getLogger(__name__)

task_bp = Blueprint("task", __name__, url_prefix="/api")


@task_bp.route("/tasks", methods=["GET"])
@require_permission("tasks:view")
def list_tasks():
    filters = {
        "project_id": request.args.get("project_id", type=int),
        "status": request.args.get("status"),
        "priority": request.args.get("priority"),
        "assignee_id": request.args.get("assignee_id", type=int),
    }
    return jsonify(task_service.list_tasks(filters)), 200


@task_bp.route("/tasks", methods=["POST"])
@require_permission("tasks:edit")
def create_task():
    data = request.get_json(silent=True) or {}
    task, svc_err = task_service.create_task(data, creator_id=getattr(g, "jwt_user_id", None))
    if svc_err:
        return jsonify({"error": svc_err["error"]}), svc_err["status"]

    err = db_commit_or_error()
    if err:
        return err
    return jsonify(task.to_dict()), 201


@task_bp.route("/tasks/<int:task_id>", methods=["GET"])
@require_permission("tasks:view")
def get_task(task_id):
    task, err = get_or_404(Task, task_id)
    if err:
        return err
    return jsonify(task_service.get_task_detail(task)), 200


@task_bp.route("/tasks/<int:task_id>", methods=["PATCH"])
@require_permission("tasks:edit")
def update_task(task_id):
    task, err = get_or_404(Task, task_id)
    if err:
        return err

    data = request.get_json(silent=True) or {}
    task, svc_err = task_service.update_task(task, data)
    if svc_err:
        db.session.rollback()
        return jsonify({"error": svc_err["error"]}), svc_err["status"]

    err = db_commit_or_error()
    if err:
        return err
    return jsonify(task.to_dict()), 200


@task_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
@require_permission("tasks:delete")
def delete_task(task_id):
    task, err = get_or_404(Task, task_id)
    if err:
        return err

    task_service.delete_task(task)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"success": True}), 200


@task_bp.route("/tasks/<int:task_id>/comments", methods=["POST"])
@require_permission("tasks:view")
def add_comment(task_id):
    task, err = get_or_404(Task, task_id)
    if err:
        return err

    data = request.get_json(silent=True) or {}
    comment, svc_err = task_service.add_comment(
        task, data.get("content"), user_id=getattr(g, "jwt_user_id", None),
    )
    if svc_err:
        return jsonify({"error": svc_err["error"]}), svc_err["status"]

    err = db_commit_or_error()
    if err:
        return err
    return jsonify(comment.to_dict()), 201

"""
Task board service.

Tasks are listed in Kanban order: status column, then priority (urgent
first), then manual ``order`` within the column, newest first as the tie
break.  New tasks go to the bottom of their (project, status) column.
"""

from __future__ import annotations

import logging

from sqlalchemy import case, func

from flowsms.models import db
from flowsms.models.project import Activity, Phase, Project
from flowsms.models.task import (
    PRIORITY_RANK,
    TASK_PRIORITIES,
    TASK_STATUSES,
    Comment,
    Task,
)
from flowsms.models.user import User
from flowsms.utils.helpers import parse_date, parse_float, parse_int

logger = logging.getLogger(__name__)

HIGH_PRIORITIES = ("high", "urgent")

_STATUS_ORDER = case(
    {status: index for index, status in enumerate(TASK_STATUSES)},
    value=Task.status,
    else_=len(TASK_STATUSES),
)
_PRIORITY_ORDER = case(PRIORITY_RANK, value=Task.priority, else_=-1)


def _list_item(task: Task) -> dict:
    return {
        **task.to_dict(),
        "counts": {"comments": len(task.comments), "subtasks": len(task.subtasks)},
    }


def list_tasks(filters: dict) -> dict:
    """Filtered tasks plus a per-status grouping and board stats.

    Supported filters: ``project_id``, ``status``, ``priority``,
    ``assignee_id``.  Empty values are ignored.
    """
    q = Task.query
    for column in ("project_id", "status", "priority", "assignee_id"):
        value = filters.get(column)
        if value not in (None, ""):
            q = q.filter(getattr(Task, column) == value)

    tasks = [
        _list_item(t)
        for t in q.order_by(
            _STATUS_ORDER, _PRIORITY_ORDER.desc(), Task.order, Task.created_at.desc(), Task.id.desc(),
        ).all()
    ]
    grouped = {status: [t for t in tasks if t["status"] == status] for status in TASK_STATUSES}

    stats = {"total": len(tasks)}
    stats.update({status: len(items) for status, items in grouped.items()})
    stats["high_priority"] = sum(1 for t in tasks if t["priority"] in HIGH_PRIORITIES)
    return {"tasks": tasks, "grouped": grouped, "stats": stats}


def get_task_detail(task: Task) -> dict:
    """Task with its phase, comments (newest first) and subtasks (by order)."""
    return {
        **task.to_dict(),
        "phase": {"id": task.phase.id, "name": task.phase.name} if task.phase else None,
        "comments": [c.to_dict() for c in task.comments],
        "subtasks": [
            {**s.to_dict(), "assignee": s.assignee.to_brief() if s.assignee else None}
            for s in task.subtasks
        ],
    }


def _resolve_creator(creator_id):
    """Authenticated user when known, else the first admin, else any user."""
    if creator_id is not None:
        user = db.session.get(User, creator_id)
        if user:
            return user
    return (
        User.query.filter_by(role="admin").order_by(User.id).first()
        or User.query.order_by(User.id).first()
    )


def _next_order(project_id, status):
    current = (
        db.session.query(func.max(Task.order))
        .filter(Task.project_id == project_id, Task.status == status)
        .scalar()
    )
    return (current or 0) + 1


def _check_links(data, project_id):
    """Validate optional assignee / phase / parent references."""
    assignee_id = parse_int(data.get("assignee_id"))
    if assignee_id is not None and db.session.get(User, assignee_id) is None:
        return {"error": "assignee not found", "status": 400}
    phase_id = parse_int(data.get("phase_id"))
    if phase_id is not None:
        phase = db.session.get(Phase, phase_id)
        if phase is None or phase.project_id != project_id:
            return {"error": "phase not found in this project", "status": 400}
    parent_id = parse_int(data.get("parent_id"))
    if parent_id is not None:
        parent = db.session.get(Task, parent_id)
        if parent is None or parent.project_id != project_id:
            return {"error": "parent task not found in this project", "status": 400}
    return None


def _check_choices(data):
    if "status" in data and data["status"] not in TASK_STATUSES:
        return {"error": f"status must be one of: {', '.join(TASK_STATUSES)}", "status": 400}
    if "priority" in data and data["priority"] not in TASK_PRIORITIES:
        return {"error": f"priority must be one of: {', '.join(TASK_PRIORITIES)}", "status": 400}
    return None


def create_task(data: dict, creator_id=None) -> tuple[Task | None, dict | None]:
    """Create a task at the bottom of its status column and log the activity."""
    project_id = parse_int(data.get("project_id"))
    title = str(data.get("title", "") or "").strip()
    if project_id is None or not title:
        return None, {"error": "project_id and title are required", "status": 400}
    if db.session.get(Project, project_id) is None:
        return None, {"error": "Project not found", "status": 404}

    err = _check_choices(data) or _check_links(data, project_id)
    if err:
        return None, err

    creator = _resolve_creator(creator_id)
    if creator is None:
        return None, {"error": "No users found in system", "status": 400}

    status = data.get("status") or "todo"
    task = Task(
        project_id=project_id,
        title=title,
        description=data.get("description"),
        priority=data.get("priority") or "medium",
        assignee_id=parse_int(data.get("assignee_id")),
        creator_id=creator.id,
        due_date=parse_date(data.get("due_date")),
        phase_id=parse_int(data.get("phase_id")),
        parent_id=parse_int(data.get("parent_id")),
        estimated_hours=parse_float(data.get("estimated_hours")),
        order=_next_order(project_id, status),
    )
    task.set_status(status)
    db.session.add(task)
    db.session.flush()

    db.session.add(Activity(
        project_id=project_id,
        user_id=creator.id,
        action="created_task",
        target=title,
        details={"task_id": task.id},
    ))
    db.session.flush()
    logger.info("Task created id=%s project=%s by user=%s", task.id, project_id, creator.id)
    return task, None


def update_task(task: Task, data: dict) -> tuple[Task | None, dict | None]:
    """Partial update.  Blank assignee / phase clear the link."""
    err = _check_choices(data)
    if err:
        return None, err

    if "title" in data:
        title = str(data.get("title") or "").strip()
        if not title:
            return None, {"error": "title cannot be empty", "status": 400}
        task.title = title
    if "description" in data:
        task.description = data.get("description")
    if "priority" in data:
        task.priority = data["priority"]
    if "status" in data:
        task.set_status(data["status"])

    if "assignee_id" in data or "phase_id" in data:
        links = {k: data.get(k) for k in ("assignee_id", "phase_id")}
        err = _check_links(links, task.project_id)
        if err:
            return None, err
    if "assignee_id" in data:
        task.assignee_id = parse_int(data.get("assignee_id"))
    if "phase_id" in data:
        task.phase_id = parse_int(data.get("phase_id"))

    if "due_date" in data:
        task.due_date = parse_date(data.get("due_date"))
    if "estimated_hours" in data:
        task.estimated_hours = parse_float(data.get("estimated_hours"))
    if "actual_hours" in data:
        task.actual_hours = parse_float(data.get("actual_hours"))
    if "order" in data:
        order = parse_int(data.get("order"))
        if order is None:
            return None, {"error": "order must be an integer", "status": 400}
        task.order = order

    db.session.flush()
    return task, None


def add_comment(task: Task, content, user_id=None) -> tuple[Comment | None, dict | None]:
    content = str(content or "").strip()
    if not content:
        return None, {"error": "content is required", "status": 400}
    comment = Comment(task_id=task.id, user_id=user_id, content=content)
    db.session.add(comment)
    db.session.flush()
    return comment, None


def delete_task(task: Task) -> None:
    """Delete a task; its comments and subtasks go with it."""
    logger.info("Deleting task id=%s title=%r", task.id, task.title)
    db.session.delete(task)

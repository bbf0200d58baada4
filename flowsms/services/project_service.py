"""Studio project CRUD and read models for the project list / detail pages."""

from __future__ import annotations

import logging

from flowsms.models import db, iso
from flowsms.models.project import (
    PROJECT_STATUSES,
    PROJECT_TYPES,
    Activity,
    Document,
    Project,
    ProjectMember,
)
from flowsms.models.user import Client, User
from flowsms.utils.helpers import parse_date, parse_float, parse_int

logger = logging.getLogger(__name__)

RECENT_DOCUMENTS = 10
RECENT_ACTIVITIES = 10


def _client_summary(client, full=False):
    if client is None:
        return None
    data = {"id": client.id, "name": client.name}
    if full:
        data.update({"email": client.email, "phone": client.phone})
    return data


def list_projects() -> list[dict]:
    """All projects, most recently updated first, with client, team and counts."""
    projects = Project.query.order_by(Project.updated_at.desc(), Project.id.desc()).all()
    return [
        {
            **p.to_dict(),
            "client": _client_summary(p.client),
            "team": p.team(),
            "counts": p.counts(),
        }
        for p in projects
    ]


def get_project_detail(project: Project) -> dict:
    """Full project view: team, phases, milestones, tasks, recent docs/activity."""
    documents = (
        project.documents
        .order_by(Document.created_at.desc(), Document.id.desc())
        .limit(RECENT_DOCUMENTS)
        .all()
    )
    activities = (
        project.activities
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(RECENT_ACTIVITIES)
        .all()
    )
    return {
        **project.to_dict(),
        "client": _client_summary(project.client, full=True),
        "team": project.team(),
        "phases": [ph.to_dict() for ph in project.phases],
        "milestones": [m.to_dict() for m in project.milestones],
        "tasks": [
            {
                "id": t.id,
                "title": t.title,
                "description": t.description,
                "status": t.status,
                "priority": t.priority,
                "due_date": iso(t.due_date),
                "assignee": t.assignee.to_brief() if t.assignee else None,
            }
            for t in project.tasks.filter_by(parent_id=None).all()
        ],
        "documents": [d.to_dict() for d in documents],
        "activities": [a.to_dict() for a in activities],
        "counts": project.counts(),
    }


def _validate_choice(data, field, choices):
    if field in data and data[field] not in choices:
        return {"error": f"{field} must be one of: {', '.join(choices)}", "status": 400}
    return None


def _apply_fields(project: Project, data: dict) -> dict | None:
    for field, choices in (("type", PROJECT_TYPES), ("status", PROJECT_STATUSES)):
        err = _validate_choice(data, field, choices)
        if err:
            return err
        if field in data:
            setattr(project, field, data[field])

    if "client_id" in data:
        client_id = parse_int(data.get("client_id"))
        if client_id is None or db.session.get(Client, client_id) is None:
            return {"error": "client not found", "status": 400}
        project.client_id = client_id

    for attr in ("description", "location"):
        if attr in data:
            setattr(project, attr, str(data.get(attr) or "").strip() or None)
    if "start_date" in data:
        project.start_date = parse_date(data.get("start_date"))
    if "end_date" in data:
        project.end_date = parse_date(data.get("end_date"))
    if "budget" in data:
        project.budget = parse_float(data.get("budget"))
    if "progress" in data:
        progress = parse_int(data.get("progress"))
        if progress is None or not 0 <= progress <= 100:
            return {"error": "progress must be an integer between 0 and 100", "status": 400}
        project.progress = progress
    return None


def _apply_members(project: Project, members: list) -> dict | None:
    """Replace the project team with ``[{"user_id", "role"}]``."""
    if not isinstance(members, list):
        return {"error": "members must be a list", "status": 400}
    project.members.clear()
    db.session.flush()
    for entry in members:
        if not isinstance(entry, dict):
            return {"error": "members entries must be objects with user_id", "status": 400}
        user_id = parse_int(entry.get("user_id"))
        if user_id is None or db.session.get(User, user_id) is None:
            return {"error": f"user {entry!r} not found", "status": 400}
        project.members.append(
            ProjectMember(user_id=user_id, role=str(entry.get("role") or "member").strip()),
        )
    return None


def create_project(data: dict) -> tuple[Project | None, dict | None]:
    """Create a project; ``name`` and ``client_id`` are required."""
    name = str(data.get("name", "") or "").strip()
    if not name:
        return None, {"error": "name is required", "status": 400}
    if not data.get("client_id"):
        return None, {"error": "client_id is required", "status": 400}

    project = Project(name=name)
    err = _apply_fields(project, data)
    if err:
        return None, err

    db.session.add(project)
    if "members" in data:
        err = _apply_members(project, data["members"])
        if err:
            db.session.rollback()
            return None, err
    db.session.flush()
    logger.info("Project created id=%s name=%r", project.id, project.name)
    return project, None


def update_project(project: Project, data: dict) -> tuple[Project | None, dict | None]:
    """Partial update; only keys present in *data* change."""
    if "name" in data:
        name = str(data.get("name", "") or "").strip()
        if not name:
            return None, {"error": "name cannot be empty", "status": 400}
        project.name = name

    err = _apply_fields(project, data)
    if err:
        return None, err
    if "members" in data:
        err = _apply_members(project, data["members"])
        if err:
            return None, err
    db.session.flush()
    return project, None


def delete_project(project: Project) -> None:
    """Delete a project with its members, phases, milestones, tasks, documents, activity."""
    logger.info("Deleting project id=%s name=%r", project.id, project.name)
    db.session.delete(project)

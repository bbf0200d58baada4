"""Home dashboard read model: headline counts plus recent projects,
upcoming milestones and the latest activity."""

from datetime import datetime, timezone

from flowsms.models import iso
from flowsms.models.project import Activity, Milestone, Project
from flowsms.models.task import Task
from flowsms.models.user import User

RECENT_LIMIT = 5
OPEN_MILESTONE_STATUSES = ("pending", "in_progress", "overdue")
PENDING_TASK_STATUSES = ("todo", "in_progress")


def _month_start(now=None):
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _stats(now=None):
    return {
        "active_projects": Project.query.filter_by(status="active").count(),
        "total_members": User.query.filter_by(is_active=True).count(),
        "pending_tasks": Task.query.filter(Task.status.in_(PENDING_TASK_STATUSES)).count(),
        "completed_this_month": Task.query.filter(
            Task.status == "completed",
            Task.completed_at >= _month_start(now),
        ).count(),
    }


def _recent_projects():
    projects = (
        Project.query
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return [
        {
            "id": p.id,
            "name": p.name,
            "client": p.client.name if p.client else None,
            "type": p.type,
            "status": p.status,
            "progress": p.progress,
            "location": p.location,
            "start_date": iso(p.start_date),
            "end_date": iso(p.end_date),
            "team": [
                {"id": m.user.id, "name": m.user.name, "role": m.role, "avatar": m.user.avatar}
                for m in p.members
            ],
        }
        for p in projects
    ]


def _upcoming_milestones():
    milestones = (
        Milestone.query
        .filter(Milestone.status.in_(OPEN_MILESTONE_STATUSES))
        .order_by(Milestone.due_date.asc(), Milestone.id.asc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return [
        {
            "id": m.id,
            "name": m.name,
            "project": m.project.name if m.project else None,
            "due_date": iso(m.due_date),
            "status": m.status,
        }
        for m in milestones
    ]


def _recent_activities():
    activities = (
        Activity.query
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return [a.to_dict() for a in activities]


def get_dashboard(now=None):
    return {
        "stats": _stats(now),
        "recent_projects": _recent_projects(),
        "upcoming_milestones": _upcoming_milestones(),
        "recent_activities": _recent_activities(),
    }

from datetime import date, datetime, timedelta, timezone

from flowsms.models import db as _db
from flowsms.models.project import Activity, Milestone, Project
from flowsms.models.task import Task
from flowsms.services import dashboard_service


def _seed(studio, make_user):
    project = studio["project"]
    make_user(role="viewer", is_active=False)
    _db.session.add(Project(name="Heritage Hotel", status="completed", client_id=studio["client"].id))

    now = datetime.now(timezone.utc)
    _db.session.add_all([
        Task(project_id=project.id, title="Todo", status="todo"),
        Task(project_id=project.id, title="Doing", status="in_progress"),
        Task(project_id=project.id, title="Review", status="review"),
        Task(project_id=project.id, title="Done now", status="completed", completed_at=now),
        Task(project_id=project.id, title="Done long ago", status="completed",
             completed_at=now - timedelta(days=400)),
    ])

    today = date.today()
    _db.session.add_all([
        Milestone(project_id=project.id, name=f"M{i}", due_date=today + timedelta(days=i), status="pending")
        for i in range(6, 0, -1)
    ])
    _db.session.add(Milestone(project_id=project.id, name="Closed", due_date=today - timedelta(days=30), status="completed"))
    _db.session.add(Activity(project_id=project.id, user_id=studio["admin"].id, action="created_task", target="Todo"))
    _db.session.commit()


def test_dashboard(client, studio, make_user):
    _seed(studio, make_user)

    res = client.get("/api/dashboard")
    assert res.status_code == 200
    body = res.get_json()

    assert body["stats"] == {
        "active_projects": 1,
        "total_members": 2,
        "pending_tasks": 2,
        "completed_this_month": 1,
    }

    recent = body["recent_projects"]
    assert {p["name"] for p in recent} == {"Al-Mamlaka Tower", "Heritage Hotel"}
    tower = next(p for p in recent if p["name"] == "Al-Mamlaka Tower")
    assert tower["client"] == "Saudi Development Corp"
    assert tower["team"][0]["name"] == "Omar Faisal"

    milestones = body["upcoming_milestones"]
    assert [m["name"] for m in milestones] == ["M1", "M2", "M3", "M4", "M5"]
    assert milestones[0]["project"] == "Al-Mamlaka Tower"

    assert body["recent_activities"][0]["user"] == "Swapnil Meena"
    assert body["recent_activities"][0]["project"] == "Al-Mamlaka Tower"


def test_empty_dashboard(client):
    body = client.get("/api/dashboard").get_json()
    assert body["stats"]["active_projects"] == 0
    assert body["recent_projects"] == []
    assert body["upcoming_milestones"] == []
    assert body["recent_activities"] == []


def test_completed_this_month_uses_month_start(studio):
    project = studio["project"]
    first_of_march = datetime(2025, 3, 1, 0, 30, tzinfo=timezone.utc)
    _db.session.add(Task(project_id=project.id, title="Feb", status="completed",
                         completed_at=datetime(2025, 2, 28, 23, 0, tzinfo=timezone.utc)))
    _db.session.add(Task(project_id=project.id, title="Mar", status="completed", completed_at=first_of_march))
    _db.session.commit()

    stats = dashboard_service.get_dashboard(now=datetime(2025, 3, 15, tzinfo=timezone.utc))["stats"]
    assert stats["completed_this_month"] == 1

from datetime import date

from flowsms.models import db as _db
from flowsms.models.project import Activity, Document, Milestone, Project, ProjectMember
from flowsms.models.task import Comment, Task


def test_project_crud_happy_path(client, studio, auth_headers):
    headers = auth_headers(user=studio["admin"])

    create_res = client.post("/api/projects", headers=headers, json={
        "name": "Riyadh Cultural Center",
        "client_id": studio["client"].id,
        "type": "architecture",
        "status": "planning",
        "start_date": "2024-03-01",
        "budget": "78000000",
        "members": [{"user_id": studio["designer"].id, "role": "Interior Designer"}],
    })
    assert create_res.status_code == 201
    created = create_res.get_json()
    pid = created["id"]
    assert created["client"]["name"] == "Saudi Development Corp"
    assert created["start_date"] == "2024-03-01"
    assert created["budget"] == 78000000
    assert created["team"][0]["role"] == "Interior Designer"

    list_res = client.get("/api/projects", headers=headers)
    assert list_res.status_code == 200
    listed = {p["id"]: p for p in list_res.get_json()}
    assert pid in listed
    assert listed[pid]["counts"] == {"tasks": 0, "documents": 0, "milestones": 0}

    upd_res = client.patch(f"/api/projects/{pid}", headers=headers, json={
        "name": "Riyadh Cultural Centre", "status": "active", "progress": 35,
    })
    assert upd_res.status_code == 200
    body = upd_res.get_json()
    assert body["name"] == "Riyadh Cultural Centre"
    assert body["status"] == "active"
    assert body["progress"] == 35
    # untouched fields keep their values
    assert body["type"] == "architecture"

    del_res = client.delete(f"/api/projects/{pid}", headers=headers)
    assert del_res.status_code == 200
    assert del_res.get_json()["success"] is True

    assert client.get(f"/api/projects/{pid}", headers=headers).status_code == 404


def test_create_requires_name_and_client(client, studio):
    res = client.post("/api/projects", json={"client_id": studio["client"].id})
    assert res.status_code == 400
    assert res.get_json()["error"] == "name is required"

    res = client.post("/api/projects", json={"name": "No client"})
    assert res.status_code == 400


def test_create_rejects_unknown_client_and_bad_choices(client, studio):
    res = client.post("/api/projects", json={"name": "X", "client_id": 9999})
    assert res.status_code == 400

    res = client.post("/api/projects", json={"name": "X", "client_id": studio["client"].id, "type": "landscape"})
    assert res.status_code == 400
    assert "type must be one of" in res.get_json()["error"]


def test_update_validation_leaves_project_unchanged(client, studio):
    pid = studio["project"].id
    res = client.patch(f"/api/projects/{pid}", json={"name": "Renamed", "progress": 140})
    assert res.status_code == 400

    _db.session.expire_all()
    assert _db.session.get(Project, pid).name == "Al-Mamlaka Tower"


def test_create_coerces_text_fields(client, studio):
    res = client.post("/api/projects", json={
        "name": "Jeddah Marina", "client_id": studio["client"].id, "description": 42, "location": ["Jeddah"],
    })
    assert res.status_code == 201
    body = res.get_json()
    assert body["description"] == "42"
    assert body["location"] == "['Jeddah']"


def test_create_rejects_malformed_members(client, studio):
    res = client.post("/api/projects", json={
        "name": "Jeddah Marina", "client_id": studio["client"].id, "members": [5],
    })
    assert res.status_code == 400
    assert res.get_json()["error"] == "members entries must be objects with user_id"
    assert Project.query.filter_by(name="Jeddah Marina").count() == 0


def test_update_rejects_malformed_members_and_keeps_team(client, studio):
    pid = studio["project"].id
    res = client.patch(f"/api/projects/{pid}", json={"members": ["x"]})
    assert res.status_code == 400

    _db.session.expire_all()
    team = ProjectMember.query.filter_by(project_id=pid).all()
    assert [(m.user_id, m.role) for m in team] == [(studio["designer"].id, "Architect")]


def test_update_replaces_team(client, studio, make_user):
    engineer = make_user(role="engineer")
    pid = studio["project"].id

    res = client.patch(f"/api/projects/{pid}", json={"members": [{"user_id": engineer.id, "role": "Structural"}]})
    assert res.status_code == 200
    team = res.get_json()["team"]
    assert [(m["id"], m["role"]) for m in team] == [(engineer.id, "Structural")]


def test_detail_includes_children(client, studio):
    project = studio["project"]
    _db.session.add(Milestone(project_id=project.id, name="Concept sign-off", due_date=date(2025, 3, 1)))
    _db.session.add(Document(
        project_id=project.id, name="Site plan.pdf", category="drawing",
        file_url="https://files.flow.life/site.pdf", uploader_id=studio["admin"].id,
    ))
    _db.session.add(Activity(project_id=project.id, user_id=studio["admin"].id, action="uploaded_document", target="Site plan.pdf"))
    parent = Task(project_id=project.id, title="Massing study", creator_id=studio["admin"].id)
    _db.session.add(parent)
    _db.session.flush()
    _db.session.add(Task(project_id=project.id, parent_id=parent.id, title="Option B"))
    _db.session.commit()

    res = client.get(f"/api/projects/{project.id}")
    assert res.status_code == 200
    body = res.get_json()
    assert body["client"]["email"] == "contact@saudidev.com"
    assert [p["name"] for p in body["phases"]] == ["Concept Design"]
    assert body["milestones"][0]["due_date"] == "2025-03-01"
    assert body["documents"][0]["uploaded_by"] == "Swapnil Meena"
    assert body["activities"][0]["action"] == "uploaded_document"
    # subtasks are not listed at project level
    assert [t["title"] for t in body["tasks"]] == ["Massing study"]
    assert body["counts"]["tasks"] == 2


def test_delete_cascades(client, studio):
    project = studio["project"]
    task = Task(project_id=project.id, title="Site analysis")
    _db.session.add(task)
    _db.session.flush()
    _db.session.add(Comment(task_id=task.id, content="Looks good"))
    _db.session.commit()

    assert client.delete(f"/api/projects/{project.id}").status_code == 200
    assert Task.query.count() == 0
    assert Comment.query.count() == 0
    assert ProjectMember.query.count() == 0


def test_permissions(client, studio, auth_headers):
    viewer = auth_headers("viewer")
    manager = auth_headers("project_manager")
    pid = studio["project"].id

    assert client.get("/api/projects", headers=viewer).status_code == 200
    denied = client.patch(f"/api/projects/{pid}", headers=viewer, json={"progress": 50})
    assert denied.status_code == 403
    assert denied.get_json() == {"error": "Permission denied", "required": "projects:edit"}

    assert client.patch(f"/api/projects/{pid}", headers=manager, json={"progress": 50}).status_code == 200
    # only admins delete projects
    assert client.delete(f"/api/projects/{pid}", headers=manager).status_code == 403

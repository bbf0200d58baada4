"""Programme (Gantt) endpoint tests; data comes from the bundled programs.json."""

from flowsms.services import program_service


def test_list_all_programs(client):
    res = client.get("/api/programs")
    assert res.status_code == 200
    body = res.get_json()
    assert body["total_programs"] == 3
    assert [p["project_id"] for p in body["programs"]] == ["PLOT-101", "PLOT-204", "RYD-017"]


def test_filter_by_project_name(client):
    body = client.get("/api/programs?projectName=bay harbor").get_json()
    assert [p["project_id"] for p in body["programs"]] == ["PLOT-204"]
    assert body["total_programs"] == 1


def test_unmatched_name_returns_empty_list(client):
    body = client.get("/api/programs?projectName=atlantis").get_json()
    assert body == {"programs": [], "total_programs": 0}


def test_lookup_by_project_id_ignores_case(client):
    res = client.get("/api/programs?projectId=ryd-017")
    assert res.status_code == 200
    program = res.get_json()["program"]
    assert program["project_name"] == "Flow Riyadh Gardens"
    assert program["stages"]


def test_unknown_project_id(client):
    res = client.get("/api/programs?projectId=PLOT-999")
    assert res.status_code == 404
    assert res.get_json() == {"error": "Program not found", "project_id": "PLOT-999"}


def test_stage_values_are_known():
    for program in program_service.list_programs():
        for stage in program["stages"]:
            assert stage["status"] in program_service.STAGE_STATUSES
            assert stage["category"] in program_service.STAGE_CATEGORIES

"""Health endpoints, request middleware and app-wide error handlers."""

from flowsms.middleware.diagnostics import feed_configuration


def test_liveness(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"


def test_readiness_reports_database_and_cache(client):
    res = client.get("/api/health/ready")
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "ok"
    assert body["checks"]["database"]["status"] == "ok"
    assert body["checks"]["cache"]["backend"] == "memory"
    assert body["checks"]["feeds"]["Airtable"] is True


def test_request_id_is_echoed(client):
    res = client.get("/api/health", headers={"X-Request-ID": "req-42"})
    assert res.headers["X-Request-ID"] == "req-42"
    assert float(res.headers["X-Request-Duration-Ms"]) >= 0


def test_request_id_is_generated(client):
    assert len(client.get("/api/health").headers["X-Request-ID"]) == 12


def test_unknown_route_is_json(client):
    res = client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.get_json() == {"error": "Not found", "path": "/api/nowhere"}


def test_wrong_method_is_json(client):
    res = client.post("/api/health")
    assert res.status_code == 405
    assert res.get_json() == {"error": "Method not allowed"}


def test_feed_configuration(app):
    feeds = feed_configuration(app.config)
    assert feeds["Monday.com"] is True
    assert feeds["Building info"] is True
    assert feed_configuration({"AIRTABLE_TOKEN": "x"})["Airtable"] is False

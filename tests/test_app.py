from dataclasses import replace

from fastapi.testclient import TestClient

from backend.app.database import _normalize_database_url
from backend.app.main import SERVICE_NAME, create_app


def test_root_and_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["message"] == SERVICE_NAME
    assert client.get("/health").json()["status"] == "Backend running"


def test_unknown_route_is_json_404(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Route not found", "status_code": 404}


def test_malformed_body_maps_to_400(client):
    r = client.post("/auth/login", content="{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_wrong_type_path_param_maps_to_400(client, make_user):
    user = make_user("FREELANCER")
    r = client.get("/jobs/abc", headers=user["headers"])
    assert r.status_code == 400


def _boom_app(settings, mailer):
    app = create_app(settings, mailer=mailer)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret internals")

    return app


def test_unexpected_error_details_shown_outside_production(settings, mailer):
    client = TestClient(_boom_app(settings, mailer), raise_server_exceptions=False)
    r = client.get("/boom")
    assert r.status_code == 500
    assert "secret internals" in r.json()["details"]["reason"]


def test_unexpected_error_details_hidden_in_production(settings, mailer):
    client = TestClient(_boom_app(replace(settings, app_env="production"), mailer), raise_server_exceptions=False)
    r = client.get("/boom")
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Something went wrong on our end. Please try again later."
    assert "details" not in body


def test_cors_allows_frontend_origin(client):
    r = client.options(
        "/jobs",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_startup_creates_tables(settings, mailer):
    app = create_app(settings, mailer=mailer)
    with TestClient(app) as client:
        assert client.get("/jobs").status_code == 200


def test_mysql_urls_use_pymysql_driver():
    assert _normalize_database_url("mysql://u:p@db/flow") == "mysql+pymysql://u:p@db/flow"
    assert _normalize_database_url("sqlite:///x.db") == "sqlite:///x.db"

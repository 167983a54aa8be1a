# tests/integration/test_health_and_cli.py
from __future__ import annotations

from blogapi.core.extensions import db
from blogapi.models.post import Post
from blogapi.models.user import User
from sqlalchemy import func, select

API = "/api/v1"


def _count(model) -> int:
    return db.session.execute(select(func.count()).select_from(model)).scalar_one()


# ------------------------------- HTTP ------------------------------------- #
def test_health(client):
    resp = client.get(f"{API}/health")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["message"] == "healthy"
    assert body["data"]["status"] == "ok"
    assert body["data"]["db"] == "ok"
    assert "version" in body["data"]


def test_request_id_is_echoed(client):
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "trace-42"})
    assert resp.headers["X-Request-ID"] == "trace-42"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get(f"{API}/nope", headers={"X-Request-ID": "trace-43"})
    body = resp.get_json()

    assert resp.status_code == 404
    assert body["code"] == "not_found"
    assert body["message"] == "Route '/api/v1/nope' not found"
    assert body["request_id"] == "trace-43"
    assert body["data"] is None


def test_wrong_method_is_405(client):
    resp = client.delete(f"{API}/register")
    assert resp.status_code == 405
    assert resp.get_json()["code"] == "method_not_allowed"


def test_cors_preflight_allows_refresh_header(client):
    resp = client.options(
        f"{API}/refresh",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Refresh-Token",
        },
    )
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert "refresh-token" in resp.headers["Access-Control-Allow-Headers"].lower()


# -------------------------------- CLI ------------------------------------- #
def test_seed_run_is_idempotent(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    assert first.exit_code == 0, first.output
    assert "Seed summary:" in first.output
    assert "created= 2" in first.output

    second = runner.invoke(args=["seed", "run"])
    assert second.exit_code == 0, second.output
    assert "existing= 2" in second.output
    assert "existing= 3" in second.output

    assert _count(User) == 2
    assert _count(Post) == 3


def test_seeded_user_can_log_in(app, login):
    app.test_cli_runner().invoke(args=["seed", "run"])

    resp = login(email="jane@example.com", password="devPass123")
    assert resp.status_code == 200


def test_seed_fresh_recreates_schema(app, register):
    register()
    result = app.test_cli_runner().invoke(args=["seed", "fresh", "--yes"])

    assert result.exit_code == 0, result.output
    assert _count(User) == 2
    assert db.session.execute(select(User).filter_by(email="jane@x.com")).first() is None


def test_seed_fresh_refuses_outside_dev_and_test(app):
    app.config["TESTING"] = False
    app.config["DEBUG"] = False

    result = app.test_cli_runner().invoke(args=["seed", "fresh", "--yes"])
    assert result.exit_code != 0
    assert "restricted to non-production" in result.output


def test_seed_status_reports_counts(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["seed", "run"])

    result = runner.invoke(args=["seed", "status"])
    assert result.exit_code == 0, result.output
    assert "users: 2" in result.output
    assert "posts: 3" in result.output

from __future__ import annotations

from fastapi.testclient import TestClient

from ticketing_auth.main import app


def test_healthz_and_metrics_are_served():
    # No context manager: the lifespan (and its Postgres pool) is not started.
    client = TestClient(app)

    assert client.get("/healthz").json() == {"status": "ok"}
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "auth_requests_total" in metrics.text


def test_auth_routes_are_mounted():
    client = TestClient(app)

    # Cookie-less requests reach the handlers and are rejected there, not by routing.
    assert client.get("/api/auth").status_code == 400
    assert client.post("/api/auth/signout").status_code == 400
    assert {"/api/auth", "/api/auth/signup", "/api/auth/signout"} <= set(app.openapi()["paths"])

"""
tests/test_health.py -- Integration tests for the liveness endpoints.

Covers:
  - GET /api/v1/health: 200 with status, version, and components
  - components.accounts tracks registrations
  - GET /api/v1/check-server: plain-text liveness string
  - No authentication required for either
"""

from __future__ import annotations


def test_health_returns_200_with_components(api_client):
    client, _, _ = api_client
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"]["app"] == "ok"
    assert data["components"]["accounts"] == 0


def test_health_counts_accounts(api_client):
    client, directory, _ = api_client
    directory.register("alice", "a@x.com", "pw123456")
    assert client.get("/api/v1/health").json()["components"]["accounts"] == 1


def test_check_server_plain_text(api_client):
    client, _, _ = api_client
    resp = client.get("/api/v1/check-server")
    assert resp.status_code == 200
    assert resp.text == "Server is running"
    assert resp.headers["content-type"].startswith("text/plain")

"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status and version fields
  - No authentication required
"""

from __future__ import annotations


def test_health_returns_200(client):
    """Health endpoint returns 200 with status and version."""
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert "version" in data


def test_health_no_auth_required(client):
    """Health endpoint is accessible without any authentication headers."""
    resp = client.get("/health", headers={})
    assert resp.status_code == 200

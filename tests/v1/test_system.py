# tests/v1/test_system.py
"""Tests for system endpoints."""

from fastapi import status


def test_public_config(client) -> None:
    response = client.get("/api/v1/system/config")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["voting"]["duplicate_policy"] == "strict-reject"
    assert body["rate_limits"]["post"] == {"max_events": 5, "window_minutes": 60}
    assert "vote" not in body["rate_limits"]
    assert "secret_key" not in str(body)


def test_public_config_reports_vote_limit(client, override_settings) -> None:
    override_settings(vote_rate_limit_enabled=True)
    body = client.get("/api/v1/system/config").json()
    assert body["rate_limits"]["vote"]["max_events"] == 30

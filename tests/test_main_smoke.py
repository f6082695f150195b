"""Smoke tests for the application wiring and the shared-secret middleware."""

import pytest
from fastapi.testclient import TestClient

from study_streak import main


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


def test_health_without_secret(client, monkeypatch):
    monkeypatch.setattr(main.settings, "app_secret", None)
    response = client.get("/api/health")
    assert response.status_code == 200


def test_secret_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(main.settings, "app_secret", "s3cret")
    assert client.get("/api/motto").status_code == 401
    response = client.get("/api/motto", headers={"X-App-Secret": "s3cret"})
    assert response.status_code == 200


def test_health_open_with_secret(client, monkeypatch):
    monkeypatch.setattr(main.settings, "app_secret", "s3cret")
    assert client.get("/api/health").status_code == 200

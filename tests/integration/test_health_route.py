from datetime import datetime
from unittest.mock import AsyncMock

from task_manager_api.core.exceptions import TaskStoreError


def test_health_reports_connected_store(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["uptime"] >= 0
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


def test_health_reports_store_failure(client, repository):
    repository.ping = AsyncMock(side_effect=TaskStoreError("connection refused", "ping"))

    response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["error"] == "connection refused"
    assert "timestamp" in body
    assert "uptime" in body


def test_health_does_not_touch_tasks(client, repository):
    client.post("/api/tasks", json={"text": "buy milk"})
    before = client.get("/api/tasks").json()

    client.get("/health")

    assert client.get("/api/tasks").json() == before

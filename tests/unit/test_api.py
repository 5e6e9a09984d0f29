"""Tests for the HTTP routers."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from src.main import app


@pytest.fixture
def client(patched_db) -> TestClient:
    """Test client backed by the in-memory database."""
    return TestClient(app)


def due(hours: int) -> str:
    return (datetime.now(UTC) + timedelta(hours=hours)).isoformat()


def create_rule(client: TestClient, **payload) -> dict:
    payload.setdefault("name", "Rule")
    response = client.post("/automations", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.unit
class TestTaskEndpoints:
    """/tasks"""

    def test_create_runs_keyword_rules(self, client: TestClient) -> None:
        rule = create_rule(
            client,
            name="Urgent Client Tasks",
            triggerType="KEYWORD_MATCH",
            triggerCondition="Client",
            actionType="SET_PRIORITY",
            actionTarget="high",
        )

        response = client.post("/tasks", json={"title": "Call the Client", "priority": "low", "dueDate": due(24)})

        assert response.status_code == 201
        body = response.json()
        assert body["task"]["priority"] == "high"
        assert body["automation"]["firedRuleIds"] == [rule["id"]]

        rules = client.get("/automations").json()
        assert rules[0]["executionCount"] == 1
        assert rules[0]["lastRun"] is not None

    def test_create_deleted_by_automation(self, client: TestClient) -> None:
        create_rule(client, triggerType="ON_CREATE", actionType="DELETE")

        response = client.post("/tasks", json={"title": "Spam", "dueDate": due(1)})

        assert response.status_code == 201
        assert response.json()["task"] is None
        assert client.get("/tasks").json() == []

    def test_create_rejects_blank_title(self, client: TestClient) -> None:
        response = client.post("/tasks", json={"title": "   ", "dueDate": due(1)})

        assert response.status_code == 422

    def test_list_and_filter(self, client: TestClient) -> None:
        client.post("/tasks", json={"title": "A", "dueDate": due(1)})
        client.post("/tasks", json={"title": "B", "dueDate": due(1), "status": "completed"})

        assert [t["title"] for t in client.get("/tasks").json()] == ["B", "A"]
        assert [t["title"] for t in client.get("/tasks", params={"status": "pending"}).json()] == ["A"]

    def test_completion_runs_on_complete_rules(self, client: TestClient) -> None:
        create_rule(client, name="Celebrate Wins", triggerType="ON_COMPLETE", actionType="NOTIFY")
        task = client.post("/tasks", json={"title": "Ship it", "dueDate": due(1)}).json()["task"]

        response = client.patch(f"/tasks/{task['id']}", json={"status": "completed"})

        assert response.status_code == 200
        body = response.json()
        assert body["task"]["status"] == "completed"
        (notification,) = body["automation"]["notifications"]
        assert notification["title"] == "Automation: Celebrate Wins"

        # Already completed: no second firing
        again = client.patch(f"/tasks/{task['id']}", json={"status": "completed"}).json()
        assert again["automation"] is None

    def test_patch_without_changes(self, client: TestClient) -> None:
        task = client.post("/tasks", json={"title": "Idle", "dueDate": due(1)}).json()["task"]

        response = client.patch(f"/tasks/{task['id']}", json={})

        assert response.status_code == 422

    def test_missing_task_returns_404(self, client: TestClient) -> None:
        response = client.get("/tasks/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "ERR_TASK_NOT_FOUND"

    def test_delete(self, client: TestClient) -> None:
        task = client.post("/tasks", json={"title": "Temp", "dueDate": due(1)}).json()["task"]

        assert client.delete(f"/tasks/{task['id']}").status_code == 204
        assert client.delete(f"/tasks/{task['id']}").status_code == 404


@pytest.mark.unit
class TestAutomationEndpoints:
    """/automations"""

    def test_unsupported_action_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/automations",
            json={"name": "Assign", "triggerType": "ON_CREATE", "actionType": "ASSIGN_USER"},
        )

        assert response.status_code == 422
        assert client.get("/automations").json() == []

    def test_toggle_and_delete(self, client: TestClient) -> None:
        rule = create_rule(client, triggerType="ON_CREATE", actionType="NOTIFY")

        toggled = client.post(f"/automations/{rule['id']}/toggle")

        assert toggled.status_code == 200
        assert toggled.json()["active"] is False
        assert client.delete(f"/automations/{rule['id']}").status_code == 204
        assert client.post(f"/automations/{rule['id']}/toggle").json()["code"] == "ERR_RULE_NOT_FOUND"


@pytest.mark.unit
class TestNotificationAndStatsEndpoints:
    """/notifications and /stats"""

    def test_notification_lifecycle(self, client: TestClient) -> None:
        create_rule(client, triggerType="ON_CREATE", actionType="NOTIFY", actionTarget="Added")
        client.post("/tasks", json={"title": "Task", "dueDate": due(1)})

        (notification,) = client.get("/notifications").json()
        assert notification["message"] == "Added"
        assert notification["read"] is False

        assert client.post(f"/notifications/{notification['id']}/read").json()["read"] is True
        assert client.get("/notifications").json() == []
        assert len(client.get("/notifications", params={"includeRead": "true"}).json()) == 1

        assert client.delete(f"/notifications/{notification['id']}").status_code == 204

    def test_stats(self, client: TestClient) -> None:
        client.post("/tasks", json={"title": "Late", "dueDate": due(-2), "priority": "high"})
        client.post("/tasks", json={"title": "Soon", "dueDate": due(2)})

        stats = client.get("/stats").json()

        assert stats == {"pendingTasks": 2, "completedToday": 0, "highPriority": 1, "overdueTasks": 1}

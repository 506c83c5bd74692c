"""
Integration tests for focusflow/dashboard/backend API endpoints.

Tests the FastAPI routes end to end:
- /api/health
- /api/tasks CRUD, dashboard and steps
- /api/steps edit, delete, toggle
- /api/brain-dumps CRUD
- /api/achievements and /api/streak
- Auth and error envelopes

These tests use an isolated SQLite store and FastAPI TestClient.
"""

from unittest.mock import patch

import pytest

from focusflow.store import StoreError

pytestmark = pytest.mark.integration


# ─────────────────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────────────────


class TestHealthEndpoint:
    """Tests for /api/health."""

    def test_healthy_store(self, test_client):
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["services"]["store"] == "healthy"
        assert data["services"]["store_backend"] == "sqlite"

    def test_degraded_when_store_fails(self, test_client, store):
        with patch.object(store, "select", side_effect=StoreError("down")):
            response = test_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"


# ─────────────────────────────────────────────────────────────────────────────
# Tasks
# ─────────────────────────────────────────────────────────────────────────────


class TestTaskEndpoints:
    """Tests for /api/tasks."""

    def test_create_task_returns_camel_case_record(self, create_task):
        task = create_task(priority="urgent", energyLevel=2)

        assert isinstance(task["id"], int)
        assert task["priority"] == "urgent"
        assert task["energyLevel"] == 2
        assert task["emotionalImportance"] == 50
        assert task["estimatedTime"] == 30
        assert task["context"] == "work"
        assert task["status"] == "active"
        assert task["completedAt"] is None
        assert task["userId"] == "single-user"

    def test_create_rejects_blank_title(self, test_client):
        response = test_client.post("/api/tasks", json={"title": "  "})

        assert response.status_code == 422
        assert response.json()["code"] == "invalid"

    def test_create_rejects_status(self, test_client):
        response = test_client.post("/api/tasks", json={"title": "x", "status": "completed"})

        assert response.status_code == 422

    def test_list_tasks(self, test_client, create_task):
        create_task(title="one")
        create_task(title="two", context="home")

        response = test_client.get("/api/tasks", params={"context": "home"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["tasks"][0]["title"] == "two"

    def test_list_rejects_bad_status(self, test_client):
        response = test_client.get("/api/tasks", params={"status": "done"})

        assert response.status_code == 422
        assert response.json()["code"] == "invalid"

    def test_get_task_detail(self, test_client, create_task):
        task = create_task()

        response = test_client.get(f"/api/tasks/{task['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["task"]["id"] == task["id"]
        assert data["steps"] == []
        assert data["progress"] == {"completed": 0, "total": 0, "percentage": 0}
        assert data["overdue"] is False

    def test_get_missing_task(self, test_client):
        response = test_client.get("/api/tasks/9999")

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found", "code": "not_found", "details": None}

    def test_patch_task(self, test_client, create_task):
        task = create_task()

        response = test_client.patch(f"/api/tasks/{task['id']}", json={"title": "Pay rent today", "energyLevel": 1})

        assert response.status_code == 200
        assert response.json()["title"] == "Pay rent today"
        assert response.json()["energyLevel"] == 1
        assert response.json()["createdAt"] == task["createdAt"]

    def test_patch_rejects_completed_at(self, test_client, create_task):
        task = create_task()

        response = test_client.patch(f"/api/tasks/{task['id']}", json={"completedAt": "2026-01-01T00:00:00"})

        assert response.status_code == 422

    def test_delete_task(self, test_client, create_task):
        task = create_task()
        test_client.post(f"/api/tasks/{task['id']}/steps", json={"stepTitle": "step"})

        response = test_client.delete(f"/api/tasks/{task['id']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert test_client.get(f"/api/tasks/{task['id']}").status_code == 404

    def test_store_failure_is_502(self, test_client, store):
        with patch.object(store, "select", side_effect=StoreError("Table API error: 503")):
            response = test_client.get("/api/tasks")

        assert response.status_code == 502
        assert response.json()["code"] == "store_error"


class TestDashboardEndpoint:
    """Tests for /api/tasks/dashboard."""

    def test_buckets(self, test_client, create_task):
        create_task(title="urgent", priority="urgent")
        create_task(title="quick", priority="quick-win", energyLevel=2)
        for i in range(4):
            create_task(title=f"low energy {i}", energyLevel=2)

        response = test_client.get("/api/tasks/dashboard", params={"energy_level": 2})

        assert response.status_code == 200
        data = response.json()
        view = data["view"]
        assert [t["title"] for t in view["urgent"]] == ["urgent"]
        assert [t["title"] for t in view["quickWins"]] == ["quick"]
        assert len(view["energyMatched"]) == 3
        assert len(view["active"]) == 6
        assert view["completionRate"] == 0
        assert data["hasSuggestions"] is True
        assert data["progress"]["variant"] == "default"
        assert "work" in data["filterOptions"]["contexts"]

    def test_rejects_energy_out_of_range(self, test_client):
        response = test_client.get("/api/tasks/dashboard", params={"energy_level": 9})

        assert response.status_code == 422
        assert response.json()["code"] == "invalid"

    def test_empty_dashboard(self, test_client):
        data = test_client.get("/api/tasks/dashboard").json()

        assert data["hasSuggestions"] is False
        assert data["view"]["totalCount"] == 0


# ─────────────────────────────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────────────────────────────


class TestStepEndpoints:
    """Tests for task steps."""

    def test_step_lifecycle(self, test_client, create_task):
        task = create_task()

        created = test_client.post(f"/api/tasks/{task['id']}/steps", json={"stepTitle": "Open banking app"})
        assert created.status_code == 201
        step = created.json()
        assert step["taskId"] == task["id"]
        assert step["isCompleted"] is False

        edited = test_client.patch(f"/api/steps/{step['id']}", json={"stepDescription": "Use the phone"})
        assert edited.json()["stepDescription"] == "Use the phone"

        toggled = test_client.post(f"/api/steps/{step['id']}/toggle")
        assert toggled.status_code == 200
        assert toggled.json()["step"]["isCompleted"] is True
        assert toggled.json()["allStepsCompleted"] is True
        assert toggled.json()["progress"]["percentage"] == 100

        listed = test_client.get(f"/api/tasks/{task['id']}/steps").json()
        assert listed["progress"] == {"completed": 1, "total": 1, "percentage": 100}

        assert test_client.delete(f"/api/steps/{step['id']}").status_code == 200
        assert test_client.get(f"/api/tasks/{task['id']}/steps").json()["steps"] == []

    def test_blank_step_title(self, test_client, create_task):
        task = create_task()

        response = test_client.post(f"/api/tasks/{task['id']}/steps", json={"stepTitle": ""})

        assert response.status_code == 422

    def test_steps_of_missing_task(self, test_client):
        assert test_client.get("/api/tasks/777/steps").status_code == 404

    def test_toggle_missing_step(self, test_client):
        assert test_client.post("/api/steps/777/toggle").status_code == 404


# ─────────────────────────────────────────────────────────────────────────────
# Brain dumps
# ─────────────────────────────────────────────────────────────────────────────


class TestBrainDumpEndpoints:
    """Tests for /api/brain-dumps."""

    def test_brain_dump_lifecycle(self, test_client):
        created = test_client.post("/api/brain-dumps", json={"content": "Email the landlord"})
        assert created.status_code == 201
        dump = created.json()
        assert dump["userId"] == "single-user"

        fetched = test_client.get(f"/api/brain-dumps/{dump['id']}")
        assert fetched.json()["content"] == "Email the landlord"

        edited = test_client.patch(f"/api/brain-dumps/{dump['id']}", json={"content": "Email landlord re: boiler"})
        assert edited.json()["content"] == "Email landlord re: boiler"
        assert edited.json()["createdAt"] == dump["createdAt"]

        listed = test_client.get("/api/brain-dumps").json()
        assert listed["total"] == 1
        assert listed["brainDumps"][0]["id"] == dump["id"]

        assert test_client.delete(f"/api/brain-dumps/{dump['id']}").status_code == 200
        assert test_client.get(f"/api/brain-dumps/{dump['id']}").status_code == 404

    def test_rejects_blank_content(self, test_client):
        response = test_client.post("/api/brain-dumps", json={"content": "   "})

        assert response.status_code == 422


# ─────────────────────────────────────────────────────────────────────────────
# Rewards
# ─────────────────────────────────────────────────────────────────────────────


class TestRewardEndpoints:
    """Tests for achievements and the streak."""

    def test_empty_rewards(self, test_client):
        achievements = test_client.get("/api/achievements").json()
        stats = test_client.get("/api/achievements/stats").json()
        streak = test_client.get("/api/streak").json()

        assert achievements == {"achievements": [], "timeline": {}, "total": 0}
        assert stats["completionRate"] == 0
        assert stats["currentStreak"] == 0
        assert streak["streak"] is None
        assert streak["isActive"] is False

    def test_delete_achievement(self, test_client, create_task):
        task = create_task()
        test_client.post(f"/api/tasks/{task['id']}/toggle")
        achievement = test_client.get("/api/achievements").json()["achievements"][0]

        response = test_client.delete(f"/api/achievements/{achievement['id']}")

        assert response.status_code == 200
        assert test_client.get("/api/achievements").json()["total"] == 0

    def test_delete_missing_achievement(self, test_client):
        assert test_client.delete("/api/achievements/4242").status_code == 404


# ─────────────────────────────────────────────────────────────────────────────
# Auth
# ─────────────────────────────────────────────────────────────────────────────


class TestAuth:
    """Tests for header-based user resolution."""

    def test_missing_header_is_401(self, test_client, require_auth):
        response = test_client.get("/api/tasks")

        assert response.status_code == 401
        assert response.json()["code"] == "HTTP_401"

    def test_health_is_public(self, test_client, require_auth):
        assert test_client.get("/api/health").status_code == 200

    def test_users_are_isolated(self, test_client, require_auth):
        alice = {require_auth: "alice"}
        bob = {require_auth: "bob"}

        created = test_client.post("/api/tasks", json={"title": "Alice's task"}, headers=alice)
        assert created.json()["userId"] == "alice"
        task_id = created.json()["id"]

        assert test_client.get("/api/tasks", headers=bob).json()["count"] == 0
        assert test_client.get(f"/api/tasks/{task_id}", headers=bob).status_code == 404
        assert test_client.post(f"/api/tasks/{task_id}/toggle", headers=bob).status_code == 404
        assert test_client.get(f"/api/tasks/{task_id}", headers=alice).status_code == 200

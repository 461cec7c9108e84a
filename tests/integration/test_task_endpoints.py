"""Integration tests for today's tasks and completion endpoints."""
import pytest

from habitual.utils.dates import today_string


async def create_ai_goal(app_client, user_id: str) -> dict:
    response = await app_client.post(
        "/api/generate-plan",
        json={
            "currentCondition": "Can walk 1 mile",
            "goal": "Run a 5k",
            "timeframe": 3,
            "category": "fitness",
            "difficulty": "medium",
            "userId": user_id,
        },
    )
    assert response.status_code == 201
    return response.json()["goal"]


@pytest.mark.asyncio
class TestTodayTasks:
    """Tests for resolving today's tasks."""

    async def test_new_ai_goal_shows_day_one(self, app_client):
        """Test that a goal created today resolves to its first task."""
        goal = await create_ai_goal(app_client, "int-today-1")

        response = await app_client.get("/api/today-tasks/int-today-1")

        assert response.status_code == 200
        tasks = response.json()["tasks"]
        assert len(tasks) == 1
        assert tasks[0]["goalId"] == goal["id"]
        assert tasks[0]["task"]["day"] == 1

    async def test_manual_goal_today_after_ai_goal(self, app_client):
        """Test that manual goals due today follow AI goals."""
        await app_client.post(
            "/api/manual-goal",
            json={
                "title": "Dentist",
                "description": "Book a checkup",
                "date": today_string(),
                "category": "health",
                "difficulty": "easy",
                "userId": "int-today-2",
            },
        )
        await app_client.post(
            "/api/manual-goal",
            json={
                "title": "Later",
                "description": "Not today",
                "date": "2099-01-01",
                "category": "health",
                "difficulty": "easy",
                "userId": "int-today-2",
            },
        )
        await create_ai_goal(app_client, "int-today-2")

        response = await app_client.get("/api/today-tasks/int-today-2")

        tasks = response.json()["tasks"]
        assert [task["category"] for task in tasks] == ["fitness", "health"]
        assert tasks[1]["task"]["goal"] == "Dentist"


@pytest.mark.asyncio
class TestCompleteTask:
    """Tests for toggling completion."""

    async def test_completing_all_days_completes_goal(self, app_client):
        """Test the completed/active round trip on an AI goal."""
        goal = await create_ai_goal(app_client, "int-complete-1")
        goal_id = goal["id"]

        for day in (1, 2, 3):
            response = await app_client.post(
                f"/api/complete-task/{goal_id}/{day}",
                json={"completed": True},
            )
            assert response.status_code == 200

        finished = response.json()["goal"]
        assert finished["completedDays"] == 3
        assert finished["status"] == "completed"

        repeat = await app_client.post(
            f"/api/complete-task/{goal_id}/3",
            json={"completed": True},
        )
        assert repeat.json()["goal"]["completedDays"] == 3

        undone = await app_client.post(
            f"/api/complete-task/{goal_id}/2",
            json={"completed": False},
        )
        body = undone.json()["goal"]
        assert body["completedDays"] == 2
        assert body["status"] == "active"
        assert body["dailyTasks"][1]["completedAt"] is None

        progress = await app_client.get("/api/progress/int-complete-1")
        summary = progress.json()["progress"]
        assert summary["completedTasks"] == 2
        assert summary["currentStreak"] == 1

    async def test_complete_unknown_day(self, app_client):
        goal = await create_ai_goal(app_client, "int-complete-2")

        response = await app_client.post(
            f"/api/complete-task/{goal['id']}/4",
            json={"completed": True},
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}

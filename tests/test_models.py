"""Tests for Pydantic models."""
import pytest
from datetime import datetime, timezone
from pydantic import ValidationError


class TestEnums:
    """Tests for enum values."""

    def test_goal_kind_values(self):
        from habitual.models.goal import GoalKind

        assert GoalKind.AI.value == "ai"
        assert GoalKind.MANUAL.value == "manual"

    def test_goal_status_values(self):
        from habitual.models.goal import GoalStatus

        assert GoalStatus.ACTIVE.value == "active"
        assert GoalStatus.COMPLETED.value == "completed"
        assert GoalStatus.ABANDONED.value == "abandoned"

    def test_difficulty_and_category_values(self):
        from habitual.models.goal import Category, Difficulty

        assert [d.value for d in Difficulty] == ["easy", "medium", "hard"]
        assert [c.value for c in Category] == ["fitness", "health", "learning", "mindfulness"]


class TestRequestModels:
    """Tests for request bodies."""

    def test_ai_goal_create_from_camel_case(self):
        from habitual.models.goal import AiGoalCreate

        body = AiGoalCreate.model_validate({
            "currentCondition": "Can walk 1 mile",
            "goal": "Run a 5k",
            "timeframe": 30,
            "category": "fitness",
            "difficulty": "medium",
            "userId": "user123",
        })

        assert body.current_condition == "Can walk 1 mile"
        assert body.timeframe == 30
        assert body.user_id == "user123"

    def test_ai_goal_create_user_optional(self):
        from habitual.models.goal import AiGoalCreate

        body = AiGoalCreate.model_validate({
            "currentCondition": "x",
            "goal": "y",
            "timeframe": 1,
            "category": "fitness",
            "difficulty": "easy",
        })

        assert body.user_id is None

    def test_ai_goal_create_non_numeric_timeframe(self):
        from habitual.models.goal import AiGoalCreate

        with pytest.raises(ValidationError):
            AiGoalCreate.model_validate({
                "currentCondition": "x",
                "goal": "y",
                "timeframe": "a month",
                "category": "fitness",
                "difficulty": "easy",
            })

    def test_ai_goal_create_boolean_timeframe(self):
        from habitual.models.goal import AiGoalCreate

        with pytest.raises(ValidationError):
            AiGoalCreate.model_validate_json(
                '{"currentCondition": "x", "goal": "y", "timeframe": true,'
                ' "category": "fitness", "difficulty": "easy"}'
            )

    def test_manual_goal_create_requires_date(self):
        from habitual.models.goal import ManualGoalCreate

        with pytest.raises(ValidationError):
            ManualGoalCreate.model_validate({
                "title": "Dentist",
                "description": "Checkup",
                "category": "health",
                "difficulty": "easy",
            })


class TestGoalModel:
    """Tests for the Goal model."""

    def test_goal_serializes_with_api_names(self):
        from habitual.models.goal import DailyTask, Goal

        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        goal = Goal(
            _id="abc123",
            user_id="user123",
            kind="ai",
            category="fitness",
            difficulty="easy",
            start_date=now,
            timeframe_days=1,
            daily_tasks=[DailyTask(day=1, goal="Walk", difficulty="easy")],
            created_at=now,
            updated_at=now,
        )

        data = goal.model_dump(by_alias=True)

        assert data["id"] == "abc123"
        assert data["userId"] == "user123"
        assert data["timeframeDays"] == 1
        assert data["completedDays"] == 0
        assert data["status"] == "active"
        assert data["dailyTasks"][0]["completedAt"] is None

    def test_task_for_day(self):
        from habitual.models.goal import DailyTask, Goal

        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        goal = Goal(
            _id="abc123",
            user_id="user123",
            kind="ai",
            category="fitness",
            difficulty="easy",
            start_date=now,
            daily_tasks=[
                DailyTask(day=1, goal="Walk", difficulty="easy"),
                DailyTask(day=2, goal="Jog", difficulty="medium"),
            ],
            created_at=now,
            updated_at=now,
        )

        assert goal.task_for_day(2).goal == "Jog"
        assert goal.task_for_day(3) is None

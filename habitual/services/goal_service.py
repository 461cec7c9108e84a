"""Goal service - business logic for creating and ending goals."""
import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from habitual.exceptions import GoalValidationError
from habitual.models.goal import (
    Category,
    DailyTask,
    Difficulty,
    Goal,
    GoalKind,
    GoalStatus,
)
from habitual.services.goal_store import GoalStore
from habitual.services.plan_generator import PlanGenerator, validate_timeframe
from habitual.utils.dates import parse_date, start_of_day, utcnow

logger = logging.getLogger(__name__)


def _require_text(field: str, value: Optional[str]) -> str:
    """Return the trimmed value, rejecting missing or blank text."""
    if value is None or not str(value).strip():
        raise GoalValidationError(f"{field} is required")
    return str(value).strip()


def _require_choice(enum_cls: type[Enum], field: str, value: Optional[str]):
    """Return the enum member named by value, case-insensitively."""
    text = _require_text(field, value).lower()
    try:
        return enum_cls(text)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise GoalValidationError(f"{field} must be one of: {allowed}")


class GoalService:
    """Service for handling goal lifecycle operations."""

    def __init__(self, db, generator: Optional[PlanGenerator] = None):
        """Initialize service with database connection and plan generator."""
        self.store = GoalStore(db)
        self.generator = generator

    async def create_ai_goal(
        self,
        user_id: str,
        current_condition: str,
        desired_achievement: str,
        timeframe_days: int,
        category: str,
        difficulty: str,
        now: Optional[datetime] = None,
    ) -> Goal:
        """
        Create a goal from a generated multi-day plan.

        All input is checked before the generator is called, and nothing is
        stored unless the generator returns a complete plan.

        Args:
            user_id: Owner of the goal
            current_condition: Where the user is starting from
            desired_achievement: What the user wants to achieve
            timeframe_days: Plan length in days
            category: Goal category
            difficulty: Overall goal difficulty
            now: Creation instant (defaults to the current time)

        Returns:
            Created goal

        Raises:
            GoalValidationError: If any field is missing or malformed
            GenerationFailure: If the generator did not return a valid plan
            StoreFailure: If the goal could not be saved
        """
        user_id = _require_text("userId", user_id)
        current_condition = _require_text("currentCondition", current_condition)
        desired_achievement = _require_text("goal", desired_achievement)
        timeframe_days = validate_timeframe(timeframe_days)
        category = _require_choice(Category, "category", category)
        difficulty = _require_choice(Difficulty, "difficulty", difficulty)

        if self.generator is None:
            raise RuntimeError("GoalService was created without a plan generator")

        logger.info("Generating %d-day plan for user %s", timeframe_days, user_id)
        daily_tasks = await self.generator.generate(
            current_condition,
            desired_achievement,
            timeframe_days,
        )

        now = now or utcnow()
        goal_doc = {
            "userId": user_id,
            "kind": GoalKind.AI.value,
            "category": category.value,
            "difficulty": difficulty.value,
            "startDate": now,
            "timeframeDays": timeframe_days,
            "currentCondition": current_condition,
            "desiredAchievement": desired_achievement,
            "dailyTasks": [GoalStore.task_to_doc(task) for task in daily_tasks],
            "completedDays": 0,
            "status": GoalStatus.ACTIVE.value,
            "createdAt": now,
            "updatedAt": now,
        }

        goal = await self.store.insert(goal_doc)
        logger.info("Created ai goal %s for user %s", goal.id, user_id)
        return goal

    async def create_manual_goal(
        self,
        user_id: str,
        title: str,
        description: str,
        target_date: str,
        category: str,
        difficulty: str,
        now: Optional[datetime] = None,
    ) -> Goal:
        """
        Create a single-task goal pinned to one calendar date.

        Args:
            user_id: Owner of the goal
            title: Task title
            description: Task description
            target_date: Day the task is due, as YYYY-MM-DD
            category: Goal category
            difficulty: Task difficulty
            now: Creation instant (defaults to the current time)

        Returns:
            Created goal

        Raises:
            GoalValidationError: If any field is missing or malformed
            StoreFailure: If the goal could not be saved
        """
        user_id = _require_text("userId", user_id)
        title = _require_text("title", title)
        description = _require_text("description", description)
        target_date = _require_text("date", target_date)
        category = _require_choice(Category, "category", category)
        difficulty = _require_choice(Difficulty, "difficulty", difficulty)

        try:
            pinned_day = parse_date(target_date)
        except ValueError:
            raise GoalValidationError("date must be a valid YYYY-MM-DD calendar date")

        task = DailyTask(
            day=1,
            goal=title,
            explanation=description,
            difficulty=difficulty,
            completed=False,
            date=target_date,
        )

        now = now or utcnow()
        goal_doc = {
            "userId": user_id,
            "kind": GoalKind.MANUAL.value,
            "category": category.value,
            "difficulty": difficulty.value,
            "startDate": start_of_day(pinned_day),
            "title": title,
            "description": description,
            "date": target_date,
            "dailyTasks": [GoalStore.task_to_doc(task)],
            "completedDays": 0,
            "status": GoalStatus.ACTIVE.value,
            "createdAt": now,
            "updatedAt": now,
        }

        goal = await self.store.insert(goal_doc)
        logger.info("Created manual goal %s for user %s on %s", goal.id, user_id, target_date)
        return goal

    async def list_goals(
        self,
        user_id: str,
        status: Optional[GoalStatus] = None,
    ) -> list[Goal]:
        """List a user's goals, optionally filtered by status."""
        return await self.store.find_by_user(user_id, status=status)

    async def get_goal(self, goal_id: str) -> Goal:
        """
        Get a single goal by ID.

        Raises:
            NotFoundError: If goal not found
        """
        return await self.store.find_by_id(goal_id)

    async def abandon_goal(
        self,
        goal_id: str,
        now: Optional[datetime] = None,
    ) -> Goal:
        """
        Move an active goal to the abandoned state.

        Raises:
            NotFoundError: If goal not found
            GoalValidationError: If the goal is not active
        """
        goal = await self.store.find_by_id(goal_id)

        if goal.status != GoalStatus.ACTIVE:
            raise GoalValidationError(f"Only active goals can be abandoned (goal is {goal.status.value})")

        goal.status = GoalStatus.ABANDONED
        goal.updated_at = now or utcnow()
        await self.store.save(goal)
        logger.info("Abandoned goal %s", goal.id)
        return goal

"""Completion service - toggling tasks and deriving goal status."""
import logging
from datetime import datetime
from typing import Optional

from habitual.exceptions import NotFoundError
from habitual.models.goal import Goal, GoalKind, GoalStatus
from habitual.services.goal_store import GoalStore
from habitual.utils.dates import utcnow

logger = logging.getLogger(__name__)


def completion_target(goal: Goal) -> int:
    """Number of completed tasks that finishes the goal."""
    if goal.kind == GoalKind.AI and goal.timeframe_days:
        return goal.timeframe_days
    return len(goal.daily_tasks)


def apply_completion(goal: Goal) -> Goal:
    """
    Recompute ``completed_days`` from the tasks and derive the status.

    The counter is always rebuilt from the task list. A goal whose
    count reaches its target becomes completed; a completed goal that
    drops below it goes back to active. Abandoned goals keep their status.
    """
    goal.completed_days = sum(1 for task in goal.daily_tasks if task.completed)

    if goal.status == GoalStatus.ABANDONED:
        return goal

    if goal.completed_days == completion_target(goal):
        goal.status = GoalStatus.COMPLETED
    elif goal.status == GoalStatus.COMPLETED:
        goal.status = GoalStatus.ACTIVE
    return goal


class CompletionService:
    """Service for marking tasks done or not done."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.store = GoalStore(db)

    async def set_completion(
        self,
        goal_id: str,
        day: int,
        completed: bool,
        now: Optional[datetime] = None,
    ) -> Goal:
        """
        Set one task's completion flag and persist the goal.

        Repeating a call with the same arguments leaves the goal unchanged.

        Args:
            goal_id: Goal ID
            day: Day number of the task
            completed: New completion flag
            now: Completion instant (defaults to the current time)

        Returns:
            Updated goal

        Raises:
            NotFoundError: If the goal or the day does not exist
            StoreFailure: If the goal could not be saved
        """
        goal = await self.store.find_by_id(goal_id)

        task = goal.task_for_day(day)
        if task is None:
            raise NotFoundError("Task not found")

        now = now or utcnow()
        if completed:
            if not task.completed:
                task.completed_at = now
            task.completed = True
        else:
            task.completed = False
            task.completed_at = None

        previous_status = goal.status
        apply_completion(goal)
        goal.updated_at = now

        await self.store.save(goal)

        logger.info(
            "Goal %s day %d marked %s (%d done, status %s)",
            goal.id,
            day,
            "complete" if completed else "incomplete",
            goal.completed_days,
            goal.status.value,
        )
        if goal.status != previous_status:
            logger.info("Goal %s moved from %s to %s", goal.id, previous_status.value, goal.status.value)

        return goal

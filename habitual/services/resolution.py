"""Daily resolution - which task each active goal has due today.

AI goals are addressed by whole calendar days since their start date;
manual goals by exact YYYY-MM-DD string match on their pinned task.
The two rules never mix: a goal's kind picks the rule.
"""
import logging
from datetime import date, datetime
from typing import Optional

from habitual.models.goal import DailyTask, Goal, GoalKind, GoalStatus, TodayTask
from habitual.services.goal_store import GoalStore
from habitual.utils.dates import format_date, local_date, utcnow

logger = logging.getLogger(__name__)


def day_offset(start: datetime, today: date) -> int:
    """
    Whole calendar days from a goal's start to today, never negative.

    Examples:
        >>> from datetime import timezone
        >>> day_offset(datetime(2024, 1, 1, 18, tzinfo=timezone.utc), date(2024, 1, 2))
        1
    """
    return max(0, (today - local_date(start)).days)


def resolve_ai_task(goal: Goal, today: date) -> Optional[DailyTask]:
    """Task whose day number is today's offset + 1, or None past the plan."""
    return goal.task_for_day(day_offset(goal.start_date, today) + 1)


def resolve_manual_task(goal: Goal, today: date) -> Optional[DailyTask]:
    """The goal's single task if it is pinned to today, else None."""
    if not goal.daily_tasks:
        return None
    task = goal.daily_tasks[0]
    if task.date is None or task.date != format_date(today):
        return None
    return task


_RESOLVERS = {
    GoalKind.AI: resolve_ai_task,
    GoalKind.MANUAL: resolve_manual_task,
}


def resolve_today(goals: list[Goal], now: datetime) -> list[TodayTask]:
    """
    Compute today's tasks for a set of goals.

    Goals that are not active, or have nothing due today, contribute
    nothing. AI goals come first, then manual goals; each group keeps
    the order it was given in.
    """
    today = local_date(now)
    results = {GoalKind.AI: [], GoalKind.MANUAL: []}

    for goal in goals:
        if goal.status != GoalStatus.ACTIVE:
            continue
        task = _RESOLVERS[goal.kind](goal, today)
        if task is None:
            continue
        results[goal.kind].append(
            TodayTask(goal_id=goal.id, category=goal.category, task=task)
        )

    return results[GoalKind.AI] + results[GoalKind.MANUAL]


class ResolutionService:
    """Reads a user's active goals and resolves today's tasks."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.store = GoalStore(db)

    async def today_tasks(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> list[TodayTask]:
        """
        Get the tasks due today for a user.

        Args:
            user_id: User ID
            now: Reference instant (defaults to the current time)

        Returns:
            Today's tasks, AI goals before manual goals
        """
        now = now or utcnow()
        goals = await self.store.find_by_user(user_id, status=GoalStatus.ACTIVE)
        tasks = resolve_today(goals, now)
        logger.debug(
            "Resolved %d of %d active goals for user %s on %s",
            len(tasks),
            len(goals),
            user_id,
            format_date(local_date(now)),
        )
        return tasks

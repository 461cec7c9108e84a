"""Progress service - completion totals and streaks for a user."""
from datetime import date, timedelta
from typing import Iterable, Optional

from habitual.models.goal import Goal, GoalStatus
from habitual.models.progress import ProgressSummary
from habitual.services.goal_store import GoalStore
from habitual.utils.dates import local_date, utcnow


def current_streak(completion_days: Iterable[date], today: date) -> int:
    """
    Count consecutive days with at least one completion, ending today.

    A streak that ended yesterday still counts until today is over.

    Examples:
        >>> current_streak([date(2024, 1, 1), date(2024, 1, 2)], date(2024, 1, 3))
        2
    """
    days = set(completion_days)
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def summarize(goals: list[Goal], today: date) -> ProgressSummary:
    """Build a progress summary from a user's goals."""
    statuses = [goal.status for goal in goals]
    tasks = [task for goal in goals for task in goal.daily_tasks]
    completed = [task for task in tasks if task.completed]

    rate = round(100 * len(completed) / len(tasks)) if tasks else 0
    streak = current_streak(
        (local_date(task.completed_at) for task in completed if task.completed_at),
        today,
    )

    return ProgressSummary(
        active_goals=statuses.count(GoalStatus.ACTIVE),
        completed_goals=statuses.count(GoalStatus.COMPLETED),
        abandoned_goals=statuses.count(GoalStatus.ABANDONED),
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        completion_rate=rate,
        current_streak=streak,
    )


class ProgressService:
    """Service for progress reporting."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.store = GoalStore(db)

    async def summary(self, user_id: str, today: Optional[date] = None) -> ProgressSummary:
        """Summarize all of a user's goals as of today."""
        goals = await self.store.find_by_user(user_id)
        return summarize(goals, today or local_date(utcnow()))

"""Goal model definitions.

Documents are stored with camelCase keys; the aliases below keep the API
and the stored layout identical.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class GoalKind(str, Enum):
    """How a goal's tasks were produced, and how today's task is found."""

    AI = "ai"
    MANUAL = "manual"


class GoalStatus(str, Enum):
    """Goal lifecycle states. Only ACTIVE is non-terminal."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class Difficulty(str, Enum):
    """Difficulty levels for goals and individual tasks."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Category(str, Enum):
    """Categories offered when creating a goal."""

    FITNESS = "fitness"
    HEALTH = "health"
    LEARNING = "learning"
    MINDFULNESS = "mindfulness"


class DailyTask(BaseModel):
    """One day's action within a goal."""

    day: int
    goal: str
    explanation: str = ""
    difficulty: Difficulty
    completed: bool = False
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")
    date: Optional[str] = None  # YYYY-MM-DD, manual goals only

    model_config = {"populate_by_name": True}


class AiGoalCreate(BaseModel):
    """Request body for generating an AI plan."""

    current_condition: str = Field(alias="currentCondition")
    goal: str
    timeframe: StrictInt
    category: str
    difficulty: str
    user_id: Optional[str] = Field(default=None, alias="userId")

    model_config = {"populate_by_name": True}


class ManualGoalCreate(BaseModel):
    """Request body for a single-day manual goal."""

    title: str
    description: str
    date: str  # YYYY-MM-DD
    category: str
    difficulty: str
    user_id: Optional[str] = Field(default=None, alias="userId")

    model_config = {"populate_by_name": True}


class CompletionUpdate(BaseModel):
    """Request body for toggling a task."""

    completed: bool


class Goal(BaseModel):
    """Full goal model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str = Field(alias="userId")
    kind: GoalKind
    category: str
    difficulty: Difficulty
    start_date: datetime = Field(alias="startDate")
    timeframe_days: Optional[int] = Field(default=None, alias="timeframeDays")
    current_condition: Optional[str] = Field(default=None, alias="currentCondition")
    desired_achievement: Optional[str] = Field(default=None, alias="desiredAchievement")
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    daily_tasks: list[DailyTask] = Field(alias="dailyTasks")
    completed_days: int = Field(default=0, alias="completedDays")
    status: GoalStatus = GoalStatus.ACTIVE
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True}

    def task_for_day(self, day: int) -> Optional[DailyTask]:
        """Return the task with the given day number, if any."""
        for task in self.daily_tasks:
            if task.day == day:
                return task
        return None


class TodayTask(BaseModel):
    """A task due today, tagged with its goal."""

    goal_id: str = Field(alias="goalId")
    category: str
    task: DailyTask

    model_config = {"populate_by_name": True}


class GoalResponse(BaseModel):
    goal: Goal


class GoalListResponse(BaseModel):
    goals: list[Goal]


class TodayTasksResponse(BaseModel):
    tasks: list[TodayTask]

"""Progress summary model definitions."""
from pydantic import BaseModel, Field


class ProgressSummary(BaseModel):
    """Aggregate completion figures for one user."""

    active_goals: int = Field(alias="activeGoals")
    completed_goals: int = Field(alias="completedGoals")
    abandoned_goals: int = Field(alias="abandonedGoals")
    total_tasks: int = Field(alias="totalTasks")
    completed_tasks: int = Field(alias="completedTasks")
    completion_rate: int = Field(alias="completionRate")  # percent, 0-100
    current_streak: int = Field(alias="currentStreak")  # days

    model_config = {"populate_by_name": True}


class ProgressResponse(BaseModel):
    progress: ProgressSummary

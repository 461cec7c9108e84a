"""Task router - today's tasks and completion toggles."""
from fastapi import APIRouter, Depends, HTTPException, status

from habitual.database import get_database
from habitual.exceptions import NotFoundError
from habitual.models.goal import CompletionUpdate, GoalResponse, TodayTasksResponse
from habitual.services.completion_service import CompletionService
from habitual.services.resolution import ResolutionService


router = APIRouter(prefix="/api", tags=["tasks"])


@router.get("/today-tasks/{user_id}", response_model=TodayTasksResponse)
async def today_tasks(
    user_id: str,
    db=Depends(get_database),
):
    """
    Get the tasks due today across a user's active goals.

    Args:
        user_id: User ID
        db: Database connection

    Returns:
        Today's tasks, AI goals first
    """
    service = ResolutionService(db)
    tasks = await service.today_tasks(user_id=user_id)
    return TodayTasksResponse(tasks=tasks)


@router.post("/complete-task/{goal_id}/{day}", response_model=GoalResponse)
async def complete_task(
    goal_id: str,
    day: int,
    body: CompletionUpdate,
    db=Depends(get_database),
):
    """
    Mark a task complete or incomplete.

    Args:
        goal_id: Goal ID
        day: Day number of the task
        body: New completion flag
        db: Database connection

    Returns:
        Updated goal

    Raises:
        HTTPException: If goal or day not found (404)
    """
    service = CompletionService(db)

    try:
        goal = await service.set_completion(
            goal_id=goal_id,
            day=day,
            completed=body.completed,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return GoalResponse(goal=goal)

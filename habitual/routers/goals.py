"""Goal router - API endpoints for creating and managing goals."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from habitual.config import settings
from habitual.database import get_database
from habitual.exceptions import GenerationFailure, GoalValidationError, NotFoundError
from habitual.models.goal import (
    AiGoalCreate,
    GoalListResponse,
    GoalResponse,
    GoalStatus,
    ManualGoalCreate,
)
from habitual.services.goal_service import GoalService
from habitual.services.plan_generator import PlanGenerator, get_plan_generator


router = APIRouter(prefix="/api", tags=["goals"])


@router.post("/generate-plan", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def generate_plan(
    body: AiGoalCreate,
    db=Depends(get_database),
    generator: PlanGenerator = Depends(get_plan_generator),
):
    """
    Create an AI goal from a generated plan.

    - Validates all fields before calling the generator
    - Returns 502 if the generator output is unusable; nothing is saved
    """
    service = GoalService(db, generator=generator)

    try:
        goal = await service.create_ai_goal(
            user_id=body.user_id or settings.default_user_id,
            current_condition=body.current_condition,
            desired_achievement=body.goal,
            timeframe_days=body.timeframe,
            category=body.category,
            difficulty=body.difficulty,
        )
    except GoalValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GenerationFailure as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate plan: {e}",
        )

    return GoalResponse(goal=goal)


@router.post("/manual-goal", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_goal(
    body: ManualGoalCreate,
    db=Depends(get_database),
):
    """
    Create a single-day goal pinned to a YYYY-MM-DD date.
    """
    service = GoalService(db)

    try:
        goal = await service.create_manual_goal(
            user_id=body.user_id or settings.default_user_id,
            title=body.title,
            description=body.description,
            target_date=body.date,
            category=body.category,
            difficulty=body.difficulty,
        )
    except GoalValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return GoalResponse(goal=goal)


@router.get("/goals/{user_id}", response_model=GoalListResponse)
async def list_goals(
    user_id: str,
    goal_status: Optional[GoalStatus] = Query(None, alias="status", description="Filter by status"),
    db=Depends(get_database),
):
    """
    List a user's goals, optionally filtered by status.
    """
    service = GoalService(db)
    goals = await service.list_goals(user_id=user_id, status=goal_status)
    return GoalListResponse(goals=goals)


@router.get("/goal/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: str,
    db=Depends(get_database),
):
    """
    Get a single goal.

    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        goal = await service.get_goal(goal_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return GoalResponse(goal=goal)


@router.post("/goal/{goal_id}/abandon", response_model=GoalResponse)
async def abandon_goal(
    goal_id: str,
    db=Depends(get_database),
):
    """
    Abandon an active goal.

    - Returns 404 if goal not found
    - Returns 409 if the goal is already completed or abandoned
    """
    service = GoalService(db)
    try:
        goal = await service.abandon_goal(goal_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GoalValidationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return GoalResponse(goal=goal)

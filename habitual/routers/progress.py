"""Progress router - completion summary endpoint."""
from fastapi import APIRouter, Depends

from habitual.database import get_database
from habitual.models.progress import ProgressResponse
from habitual.services.progress_service import ProgressService


router = APIRouter(prefix="/api", tags=["progress"])


@router.get("/progress/{user_id}", response_model=ProgressResponse)
async def get_progress(
    user_id: str,
    db=Depends(get_database),
):
    """Completion totals and current streak for a user."""
    service = ProgressService(db)
    return ProgressResponse(progress=await service.summary(user_id=user_id))

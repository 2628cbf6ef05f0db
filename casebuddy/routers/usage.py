from fastapi import APIRouter, Depends

from ..auth import current_active_user
from ..dependencies import get_quota_tracker
from ..schemas.usage import QuotaStatus
from ..schemas.users import User
from ..services.usage import QuotaTracker

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("/feedback", response_model=QuotaStatus)
async def get_feedback_usage(
    user: User = Depends(current_active_user),
    quota: QuotaTracker = Depends(get_quota_tracker),
):
    """Get today's AI feedback usage for the current user."""
    return await quota.get_remaining(str(user.id), user.email)

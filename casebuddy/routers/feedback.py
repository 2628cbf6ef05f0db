"""API endpoints for AI feedback on case answers."""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ..auth import current_active_user
from ..dependencies import get_feedback_service
from ..domains.feedback.service import FeedbackService
from ..schemas.feedback import FeedbackCreate, FeedbackRecord
from ..schemas.users import User
from ..utils.errors import DocumentNotFoundError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackRecord)
async def generate_feedback(
    request: FeedbackCreate,
    user: User = Depends(current_active_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackRecord:
    """Generate AI feedback for an answer, or return the existing feedback.

    Raises:
        ValidationError: If the answer is too short
        QuotaExceededError: If the daily limit is reached
        GenerationError: If the model call fails
    """
    return await service.generate_feedback(
        answer_id=request.answer_id,
        user_id=str(user.id),
        user_email=user.email,
        case_id=request.case_id,
        case_title=request.case_title,
        case_description=request.case_description,
        user_answer=request.user_answer,
    )


@router.get("", response_model=List[FeedbackRecord])
async def get_feedback_history(
    user: User = Depends(current_active_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> List[FeedbackRecord]:
    """Get the current user's feedback, newest first."""
    return await service.get_user_feedback_history(str(user.id))


@router.get("/{answer_id}", response_model=FeedbackRecord)
async def get_feedback(
    answer_id: str,
    user: User = Depends(current_active_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackRecord:
    """Get the current user's feedback for an answer.

    Feedback owned by another user is reported as not found.
    """
    feedback = await service.get_feedback_for_answer(answer_id)
    if feedback is None or feedback.user_id != str(user.id):
        raise DocumentNotFoundError("feedback", {"answer_id": answer_id})
    return feedback

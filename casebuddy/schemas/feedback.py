"""Schema for AI feedback records."""

from datetime import datetime, timezone
from typing import Annotated, List, Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field
from pymongo import DESCENDING, IndexModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFeedback(BaseModel):
    """Feedback sections parsed from the model output.

    ``None`` means the section heading could not be located; an empty list
    means the heading was found but carried no bullet points.
    """

    strengths: Optional[List[str]] = None
    improvements: Optional[List[str]] = None
    missing: Optional[List[str]] = None
    frameworks: Optional[List[str]] = None


class FeedbackBase(BaseModel):
    """Fields shared by stored and returned feedback."""

    answer_id: str
    user_id: str
    case_id: str
    case_title: str
    user_answer: str

    # Full model output, kept so the structure can always be re-derived
    raw_text: str
    structured: StructuredFeedback = Field(default_factory=StructuredFeedback)

    generated_at: datetime = Field(default_factory=utc_now)


class FeedbackRecord(FeedbackBase):
    """One AI feedback result for one submitted answer."""

    id: str


class FeedbackDocument(FeedbackBase, Document):
    """Stored AI feedback. At most one document exists per answer."""

    answer_id: Annotated[str, Indexed(unique=True)]
    user_id: Annotated[str, Indexed()]

    class Settings:
        name = "ai_feedback"
        indexes = [IndexModel([("user_id", 1), ("generated_at", DESCENDING)], name="user_history")]


class FeedbackCreate(BaseModel):
    """Request body for generating feedback on an answer."""

    answer_id: str = Field(min_length=1)
    case_id: str = Field(min_length=1)
    case_title: str
    case_description: str
    user_answer: str

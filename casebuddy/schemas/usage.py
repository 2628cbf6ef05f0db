from datetime import datetime
from typing import Annotated, Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field
from pymongo import IndexModel

from .feedback import utc_now


class DailyQuotaDocument(Document):
    """One user's AI feedback request count for one UTC calendar day."""

    user_id: Annotated[str, Indexed()]
    date: str  # YYYY-MM-DD
    request_count: int = Field(default=0, ge=0)
    last_request_at: Optional[datetime] = Field(default_factory=utc_now)

    class Settings:
        name = "daily_limits"
        indexes = [IndexModel([("user_id", 1), ("date", 1)], unique=True, name="user_date_unique")]


class QuotaStatus(BaseModel):
    used: int
    remaining: int
    limit: int
    is_limited: bool

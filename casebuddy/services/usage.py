"""Daily AI feedback quota tracking."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config import settings
from ..schemas.feedback import utc_now
from ..schemas.usage import DailyQuotaDocument, QuotaStatus
from ..utils.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def today_utc() -> str:
    """Today's UTC date as ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).date().isoformat()


class PrivilegePolicy(ABC):
    """Decides which users bypass the daily quota."""

    @abstractmethod
    def is_privileged(self, email: Optional[str]) -> bool:
        pass


class AdminEmailPolicy(PrivilegePolicy):
    """Grants unlimited quota to a fixed set of admin emails."""

    def __init__(self, admin_emails: Optional[Iterable[str]] = None):
        emails = settings.quota.admin_emails if admin_emails is None else admin_emails
        self.admin_emails = {email.strip().lower() for email in emails if email}

    def is_privileged(self, email: Optional[str]) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.admin_emails


class QuotaRepository:
    """Repository for daily quota counters."""

    async def get_count(self, user_id: str, date: str) -> int:
        """Get a user's request count for a day.

        Args:
            user_id: User ID
            date: UTC date string

        Returns:
            The stored count, 0 when no record exists yet
        """
        try:
            record = await DailyQuotaDocument.find_one(
                DailyQuotaDocument.user_id == user_id,
                DailyQuotaDocument.date == date,
            )
        except PyMongoError as e:
            raise StoreUnavailableError("quota read", str(e)) from e
        return record.request_count if record else 0

    async def increment_if_below(self, user_id: str, date: str, limit: int) -> bool:
        """Atomically add one request unless the limit is already reached.

        The record is created on the first request of the day. When it exists
        at the limit the filter matches nothing, the insert collides with the
        unique ``(user_id, date)`` index and the increment is refused.

        Args:
            user_id: User ID
            date: UTC date string
            limit: Daily limit

        Returns:
            True if the request was counted, False if the limit was reached
        """
        if limit <= 0:
            return False

        now = utc_now()
        try:
            await DailyQuotaDocument.find_one(
                DailyQuotaDocument.user_id == user_id,
                DailyQuotaDocument.date == date,
                DailyQuotaDocument.request_count < limit,
            ).upsert(
                {"$inc": {"request_count": 1}, "$set": {"last_request_at": now}},
                on_insert=DailyQuotaDocument(user_id=user_id, date=date, request_count=1, last_request_at=now),
            )
        except DuplicateKeyError:
            return False
        except PyMongoError as e:
            raise StoreUnavailableError("quota increment", str(e)) from e
        return True


class QuotaTracker:
    """Tracks and enforces the per-user daily AI feedback budget."""

    def __init__(
        self,
        repository: Optional[QuotaRepository] = None,
        policy: Optional[PrivilegePolicy] = None,
        limit: Optional[int] = None,
        privileged_remaining: Optional[int] = None,
    ):
        self.repository = repository or QuotaRepository()
        self.policy = policy or AdminEmailPolicy()
        self.limit = settings.quota.daily_limit if limit is None else limit
        self.privileged_remaining = (
            settings.quota.privileged_remaining if privileged_remaining is None else privileged_remaining
        )
        self.logger = logging.getLogger(__name__)

    def is_privileged(self, email: Optional[str]) -> bool:
        return self.policy.is_privileged(email)

    async def get_remaining(self, user_id: str, email: Optional[str], today: Optional[str] = None) -> QuotaStatus:
        """Get a user's usage for the day.

        Privileged users bypass the store. If the store cannot be read the
        full quota is reported, so infrastructure trouble never blocks users.

        Args:
            user_id: The ID of the user to check
            email: The user's email, used for the privilege check
            today: UTC date string, defaults to the current date

        Returns:
            Usage statistics including used count, remaining uses and limit
        """
        if self.is_privileged(email):
            return QuotaStatus(used=0, remaining=self.privileged_remaining, limit=self.limit, is_limited=False)

        today = today or today_utc()
        try:
            used = await self.repository.get_count(user_id, today)
        except StoreUnavailableError as e:
            self.logger.warning(f"Quota read failed for user {user_id}, allowing request: {e.message}")
            used = 0

        remaining = max(0, self.limit - used)
        return QuotaStatus(used=used, remaining=remaining, limit=self.limit, is_limited=remaining <= 0)

    async def can_consume(self, user_id: str, email: Optional[str], today: Optional[str] = None) -> bool:
        """Check whether a user may make another request today. Read only."""
        status = await self.get_remaining(user_id, email, today)
        return not status.is_limited

    async def try_consume(self, user_id: str, email: Optional[str], today: Optional[str] = None) -> bool:
        """Count one billable request against today's quota.

        Increments at most once per call and never past the limit.

        Returns:
            True if the request is allowed, False if the limit was reached
        """
        if self.is_privileged(email):
            return True

        allowed = await self.repository.increment_if_below(user_id, today or today_utc(), self.limit)
        if not allowed:
            self.logger.info(f"User {user_id} reached the daily limit of {self.limit}")
        return allowed

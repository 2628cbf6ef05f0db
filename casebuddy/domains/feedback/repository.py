"""Repository for the feedback domain."""

import logging
from typing import List, Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from ...schemas.feedback import FeedbackBase, FeedbackDocument, FeedbackRecord
from ...utils.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def _to_record(document: FeedbackDocument) -> FeedbackRecord:
    return FeedbackRecord(
        id=str(document.id),
        **document.model_dump(include=set(FeedbackBase.model_fields)),
    )


class FeedbackRepository:
    """Repository for AI feedback data access."""

    def __init__(self):
        """Initialize the repository."""
        self.logger = logging.getLogger(__name__)

    async def get_by_answer_id(self, answer_id: str) -> Optional[FeedbackRecord]:
        """Get the feedback stored for an answer.

        Args:
            answer_id: Answer ID

        Returns:
            Feedback record or None if none was generated yet
        """
        try:
            document = await FeedbackDocument.find_one(FeedbackDocument.answer_id == answer_id)
        except PyMongoError as e:
            raise StoreUnavailableError("feedback lookup", str(e)) from e
        return _to_record(document) if document else None

    async def create(self, feedback: FeedbackBase) -> FeedbackRecord:
        """Store new feedback.

        A concurrent insert for the same answer loses against the unique
        index; the already stored record is returned instead.

        Args:
            feedback: Feedback fields to persist

        Returns:
            The stored record
        """
        document = FeedbackDocument(**feedback.model_dump())
        try:
            await document.insert()
        except DuplicateKeyError:
            self.logger.info(f"Feedback for answer {feedback.answer_id} already stored, returning existing record")
            existing = await self.get_by_answer_id(feedback.answer_id)
            if existing is None:
                raise StoreUnavailableError("feedback insert", "duplicate key without matching document")
            return existing
        except PyMongoError as e:
            raise StoreUnavailableError("feedback insert", str(e)) from e

        return _to_record(document)

    async def list_for_user(self, user_id: str, limit: int = 100) -> List[FeedbackRecord]:
        """Get a user's feedback, newest first.

        Args:
            user_id: User ID
            limit: Maximum number of records

        Returns:
            Feedback records
        """
        try:
            documents = (
                await FeedbackDocument.find(FeedbackDocument.user_id == user_id)
                .sort("-generated_at")
                .limit(limit)
                .to_list()
            )
        except PyMongoError as e:
            raise StoreUnavailableError("feedback history", str(e)) from e
        return [_to_record(document) for document in documents]

"""AI feedback service implementation."""

import logging
from typing import List, Optional

from ...ai.prompts.base import Prompt
from ...ai.prompts.case_feedback import create_case_feedback_prompt
from ...ai.providers.base import BaseProvider
from ...ai.providers.factory import create_provider
from ...config import settings
from ...schemas.feedback import FeedbackBase, FeedbackRecord
from ...services.feedback_parser import needs_reparse, parse_feedback
from ...services.usage import QuotaTracker, today_utc
from ...utils.errors import GenerationError, QuotaExceededError, ValidationError
from .repository import FeedbackRepository

logger = logging.getLogger(__name__)


class FeedbackService:
    """Generates, stores and serves AI feedback on case answers.

    Generation is idempotent per answer: once feedback exists it is returned
    as is, without touching the quota or the model.
    """

    def __init__(
        self,
        repository: Optional[FeedbackRepository] = None,
        quota: Optional[QuotaTracker] = None,
        provider: Optional[BaseProvider] = None,
        prompt: Optional[Prompt] = None,
        min_answer_length: Optional[int] = None,
    ):
        """Initialize the feedback service.

        Args:
            repository: Feedback storage, Mongo-backed by default
            quota: Daily quota tracker
            provider: Text generation provider, the configured default if None
            prompt: Evaluator prompt
            min_answer_length: Shortest answer (after trimming) worth evaluating
        """
        self.logger = logging.getLogger(__name__)
        self.repository = repository or FeedbackRepository()
        self.quota = quota or QuotaTracker()
        self.provider = provider or create_provider()
        self.prompt = prompt or create_case_feedback_prompt()
        self.min_answer_length = (
            settings.quota.min_answer_length if min_answer_length is None else min_answer_length
        )

    async def get_feedback_for_answer(self, answer_id: str) -> Optional[FeedbackRecord]:
        """Get previously generated feedback for an answer, if any."""
        return await self.repository.get_by_answer_id(answer_id)

    async def _generate_text(self, case_title: str, case_description: str, user_answer: str) -> str:
        prompt_text = self.prompt.format(
            case_title=case_title,
            case_description=case_description,
            user_answer=user_answer,
        )
        try:
            raw_text = await self.provider.generate_text(
                prompt_text,
                temperature=self.prompt.temperature,
                max_tokens=self.prompt.max_tokens,
            )
        except Exception as e:
            self.logger.error(f"Feedback generation failed: {e}", exc_info=True)
            raise GenerationError() from e

        if not raw_text or not raw_text.strip():
            self.logger.error("Feedback generation returned empty text")
            raise GenerationError()

        return raw_text

    async def generate_feedback(
        self,
        answer_id: str,
        user_id: str,
        user_email: Optional[str],
        case_id: str,
        case_title: str,
        case_description: str,
        user_answer: str,
    ) -> FeedbackRecord:
        """Generate and store AI feedback for an answer.

        Args:
            answer_id: The answer to evaluate
            user_id: The requesting user
            user_email: The requesting user's email, used for the privilege check
            case_id: The case the answer responds to
            case_title: Case title, embedded in the prompt
            case_description: Case description, embedded in the prompt
            user_answer: The answer text

        Returns:
            The stored feedback, existing or newly generated

        Raises:
            ValidationError: If the answer is too short to evaluate
            QuotaExceededError: If the user's daily limit is reached
            GenerationError: If the model call fails
        """
        existing = await self.repository.get_by_answer_id(answer_id)
        if existing:
            self.logger.debug(f"Returning existing feedback {existing.id} for answer {answer_id}")
            return existing

        if len(user_answer.strip()) < self.min_answer_length:
            raise ValidationError(
                "Your answer is too short. Please provide a detailed response "
                f"(at least {self.min_answer_length} characters) for meaningful AI feedback.",
                details={"min_length": self.min_answer_length},
            )

        today = today_utc()
        if not await self.quota.can_consume(user_id, user_email, today):
            raise QuotaExceededError(self.quota.limit)

        self.logger.info(f"Generating feedback for answer {answer_id} on case {case_id}")
        raw_text = await self._generate_text(case_title, case_description, user_answer)
        structured = parse_feedback(raw_text)

        # Charged only after a successful generation
        if not self.quota.is_privileged(user_email):
            if not await self.quota.try_consume(user_id, user_email, today):
                self.logger.warning(
                    f"User {user_id} passed the quota check but the limit was reached before the increment"
                )

        feedback = await self.repository.create(
            FeedbackBase(
                answer_id=answer_id,
                user_id=user_id,
                case_id=case_id,
                case_title=case_title,
                user_answer=user_answer,
                raw_text=raw_text,
                structured=structured,
            )
        )
        self.logger.info(f"Stored feedback {feedback.id} for answer {answer_id}")
        return feedback

    async def get_user_feedback_history(self, user_id: str) -> List[FeedbackRecord]:
        """Get a user's feedback, newest first.

        Records whose stored structure is degenerate are re-parsed from their
        raw text in the returned copy; storage is left untouched.
        """
        history = await self.repository.list_for_user(user_id)
        repaired = []
        for record in history:
            if needs_reparse(record.structured) and record.raw_text:
                self.logger.debug(f"Re-parsing stored feedback {record.id}")
                record = record.model_copy(update={"structured": parse_feedback(record.raw_text)})
            repaired.append(record)
        return repaired

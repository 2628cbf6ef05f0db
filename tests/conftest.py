"""Shared fixtures: in-memory stand-ins for the stores, the model and the vector index."""

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Dict, List, Optional, Tuple

import pytest

from casebuddy.ai.prompts.case_feedback import create_case_feedback_prompt
from casebuddy.ai.providers.base import BaseProvider
from casebuddy.domains.feedback.service import FeedbackService
from casebuddy.schemas.cases import Case, VectorMatch
from casebuddy.schemas.feedback import FeedbackBase, FeedbackRecord
from casebuddy.services.usage import AdminEmailPolicy, QuotaTracker
from casebuddy.utils.errors import ProviderError, StoreUnavailableError

ADMIN_EMAIL = "admin@casebuddy.app"

SAMPLE_FEEDBACK = """STRENGTHS
- Clear structure built around a profitability tree
- **Quantified** the market size before recommending

AREAS FOR IMPROVEMENT
- State the hypothesis earlier
- Prioritise the cost branches

MISSING CONSIDERATIONS
- Competitive response to a price cut

FRAMEWORK SUGGESTIONS
- Porter's Five Forces
"""

LONG_ANSWER = (
    "I would start by splitting profit into revenue and costs, then size the market "
    "and test whether the decline comes from volume or price."
)


class InMemoryFeedbackRepository:
    def __init__(self):
        self.records: Dict[str, FeedbackRecord] = {}
        self._ids = count(1)

    async def get_by_answer_id(self, answer_id: str) -> Optional[FeedbackRecord]:
        return self.records.get(answer_id)

    async def create(self, feedback: FeedbackBase) -> FeedbackRecord:
        if feedback.answer_id in self.records:
            return self.records[feedback.answer_id]
        record = FeedbackRecord(id=str(next(self._ids)), **feedback.model_dump())
        self.records[feedback.answer_id] = record
        return record

    async def list_for_user(self, user_id: str, limit: int = 100) -> List[FeedbackRecord]:
        records = [record for record in self.records.values() if record.user_id == user_id]
        return sorted(records, key=lambda record: record.generated_at, reverse=True)[:limit]


class InMemoryQuotaRepository:
    def __init__(self):
        self.counts: Dict[Tuple[str, str], int] = {}
        self.unavailable = False

    async def get_count(self, user_id: str, date: str) -> int:
        if self.unavailable:
            raise StoreUnavailableError("quota read", "connection refused")
        return self.counts.get((user_id, date), 0)

    async def increment_if_below(self, user_id: str, date: str, limit: int) -> bool:
        current = self.counts.get((user_id, date), 0)
        if current >= limit:
            return False
        self.counts[(user_id, date)] = current + 1
        return True


class FakeProvider(BaseProvider):
    """Returns canned text and embeddings, or raises the configured error."""

    def __init__(self, text: str = SAMPLE_FEEDBACK, vector: Optional[List[float]] = None):
        super().__init__(default_model="fake-model")
        self.provider = "fake"
        self.text = text
        self.vector = vector or [0.1, 0.2, 0.3]
        self.error: Optional[Exception] = None
        self.prompts: List[str] = []
        self.embedded: List[str] = []
        self.task_types: List[str] = []

    async def generate_text(self, prompt: str, temperature: float = 1.0, max_tokens: Optional[int] = None) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text

    async def get_embeddings(self, text: List[str], task_type: str = "retrieval_document") -> List[List[float]]:
        self.embedded.extend(text)
        self.task_types.append(task_type)
        if self.error:
            raise self.error
        return [list(self.vector) for _ in text]

    def get_dimensions(self) -> int:
        return len(self.vector)


class FakeVectorIndex:
    def __init__(self, matches: Optional[List[VectorMatch]] = None):
        self.matches = matches or []
        self.vectors: Dict[str, Tuple[List[float], Dict]] = {}
        self.queries: List[Tuple[List[float], int]] = []
        self.error: Optional[Exception] = None

    async def upsert(self, case_id: str, vector: List[float], metadata: Dict) -> None:
        if self.error:
            raise self.error
        self.vectors[case_id] = (vector, metadata)

    async def query(self, vector: List[float], top_k: int) -> List[VectorMatch]:
        self.queries.append((vector, top_k))
        if self.error:
            raise self.error
        return self.matches[:top_k]

    async def stats(self) -> Dict[str, int]:
        dimension = len(next(iter(self.vectors.values()))[0]) if self.vectors else 0
        return {"total_vector_count": len(self.vectors), "dimension": dimension}


class FakeCaseRepository:
    def __init__(self, cases: List[Case]):
        self.cases = cases

    async def list_active(self) -> List[Case]:
        return [case for case in self.cases if case.is_active]


def make_case(case_id: str, title: str = "Coffee chain profitability", **kwargs) -> Case:
    kwargs.setdefault("description", f"Description of case {case_id}. " * 5)
    return Case(id=case_id, title=title, **kwargs)


def make_match(case_id: str, score: float, **metadata) -> VectorMatch:
    metadata.setdefault("case_id", case_id)
    metadata.setdefault("title", f"Case {case_id}")
    metadata.setdefault("description", f"About case {case_id}")
    metadata.setdefault("type", "consulting")
    metadata.setdefault("difficulty", "medium")
    return VectorMatch(id=case_id, score=score, metadata=metadata)


def days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest.fixture
def feedback_repository():
    return InMemoryFeedbackRepository()


@pytest.fixture
def quota_repository():
    return InMemoryQuotaRepository()


@pytest.fixture
def quota(quota_repository):
    return QuotaTracker(
        repository=quota_repository,
        policy=AdminEmailPolicy([ADMIN_EMAIL]),
        limit=3,
        privileged_remaining=999,
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def feedback_service(feedback_repository, quota, provider):
    return FeedbackService(
        repository=feedback_repository,
        quota=quota,
        provider=provider,
        prompt=create_case_feedback_prompt(),
        min_answer_length=50,
    )


@pytest.fixture
def failing_provider():
    failing = FakeProvider()
    failing.error = ProviderError("model unavailable")
    return failing

"""Schemas for cases, case embeddings and similar-case results."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field

from .feedback import utc_now


class CaseType(str, Enum):
    """Kind of case interview."""

    CONSULTING = "consulting"
    PRODUCT = "product"


class CaseDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CaseBase(BaseModel):
    title: str
    description: str
    type: CaseType = CaseType.CONSULTING
    difficulty: CaseDifficulty = CaseDifficulty.MEDIUM
    is_active: bool = True
    date_posted: datetime = Field(default_factory=utc_now)


class Case(CaseBase):
    """A case-study prompt users practice against."""

    id: str


class CaseDocument(CaseBase, Document):
    class Settings:
        name = "questions"


class CaseEmbedding(Document):
    """Vector representation of a case, queried with Atlas vector search."""

    case_id: Annotated[str, Indexed(unique=True)]
    embedding: List[float]
    metadata: Dict[str, Any] = {}

    provider: str  # e.g., 'google'
    model: Optional[str] = None  # e.g., 'models/text-embedding-004'
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "case_embeddings"


class VectorMatch(BaseModel):
    """One ranked hit from the vector index."""

    id: str
    score: float
    metadata: Dict[str, Any] = {}


class SimilarCase(BaseModel):
    """One ranked result of a similar-case query."""

    case_id: str
    title: str
    description_snippet: str = ""
    category: str = ""
    difficulty: str = ""
    similarity_score: float = Field(ge=0.0, le=1.0)
    total_answers: int = 0
    avg_upvotes: float = 0


class SimilarCasesRequest(BaseModel):
    case_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    top_k: int = Field(default=5, ge=1, le=20)


class SimilarCasesResponse(BaseModel):
    similar_cases: List[SimilarCase]


class IndexCaseRequest(BaseModel):
    """Request body for indexing a single case."""

    case_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: CaseType = CaseType.CONSULTING
    difficulty: CaseDifficulty = CaseDifficulty.MEDIUM
    metadata: Dict[str, Any] = {}


class IndexingReport(BaseModel):
    """Outcome of a bulk indexing run."""

    success_count: int = 0
    fail_count: int = 0
    total: int = 0
    failed_case_ids: List[str] = []

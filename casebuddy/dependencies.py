"""Service instances shared by the routers.

Each getter builds its service once. Tests replace them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from casebuddy.domains.feedback.service import FeedbackService
from casebuddy.logic.indexing import CaseIndexer
from casebuddy.services.embeddings import MongoVectorIndex
from casebuddy.services.similarity import SimilarityService
from casebuddy.services.usage import AdminEmailPolicy, PrivilegePolicy, QuotaTracker


@lru_cache
def get_privilege_policy() -> PrivilegePolicy:
    return AdminEmailPolicy()


@lru_cache
def get_quota_tracker() -> QuotaTracker:
    return QuotaTracker(policy=get_privilege_policy())


@lru_cache
def get_feedback_service() -> FeedbackService:
    return FeedbackService(quota=get_quota_tracker())


@lru_cache
def get_vector_index() -> MongoVectorIndex:
    return MongoVectorIndex()


@lru_cache
def get_similarity_service() -> SimilarityService:
    return SimilarityService(vector_index=get_vector_index())


@lru_cache
def get_case_indexer() -> CaseIndexer:
    return CaseIndexer(vector_index=get_vector_index())

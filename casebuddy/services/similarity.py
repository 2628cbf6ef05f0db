"""Similar-case lookup behind a memory tier, a Redis tier and vector search."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..ai.providers.base import BaseProvider
from ..ai.providers.factory import create_embedding_provider
from ..config import settings
from ..schemas.cases import SimilarCase, VectorMatch
from ..utils.cache import CacheEntry, CacheService, MemoryCache, cache
from ..utils.errors import ProviderError, SimilaritySearchError
from .embeddings import MongoVectorIndex

logger = logging.getLogger(__name__)


class SimilarCasesEntry(CacheEntry[List[SimilarCase]]):
    """Cached similar cases together with the result size they were fetched for."""

    top_k: int = 0

    def covers(self, top_k: int) -> bool:
        return self.top_k >= top_k


def case_embedding_text(title: str, description: str) -> str:
    """Text embedded for a case, shared by indexing and querying."""
    return f"{title}\n\n{description}"


async def embed_case(
    provider: BaseProvider, title: str, description: str, task_type: str = "retrieval_document"
) -> List[float]:
    """Embed a case's title and description.

    Indexed cases use ``retrieval_document``; lookups embed with ``retrieval_query``.

    Raises:
        ProviderError: If the provider returns no vector
    """
    embeddings = await provider.get_embeddings([case_embedding_text(title, description)], task_type=task_type)
    if not embeddings or not embeddings[0]:
        raise ProviderError("Empty embedding returned for case")
    return embeddings[0]


def to_similar_case(match: VectorMatch) -> SimilarCase:
    metadata: Dict[str, Any] = match.metadata
    return SimilarCase(
        case_id=metadata.get("case_id") or match.id,
        title=metadata.get("title", ""),
        description_snippet=metadata.get("description", ""),
        category=metadata.get("type", ""),
        difficulty=metadata.get("difficulty", ""),
        similarity_score=min(max(match.score, 0.0), 1.0),
        total_answers=metadata.get("total_answers") or 0,
        avg_upvotes=metadata.get("avg_upvotes") or 0,
    )


class SimilarityService:
    """Finds cases related to a given case.

    Lookup order: memory tier, Redis tier, then embedding plus vector search.
    Both cache tiers hold entries for ``ttl`` seconds of normal use. When the
    remote search fails, a Redis entry of any age is served instead.
    """

    def __init__(
        self,
        provider: Optional[BaseProvider] = None,
        vector_index: Optional[MongoVectorIndex] = None,
        durable_cache: Optional[CacheService] = None,
        memory_cache: Optional[MemoryCache] = None,
        ttl: Optional[float] = None,
        stale_retention: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.provider = provider or create_embedding_provider()
        self.vector_index = vector_index or MongoVectorIndex()
        self.durable_cache = durable_cache or cache
        self.memory_cache: MemoryCache = memory_cache if memory_cache is not None else MemoryCache()
        self.ttl = settings.similarity.cache_ttl_seconds if ttl is None else ttl
        self.stale_retention = (
            settings.similarity.stale_retention_seconds if stale_retention is None else stale_retention
        )
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _cache_key(case_id: str) -> str:
        return f"similar_cases:{case_id}"

    async def _read_durable(self, case_id: str) -> Optional[SimilarCasesEntry]:
        raw = await self.durable_cache.get_json(self._cache_key(case_id))
        if raw is None:
            return None
        try:
            return SimilarCasesEntry.model_validate(raw)
        except PydanticValidationError as e:
            self.logger.warning(f"Discarding malformed cache entry for case {case_id}: {e}")
            return None

    async def _write_tiers(self, case_id: str, entry: SimilarCasesEntry) -> None:
        self.memory_cache.set(case_id, entry)
        stored = await self.durable_cache.set_json(
            self._cache_key(case_id),
            entry.model_dump(mode="json"),
            ttl=self.stale_retention,
        )
        if not stored:
            self.logger.warning(f"Failed to write similar cases for {case_id} to the durable cache")

    async def _search_remote(self, case_id: str, title: str, description: str, top_k: int) -> List[SimilarCase]:
        vector = await embed_case(self.provider, title, description, task_type="retrieval_query")

        # Over-fetch by one: the case itself is usually its own nearest neighbour
        matches = await self.vector_index.query(vector, top_k + 1)
        return [to_similar_case(match) for match in matches if match.id != case_id][:top_k]

    async def find_similar(
        self, case_id: str, title: str, description: str, top_k: Optional[int] = None
    ) -> List[SimilarCase]:
        """Find cases similar to the given one, excluding itself.

        Args:
            case_id: The case to find neighbours for
            title: Case title
            description: Case description
            top_k: Maximum number of results

        Returns:
            Similar cases ordered by descending similarity

        Raises:
            SimilaritySearchError: If the search fails and nothing is cached
        """
        top_k = top_k or settings.similarity.default_top_k
        now = self.clock()

        entry = self.memory_cache.get(case_id)
        if entry and entry.is_fresh(self.ttl, now) and entry.covers(top_k):
            self.logger.debug(f"Using memory-cached similar cases for {case_id}")
            return entry.data[:top_k]

        entry = await self._read_durable(case_id)
        if entry and entry.is_fresh(self.ttl, now) and entry.covers(top_k):
            self.logger.debug(f"Using durable-cached similar cases for {case_id}")
            self.memory_cache.set(case_id, entry)
            return entry.data[:top_k]

        try:
            self.logger.debug(f"Fetching fresh similar cases for {case_id}")
            similar = await self._search_remote(case_id, title, description, top_k)
        except Exception as e:
            self.logger.warning(f"Similar case search failed for {case_id}: {e}")
            stale = entry or self.memory_cache.get(case_id)
            if stale is not None:
                self.logger.info(
                    f"Serving stale similar cases for {case_id} ({stale.age(now):.0f}s old)"
                )
                return stale.data[:top_k]
            raise SimilaritySearchError(case_id, str(e)) from e

        await self._write_tiers(case_id, SimilarCasesEntry(data=similar, cached_at=now, top_k=top_k))
        self.logger.info(f"Found {len(similar)} similar cases for {case_id}")
        return similar

    def clear_memory_cache(self) -> None:
        self.memory_cache.clear()

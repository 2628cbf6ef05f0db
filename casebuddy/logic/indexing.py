"""Indexing logic for case embeddings."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from casebuddy.ai.providers.base import BaseProvider
from casebuddy.ai.providers.factory import create_embedding_provider
from casebuddy.config import settings
from casebuddy.domains.cases.repository import CaseRepository
from casebuddy.schemas.cases import Case, IndexingReport
from casebuddy.services.embeddings import MongoVectorIndex
from casebuddy.services.similarity import embed_case

logger = logging.getLogger(__name__)


def case_metadata(case: Case, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the metadata stored next to a case vector."""
    metadata: Dict[str, Any] = {
        "total_answers": 0,
        "avg_upvotes": 0,
    }
    metadata.update(extra or {})
    metadata.update(
        {
            "case_id": case.id,
            "title": case.title,
            "description": case.description[: settings.similarity.description_snippet_length],
            "type": case.type.value,
            "difficulty": case.difficulty.value,
        }
    )
    return metadata


class CaseIndexer:
    """Embeds cases and writes them to the vector index."""

    def __init__(
        self,
        provider: Optional[BaseProvider] = None,
        vector_index: Optional[MongoVectorIndex] = None,
        repository: Optional[CaseRepository] = None,
        delay: Optional[float] = None,
    ):
        self.provider = provider or create_embedding_provider()
        self.vector_index = vector_index or MongoVectorIndex()
        self.repository = repository or CaseRepository()
        self.delay = settings.similarity.index_delay_seconds if delay is None else delay

    async def index_case(self, case: Case, extra_metadata: Optional[Dict[str, Any]] = None) -> None:
        """Embed a case and upsert it into the vector index.

        Raises:
            ProviderError: If embedding fails
        """
        vector = await embed_case(self.provider, case.title, case.description)
        await self.vector_index.upsert(case.id, vector, case_metadata(case, extra_metadata))
        logger.info(f"Indexed case {case.id}")

    async def index_all(self, cases: Optional[List[Case]] = None) -> IndexingReport:
        """Index every case one at a time.

        A failure on one case is logged and counted, the run continues with
        the next case. Calls are spaced by ``delay`` seconds to stay under
        provider rate limits.

        Args:
            cases: Cases to index, all active cases if None

        Returns:
            Success and failure counts with the failed case IDs
        """
        if cases is None:
            cases = await self.repository.list_active()

        report = IndexingReport(total=len(cases))
        if not cases:
            logger.info("No cases to index")
            return report

        logger.info(f"Indexing {len(cases)} cases")
        for position, case in enumerate(tqdm(cases, desc="Indexing cases")):
            try:
                await self.index_case(case)
                report.success_count += 1
            except Exception as e:
                logger.error(f"Failed to index case {case.id}: {e}")
                report.fail_count += 1
                report.failed_case_ids.append(case.id)

            if self.delay > 0 and position < len(cases) - 1:
                await asyncio.sleep(self.delay)

        logger.info(f"Indexing complete: {report.success_count} succeeded, {report.fail_count} failed")
        return report

    async def stats(self) -> Dict[str, int]:
        return await self.vector_index.stats()

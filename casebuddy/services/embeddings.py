"""Case embedding storage and nearest-neighbour search on MongoDB Atlas."""

import logging
from typing import Any, Dict, List, Optional

from ..config import settings
from ..schemas.cases import CaseEmbedding, VectorMatch
from ..schemas.feedback import utc_now

logger = logging.getLogger(__name__)


class MongoVectorIndex:
    """Vector index over the ``case_embeddings`` collection.

    Queries use the Atlas ``$vectorSearch`` stage, which requires a vector
    search index on the ``embedding`` path.
    """

    def __init__(self, index_name: Optional[str] = None, provider: str = "google", model: Optional[str] = None):
        self.index_name = index_name or settings.similarity.vector_index_name
        self.provider = provider
        self.model = model or settings.ai.embedding_model

    async def upsert(self, case_id: str, vector: List[float], metadata: Dict[str, Any]) -> None:
        """Insert or replace the embedding of a case.

        Args:
            case_id: Case ID
            vector: Embedding vector
            metadata: Case fields returned with query matches
        """
        now = utc_now()
        insert_doc = CaseEmbedding(
            case_id=case_id,
            embedding=vector,
            metadata=metadata,
            provider=self.provider,
            model=self.model,
            updated_at=now,
        )
        update_op = {
            "$set": {
                "embedding": vector,
                "metadata": metadata,
                "provider": self.provider,
                "model": self.model,
                "updated_at": now,
            }
        }

        await CaseEmbedding.find_one(CaseEmbedding.case_id == case_id).upsert(update_op, on_insert=insert_doc)
        # Specific insert/update distinction is lost with upsert
        logger.debug(f"Upserted embedding for case: {case_id}")

    async def query(self, vector: List[float], top_k: int) -> List[VectorMatch]:
        """Find the cases nearest to a vector.

        Args:
            vector: Query embedding
            top_k: Maximum number of matches

        Returns:
            Matches ordered by descending score
        """
        pipeline = [
            {
                "$vectorSearch": {
                    "index": self.index_name,
                    "path": "embedding",
                    "queryVector": vector,
                    "numCandidates": top_k * 10,  # Search more candidates for better recall
                    "limit": top_k,
                }
            },
            {"$project": {"_id": 0, "case_id": 1, "metadata": 1, "score": {"$meta": "vectorSearchScore"}}},
        ]

        results = await CaseEmbedding.aggregate(pipeline).to_list()
        return [
            VectorMatch(id=result["case_id"], score=result.get("score", 0.0), metadata=result.get("metadata") or {})
            for result in results
        ]

    async def stats(self) -> Dict[str, int]:
        """Get the number of indexed cases and the vector dimension."""
        total = await CaseEmbedding.count()
        sample = await CaseEmbedding.find_one()
        return {
            "total_vector_count": total,
            "dimension": len(sample.embedding) if sample else 0,
        }

"""API endpoints for case discovery."""

import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_similarity_service
from ..schemas.cases import SimilarCasesRequest, SimilarCasesResponse
from ..services.similarity import SimilarityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cases", tags=["cases"])


@router.post("/similar", response_model=SimilarCasesResponse)
async def find_similar_cases(
    request: SimilarCasesRequest,
    service: SimilarityService = Depends(get_similarity_service),
) -> SimilarCasesResponse:
    """Find cases similar to the given one.

    Args:
        request: The case to find neighbours for

    Returns:
        Similar cases, best match first

    Raises:
        SimilaritySearchError: If the search fails and nothing is cached
    """
    similar = await service.find_similar(
        request.case_id,
        request.title,
        request.description,
        top_k=request.top_k,
    )
    return SimilarCasesResponse(similar_cases=similar)

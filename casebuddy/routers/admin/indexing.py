"""Admin routes for the case vector index."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from casebuddy.dependencies import get_case_indexer
from casebuddy.logic.indexing import CaseIndexer
from casebuddy.schemas.cases import Case, IndexCaseRequest, IndexingReport

router = APIRouter()


class IndexCaseResponse(BaseModel):
    success: bool
    case_id: str
    message: str


@router.post("/case", response_model=IndexCaseResponse)
async def index_case(request: IndexCaseRequest, indexer: CaseIndexer = Depends(get_case_indexer)):
    """Embed one case and upsert it into the vector index."""
    case = Case(
        id=request.case_id,
        title=request.title,
        description=request.description,
        type=request.type,
        difficulty=request.difficulty,
    )
    await indexer.index_case(case, extra_metadata=request.metadata)
    return IndexCaseResponse(success=True, case_id=request.case_id, message="Case indexed successfully")


@router.post("/all", response_model=IndexingReport)
async def index_all_cases(indexer: CaseIndexer = Depends(get_case_indexer)):
    """Index every active case, continuing past individual failures."""
    return await indexer.index_all()

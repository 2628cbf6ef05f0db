from casebuddy.logic.indexing import CaseIndexer, case_metadata
from casebuddy.schemas.cases import CaseDifficulty, CaseType
from tests.conftest import FakeCaseRepository, FakeProvider, FakeVectorIndex, make_case


class FlakyProvider(FakeProvider):
    """Fails to embed any text containing one of the given markers."""

    def __init__(self, failing_markers):
        super().__init__()
        self.failing_markers = failing_markers

    async def get_embeddings(self, text, task_type="retrieval_document"):
        if any(marker in item for item in text for marker in self.failing_markers):
            raise RuntimeError("embedding rejected")
        return await super().get_embeddings(text, task_type=task_type)


def make_indexer(cases, provider=None, vector_index=None):
    return CaseIndexer(
        provider=provider or FakeProvider(),
        vector_index=vector_index or FakeVectorIndex(),
        repository=FakeCaseRepository(cases),
        delay=0,
    )


def test_metadata_truncates_description():
    case = make_case("case-1", description="x" * 800, type=CaseType.PRODUCT, difficulty=CaseDifficulty.HARD)

    metadata = case_metadata(case)

    assert len(metadata["description"]) == 500
    assert metadata["case_id"] == "case-1"
    assert metadata["type"] == "product"
    assert metadata["difficulty"] == "hard"
    assert metadata["total_answers"] == 0


async def test_index_case_upserts_vector():
    vector_index = FakeVectorIndex()
    indexer = make_indexer([], vector_index=vector_index)

    await indexer.index_case(make_case("case-1"), extra_metadata={"total_answers": 4})

    vector, metadata = vector_index.vectors["case-1"]
    assert vector == [0.1, 0.2, 0.3]
    assert metadata["total_answers"] == 4
    assert metadata["title"] == "Coffee chain profitability"


async def test_reindexing_replaces_previous_entry():
    vector_index = FakeVectorIndex()
    indexer = make_indexer([], vector_index=vector_index)

    await indexer.index_case(make_case("case-1", title="First title"))
    await indexer.index_case(make_case("case-1", title="Second title"))

    assert len(vector_index.vectors) == 1
    assert vector_index.vectors["case-1"][1]["title"] == "Second title"


async def test_index_all_continues_past_failures():
    cases = [make_case("case-1"), make_case("case-2", title="Broken case"), make_case("case-3")]
    vector_index = FakeVectorIndex()
    indexer = make_indexer(cases, provider=FlakyProvider(["Broken"]), vector_index=vector_index)

    report = await indexer.index_all()

    assert report.total == 3
    assert report.success_count == 2
    assert report.fail_count == 1
    assert report.failed_case_ids == ["case-2"]
    assert set(vector_index.vectors) == {"case-1", "case-3"}


async def test_index_all_skips_inactive_cases():
    cases = [make_case("case-1"), make_case("case-2", is_active=False)]
    indexer = make_indexer(cases)

    report = await indexer.index_all()

    assert report.total == 1
    assert report.success_count == 1


async def test_index_all_with_no_cases():
    report = await make_indexer([]).index_all()

    assert report.total == 0
    assert report.failed_case_ids == []


async def test_stats_reflect_index_contents():
    indexer = make_indexer([make_case("case-1"), make_case("case-2")])
    await indexer.index_all()

    assert await indexer.stats() == {"total_vector_count": 2, "dimension": 3}


async def test_cases_are_embedded_as_documents():
    provider = FakeProvider()
    await make_indexer([make_case("case-1")], provider=provider).index_all()

    assert provider.task_types == ["retrieval_document"]

import pytest

from casebuddy.schemas.feedback import FeedbackBase, StructuredFeedback
from casebuddy.services.usage import today_utc
from casebuddy.utils.errors import GenerationError, QuotaExceededError, ValidationError
from tests.conftest import ADMIN_EMAIL, LONG_ANSWER, SAMPLE_FEEDBACK, FakeProvider, days_ago


def request(answer_id: str = "answer-1", user_answer: str = LONG_ANSWER, **overrides):
    params = dict(
        answer_id=answer_id,
        user_id="user-1",
        user_email="user@example.com",
        case_id="case-1",
        case_title="Coffee chain profitability",
        case_description="Profits fell 20% in two years. Why?",
        user_answer=user_answer,
    )
    params.update(overrides)
    return params


async def test_generates_stores_and_charges(feedback_service, quota_repository, provider):
    feedback = await feedback_service.generate_feedback(**request())

    assert feedback.answer_id == "answer-1"
    assert feedback.raw_text == SAMPLE_FEEDBACK
    assert feedback.structured.frameworks == ["Porter's Five Forces"]
    assert quota_repository.counts[("user-1", today_utc())] == 1

    prompt = provider.prompts[0]
    assert "Coffee chain profitability" in prompt
    assert LONG_ANSWER in prompt


async def test_second_request_returns_existing_without_charge(feedback_service, quota_repository, provider):
    first = await feedback_service.generate_feedback(**request())
    second = await feedback_service.generate_feedback(**request())

    assert second.id == first.id
    assert len(provider.prompts) == 1
    assert quota_repository.counts[("user-1", today_utc())] == 1


async def test_existing_feedback_returned_even_when_quota_exhausted(feedback_service, quota_repository):
    first = await feedback_service.generate_feedback(**request())
    quota_repository.counts[("user-1", today_utc())] = 3

    again = await feedback_service.generate_feedback(**request())

    assert again.id == first.id


async def test_short_answer_is_rejected_before_quota(feedback_service, quota_repository, provider):
    with pytest.raises(ValidationError):
        await feedback_service.generate_feedback(**request(user_answer="   too short   "))

    assert provider.prompts == []
    assert quota_repository.counts == {}


async def test_answer_length_is_measured_after_trimming(feedback_service):
    padded = " " * 40 + "x" * 49 + " " * 40

    with pytest.raises(ValidationError):
        await feedback_service.generate_feedback(**request(user_answer=padded))


async def test_quota_exceeded(feedback_service, quota_repository, provider):
    quota_repository.counts[("user-1", today_utc())] = 3

    with pytest.raises(QuotaExceededError) as exc_info:
        await feedback_service.generate_feedback(**request())

    assert exc_info.value.limit == 3
    assert exc_info.value.status_code == 429
    assert provider.prompts == []


async def test_generation_failure_does_not_charge(feedback_service, feedback_repository, quota_repository, provider):
    provider.error = RuntimeError("upstream timeout")

    with pytest.raises(GenerationError):
        await feedback_service.generate_feedback(**request())

    assert quota_repository.counts == {}
    assert feedback_repository.records == {}


async def test_blank_generation_is_a_failure(feedback_service, quota_repository):
    feedback_service.provider = FakeProvider(text="   \n")

    with pytest.raises(GenerationError):
        await feedback_service.generate_feedback(**request())

    assert quota_repository.counts == {}


async def test_privileged_user_is_never_limited_or_charged(feedback_service, quota_repository):
    for index in range(5):
        await feedback_service.generate_feedback(**request(answer_id=f"answer-{index}", user_email=ADMIN_EMAIL))

    assert quota_repository.counts == {}


async def test_three_requests_scenario(feedback_service, quota):
    for index in range(3):
        await feedback_service.generate_feedback(**request(answer_id=f"answer-{index}"))

    status = await quota.get_remaining("user-1", "user@example.com")
    assert status.remaining == 0

    with pytest.raises(QuotaExceededError):
        await feedback_service.generate_feedback(**request(answer_id="answer-3"))

    again = await feedback_service.generate_feedback(**request(answer_id="answer-0"))
    assert again.answer_id == "answer-0"


async def test_history_is_newest_first_and_repairs_degenerate_structures(feedback_service, feedback_repository):
    await feedback_repository.create(
        FeedbackBase(
            answer_id="old",
            user_id="user-1",
            case_id="case-1",
            case_title="Old case",
            user_answer=LONG_ANSWER,
            raw_text=SAMPLE_FEEDBACK,
            structured=StructuredFeedback(strengths=["STRENGTHS:"]),
            generated_at=days_ago(2),
        )
    )
    await feedback_repository.create(
        FeedbackBase(
            answer_id="new",
            user_id="user-1",
            case_id="case-2",
            case_title="New case",
            user_answer=LONG_ANSWER,
            raw_text=SAMPLE_FEEDBACK,
            structured=StructuredFeedback(strengths=["Good opening"]),
            generated_at=days_ago(1),
        )
    )

    history = await feedback_service.get_user_feedback_history("user-1")

    assert [record.answer_id for record in history] == ["new", "old"]
    assert history[0].structured.strengths == ["Good opening"]
    assert history[1].structured.strengths[0] == "Clear structure built around a profitability tree"
    # Stored record is left untouched
    assert feedback_repository.records["old"].structured.strengths == ["STRENGTHS:"]


async def test_history_excludes_other_users(feedback_service):
    await feedback_service.generate_feedback(**request(answer_id="mine"))
    await feedback_service.generate_feedback(**request(answer_id="theirs", user_id="user-2"))

    history = await feedback_service.get_user_feedback_history("user-1")

    assert [record.answer_id for record in history] == ["mine"]

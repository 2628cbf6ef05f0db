from casebuddy.schemas.feedback import StructuredFeedback
from casebuddy.services.feedback_parser import extract_bullet_points, needs_reparse, parse_feedback
from tests.conftest import SAMPLE_FEEDBACK


def test_parses_all_four_sections():
    structured = parse_feedback(SAMPLE_FEEDBACK)

    assert structured.strengths == [
        "Clear structure built around a profitability tree",
        "Quantified the market size before recommending",
    ]
    assert structured.improvements == ["State the hypothesis earlier", "Prioritise the cost branches"]
    assert structured.missing == ["Competitive response to a price cut"]
    assert structured.frameworks == ["Porter's Five Forces"]


def test_parsing_is_deterministic():
    assert parse_feedback(SAMPLE_FEEDBACK) == parse_feedback(SAMPLE_FEEDBACK)


def test_missing_heading_is_none_and_empty_section_is_empty_list():
    raw = "STRENGTHS\n- Good use of data\n\nAREAS FOR IMPROVEMENT\nNothing to add here.\n"

    structured = parse_feedback(raw)

    assert structured.strengths == ["Good use of data"]
    assert structured.improvements == []
    assert structured.missing is None
    assert structured.frameworks is None


def test_sections_do_not_bleed_into_each_other():
    structured = parse_feedback(SAMPLE_FEEDBACK)

    assert "State the hypothesis earlier" not in structured.strengths
    assert "Porter's Five Forces" not in structured.missing


def test_sections_out_of_order_are_still_isolated():
    raw = "FRAMEWORK SUGGESTIONS\n- MECE issue tree\n\nSTRENGTHS\n- Structured opening\n"

    structured = parse_feedback(raw)

    assert structured.frameworks == ["MECE issue tree"]
    assert structured.strengths == ["Structured opening"]


def test_markdown_headings_and_numbered_labels():
    raw = (
        "## **1. Strengths:**\n"
        "* Clear recommendation\n"
        "### 2. Areas of Improvement (2-3 points)\n"
        "1. Quantify the upside\n"
        "2) Check the timeline\n"
        "**3. MISSING CONSIDERATIONS**\n"
        "• Regulatory risk\n"
        "4. Framework Suggestions:\n"
        "– 4Ps\n"
    )

    structured = parse_feedback(raw)

    assert structured.strengths == ["Clear recommendation"]
    assert structured.improvements == ["Quantify the upside", "Check the timeline"]
    assert structured.missing == ["Regulatory risk"]
    assert structured.frameworks == ["4Ps"]


def test_bold_lead_lines_count_as_points():
    text = "**Market sizing:** top-down estimate was solid\nplain prose is ignored\n"

    assert extract_bullet_points(text) == ["Market sizing: top-down estimate was solid"]


def test_bare_labels_are_dropped():
    assert extract_bullet_points("- Strengths:\n- Concise answer\n") == ["Concise answer"]


def test_empty_text_has_no_sections():
    assert parse_feedback("") == StructuredFeedback()


def test_needs_reparse():
    assert needs_reparse(None)
    assert needs_reparse(StructuredFeedback())
    assert needs_reparse(StructuredFeedback(strengths=[]))
    assert needs_reparse(StructuredFeedback(strengths=["STRENGTHS:", "Good"]))
    assert not needs_reparse(StructuredFeedback(strengths=["Good structure"]))


def test_minimal_bullets_under_each_heading():
    raw = "STRENGTHS\n- A\n- B\nAREAS FOR IMPROVEMENT\n1. C\nMISSING CONSIDERATIONS\nFRAMEWORK SUGGESTIONS\n"

    structured = parse_feedback(raw)

    assert structured.strengths == ["A", "B"]
    assert structured.improvements == ["C"]
    assert structured.missing == []
    assert structured.frameworks == []


def test_headings_with_inline_text():
    raw = (
        "1. **Strengths:** The answer is well organised.\n"
        "- A\n"
        "- B\n\n"
        "2. **Areas for Improvement:** A few gaps.\n"
        "- C\n"
    )

    structured = parse_feedback(raw)

    assert structured.strengths == ["A", "B"]
    assert structured.improvements == ["C"]
    assert structured.missing is None


def test_dash_suffixed_heading():
    raw = "**STRENGTHS** - what went well\n- A\n\nMISSING CONSIDERATIONS - gaps\n- D\n"

    structured = parse_feedback(raw)

    assert structured.strengths == ["A"]
    assert structured.missing == ["D"]


def test_label_must_end_at_word_boundary():
    structured = parse_feedback("Strengthening the pitch\n- A\n")

    assert structured.strengths is None

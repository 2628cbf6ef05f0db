"""Parse model feedback text into labelled bullet lists."""

import re
from typing import Dict, List, Optional, Tuple

from ..ai.prompts.case_feedback import FRAMEWORKS, IMPROVEMENTS, MISSING, SECTION_LABELS, STRENGTHS
from ..schemas.feedback import StructuredFeedback

# Lines starting with a bold span count as bullets only up to this length
MAX_BOLD_LINE_LENGTH = 200

# Label variants the model is known to produce, keyed by canonical label
LABEL_PATTERNS: Dict[str, str] = {
    STRENGTHS: r"STRENGTHS?",
    IMPROVEMENTS: r"AREAS?\s+(?:FOR|OF)\s+IMPROVEMENTS?",
    MISSING: r"MISSING\s+CONSIDERATIONS?",
    FRAMEWORKS: r"FRAMEWORKS?\s+SUGGESTIONS?",
}

# Field of StructuredFeedback filled by each section
SECTION_FIELDS: Dict[str, str] = {
    STRENGTHS: "strengths",
    IMPROVEMENTS: "improvements",
    MISSING: "missing",
    FRAMEWORKS: "frameworks",
}

# Optional markdown heading, emphasis and section number before the label
_HEADING_PREFIX = r"^[ \t]*(?:#{1,6}[ \t]*)?(?:[*_]{1,2}[ \t]*)?(?:\d+[.)][ \t]*)?(?:[*_]{1,2}[ \t]*)?"
# Label must end at a word boundary; the rest of the line belongs to the heading
_HEADING_SUFFIX = r"(?=[\s:*_(\-]|$)[^\n]*"

HEADING_PATTERNS: Dict[str, re.Pattern] = {
    label: re.compile(_HEADING_PREFIX + pattern + _HEADING_SUFFIX, re.IGNORECASE | re.MULTILINE)
    for label, pattern in LABEL_PATTERNS.items()
}

_BARE_LABEL = re.compile(
    r"^(?:" + "|".join(LABEL_PATTERNS.values()) + r")\s*:?$",
    re.IGNORECASE,
)
_BULLET_MARKER = re.compile(r"^(?:[-*•–]|\d+[.)])\s+")
_BOLD_LEAD = re.compile(r"^\*\*([^*]+?)\*\*(:?)\s*")


def _locate_sections(raw_text: str) -> Dict[str, Tuple[int, int]]:
    """Find the content span of every section whose heading is present.

    A section runs from the end of its heading line to the start of the next
    section heading, whatever its label, or to the end of the text.
    """
    headings: Dict[str, re.Match] = {}
    for label in SECTION_LABELS:
        match = HEADING_PATTERNS[label].search(raw_text)
        if match:
            headings[label] = match

    starts = sorted(heading.start() for heading in headings.values())

    spans: Dict[str, Tuple[int, int]] = {}
    for label, heading in headings.items():
        end = next((start for start in starts if start >= heading.end()), len(raw_text))
        spans[label] = (heading.end(), end)

    return spans


def _clean_item(item: str) -> str:
    """Strip emphasis syntax, turning a bold lead-in into ``Label: text``."""
    match = _BOLD_LEAD.match(item)
    if match:
        lead = match.group(1).strip()
        rest = item[match.end() :]
        if match.group(2) or lead.endswith(":"):
            lead = lead.rstrip(":").strip()
            item = f"{lead}: {rest}" if rest else lead
        else:
            item = f"{lead} {rest}" if rest else lead

    return item.replace("**", "").strip()


def extract_bullet_points(text: str) -> List[str]:
    """Extract bullet items from a section body.

    Args:
        text: The section body

    Returns:
        Cleaned bullet texts, in order of appearance
    """
    points = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        marker = _BULLET_MARKER.match(line)
        if marker:
            item = line[marker.end() :]
        elif line.startswith("**") and _BOLD_LEAD.match(line) and len(line) <= MAX_BOLD_LINE_LENGTH:
            item = line
        else:
            continue

        item = _clean_item(item)
        if item and not _BARE_LABEL.match(item):
            points.append(item)

    return points


def parse_feedback(raw_text: str) -> StructuredFeedback:
    """Parse raw model feedback into its four sections.

    Sections whose heading cannot be found stay ``None``; a found heading
    without bullets yields an empty list. The result depends only on
    ``raw_text``, so stored text can be re-parsed at any time.

    Args:
        raw_text: Full model output

    Returns:
        The structured feedback
    """
    sections: Dict[str, Optional[List[str]]] = {}
    for label, (start, end) in _locate_sections(raw_text or "").items():
        sections[SECTION_FIELDS[label]] = extract_bullet_points(raw_text[start:end])

    return StructuredFeedback(**sections)


def needs_reparse(structured: Optional[StructuredFeedback]) -> bool:
    """Whether a stored structure is missing or degenerate.

    Older records may lack strengths entirely or carry the bare heading as
    their first item.
    """
    if structured is None or not structured.strengths:
        return True
    return bool(_BARE_LABEL.match(structured.strengths[0].strip()))

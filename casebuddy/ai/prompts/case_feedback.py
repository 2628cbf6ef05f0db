# flake8: noqa: E501

"""Case answer evaluation prompt.

The feedback parser depends on the section labels below; change them together.
"""

from typing import Tuple

from ...config import settings
from .base import Prompt

STRENGTHS = "STRENGTHS"
IMPROVEMENTS = "AREAS FOR IMPROVEMENT"
MISSING = "MISSING CONSIDERATIONS"
FRAMEWORKS = "FRAMEWORK SUGGESTIONS"

# Canonical order in which the model is asked to emit the sections
SECTION_LABELS: Tuple[str, ...] = (STRENGTHS, IMPROVEMENTS, MISSING, FRAMEWORKS)

SYSTEM_PROMPT = "You are an expert case study evaluator. Analyze the user's response and provide constructive feedback."

PROMPT_TEMPLATE = """Case Study: {case_title}

Problem: {case_description}

Student's Answer: {user_answer}

Provide feedback in 4 concise sections (complete all sections):

1. STRENGTHS (2-3 points)
2. AREAS FOR IMPROVEMENT (2-3 points)
3. MISSING CONSIDERATIONS (2-3 points)
4. FRAMEWORK SUGGESTIONS (1-2 specific frameworks)

Write each section heading on its own line and each point as a bullet starting with "- ".
Be encouraging but constructive. Keep total response under 500 words."""


def create_case_feedback_prompt() -> Prompt:
    """Create the evaluator prompt for a submitted case answer."""
    return Prompt(
        template=PROMPT_TEMPLATE,
        system_prompt=SYSTEM_PROMPT,
        temperature=settings.ai.feedback_temperature,
        max_tokens=settings.ai.feedback_max_tokens,
    )

"""Prompt templates for the requirement judge."""

from __future__ import annotations

from iterative_canvas.evaluator import RequirementType
from iterative_canvas.prompts.judge import (
    JUDGE_HUMAN_TEMPLATE,
    PASS_FAIL_JUDGE_SYSTEM_PROMPT,
    SUBJECTIVE_JUDGE_SYSTEM_PROMPT,
)

_JUDGE_PROMPTS: dict[RequirementType, str] = {
    RequirementType.PASS_FAIL: PASS_FAIL_JUDGE_SYSTEM_PROMPT,
    RequirementType.SUBJECTIVE: SUBJECTIVE_JUDGE_SYSTEM_PROMPT,
}


def get_judge_prompt(requirement_type: RequirementType) -> str:
    """Return the judge system prompt for the given requirement type."""
    return _JUDGE_PROMPTS[requirement_type]


__all__ = [
    "JUDGE_HUMAN_TEMPLATE",
    "PASS_FAIL_JUDGE_SYSTEM_PROMPT",
    "SUBJECTIVE_JUDGE_SYSTEM_PROMPT",
    "get_judge_prompt",
]

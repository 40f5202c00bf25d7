"""Pydantic schemas for structured LLM responses.

These are separate from the domain models in ``iterative_canvas/evaluator/__init__.py``
because the judge's response shape (raw score plus explanation) differs from
the ``RequirementResult`` built from it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RequirementJudgementLLMResponse(BaseModel):
    """A judge's verdict on one requirement."""

    score: float = Field(default=0.0, ge=0.0, le=1.0)
    explanation: str = ""

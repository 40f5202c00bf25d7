"""Pydantic models for requirements, requirement groups, and run results."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class RequirementType(str, Enum):
    PASS_FAIL = "pass-fail"
    SUBJECTIVE = "subjective"

    @classmethod
    def _missing_(cls, value: object) -> RequirementType | None:
        # Stored rows use "pass_fail"; display labels ("Pass/Fail", "Subjective") also occur.
        if isinstance(value, str):
            normalized = value.strip().lower().replace("/", "-").replace("_", "-").replace(" ", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def criterion_type(self) -> str:
        return "hard" if self is RequirementType.PASS_FAIL else "soft"


class ResultStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class Requirement(BaseModel):
    """A single user-authored requirement scored against a model response."""

    id: int
    text: str
    weight: int = Field(default=1, ge=0)
    type: RequirementType = RequirementType.PASS_FAIL
    threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    model: str = "gpt-4o"
    required: bool = False

    @model_validator(mode="after")
    def _default_threshold(self) -> Requirement:
        if self.threshold is None:
            self.threshold = 0.5 if self.type is RequirementType.SUBJECTIVE else 0.0
        return self


class RequirementGroup(BaseModel):
    """The requirements of one canvas version and their success threshold."""

    requirements: list[Requirement] = Field(default_factory=list)
    success_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _unique_ids(self) -> RequirementGroup:
        counts = Counter(r.id for r in self.requirements)
        duplicates = sorted(i for i, n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate requirement ids: {duplicates}")
        return self


class RequirementResult(BaseModel):
    """Outcome of running a single requirement."""

    requirement_id: int
    result: ResultStatus
    score: float
    reasoning: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def passed(self) -> bool:
        return self.result is ResultStatus.PASS


class OverallResult(BaseModel):
    """Overall verdict of a Run All. ``score`` is NaN when undefined."""

    result: ResultStatus
    score: float
    reasoning: str
    required_failed: bool = False

    @property
    def passed(self) -> bool:
        return self.result is ResultStatus.PASS


class RunReport(BaseModel):
    """Everything produced by one Run All invocation."""

    requirement_results: list[RequirementResult]
    overall: OverallResult
    excluded_requirement_ids: list[int] = Field(default_factory=list)

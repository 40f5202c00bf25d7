"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from iterative_canvas.config import Settings
from iterative_canvas.evaluator import Requirement, RequirementGroup, RequirementType
from iterative_canvas.evaluator.criteria import HardCriterion, SoftCriterion


@pytest.fixture
def settings() -> Settings:
    """Settings independent of any local .env file."""
    return Settings(_env_file=None, max_concurrent_judgements=2)


@pytest.fixture
def mixed_criteria() -> list:
    """Soft and hard criteria whose weighted mean is 0.775."""
    return [
        SoftCriterion(score=0.8, weight=2),
        HardCriterion(score=1, weight=1),
        SoftCriterion(score=0.5, weight=1),
    ]


@pytest.fixture
def sample_group() -> RequirementGroup:
    """Four requirements, one of them required, with a 0.8 success threshold."""
    return RequirementGroup(
        success_threshold=0.8,
        requirements=[
            Requirement(id=1, text="Response should be under 500 words", type=RequirementType.PASS_FAIL),
            Requirement(id=2, text="Include practical examples", type=RequirementType.SUBJECTIVE, threshold=0.5),
            Requirement(id=3, text="Answer the question", type=RequirementType.PASS_FAIL, weight=2, required=True),
            Requirement(id=4, text="Friendly tone", type=RequirementType.SUBJECTIVE, threshold=0.6),
        ],
    )

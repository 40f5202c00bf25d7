"""Map requirements and judge scores onto criteria and verdict text."""

from __future__ import annotations

import math

from iterative_canvas.evaluator import Requirement, RequirementResult, RequirementType, ResultStatus
from iterative_canvas.evaluator.criteria import Criterion, HardCriterion, SoftCriterion, is_valid_criterion
from iterative_canvas.evaluator.decision import passes_locally


def requirement_to_criterion(requirement: Requirement, score: float) -> Criterion:
    """Build the criterion for ``requirement`` scored at ``score``."""
    if requirement.type is RequirementType.PASS_FAIL:
        return HardCriterion(score=score, weight=requirement.weight)
    return SoftCriterion(score=score, weight=requirement.weight)


def requirement_passes(requirement: Requirement, score: float) -> bool:
    """Local verdict for a requirement: its own threshold, not the group's."""
    criterion = requirement_to_criterion(requirement, score)
    return passes_locally(criterion, requirement.threshold or 0.0)


def judge_requirement_result(
    requirement: Requirement,
    score: float,
    explanation: str | None = None,
) -> RequirementResult:
    """Turn a raw judge score into a ``RequirementResult`` with reasoning.

    A score the requirement type does not allow (outside [0, 1], or not 0/1
    for pass/fail) fails, since it is also left out of the aggregate.
    """
    valid = is_valid_criterion(requirement_to_criterion(requirement, score))
    passed = valid and requirement_passes(requirement, score)
    if not valid:
        reasoning = (
            f"The score {score} is not a valid {requirement.type.value} score, "
            "so the requirement failed and was excluded from the overall score."
        )
    elif passed:
        reasoning = f"The model's output successfully met the criteria with a score of {score:.2f}."
    else:
        reasoning = (
            f"The model's output did not meet the threshold. It scored {score:.2f} "
            "which is below the required pass condition."
        )
    if explanation:
        reasoning = f"{reasoning} {explanation.strip()}"

    return RequirementResult(
        requirement_id=requirement.id,
        result=ResultStatus.PASS if passed else ResultStatus.FAIL,
        score=score,
        reasoning=reasoning,
    )


def overall_reasoning(score: float, threshold: float, required_failed: bool = False) -> str:
    """Human-readable summary of the overall verdict."""
    if math.isnan(score):
        summary = f"No weighted score could be computed, so the success threshold of {threshold} was not met."
    else:
        position = "above" if score >= threshold else "below"
        summary = f"Overall weighted score of {score:.2f} was {position} the success threshold of {threshold}."
    if required_failed:
        summary += " At least one required requirement failed, so the run did not pass."
    return summary

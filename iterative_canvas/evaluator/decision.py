"""Overall pass/fail gate: required criteria plus a success threshold."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from iterative_canvas.evaluator.criteria import HARD, CriterionLike, criterion_field


@dataclass(frozen=True)
class Decision:
    """Overall verdict for one evaluation run."""

    score: float
    passed: bool
    required_failed: bool = False


def passes_locally(criterion: CriterionLike, threshold: float = 0.5) -> bool:
    """Return the criterion's own pass/fail verdict.

    A hard criterion passes only with a score of exactly 1. A soft criterion
    passes when its score reaches its own ``threshold`` (not the group's
    success threshold).
    """
    score = criterion_field(criterion, "score")
    if criterion_field(criterion, "type") == HARD:
        return score == 1
    return score >= threshold


def decide(required_results: Iterable[bool], aggregate_score: float, threshold: float) -> Decision:
    """Combine the required-criteria gate with the aggregate score.

    Args:
        required_results: Local pass/fail of every criterion marked required.
        aggregate_score: Output of ``evaluate_criteria``; may be NaN.
        threshold: The group-level success threshold.

    Returns:
        A ``Decision``. A failed required criterion fails the run whatever
        the aggregate. A NaN aggregate never passes, since NaN compares false
        against every threshold.
    """
    required_failed = not all(required_results)
    passed = not required_failed and aggregate_score >= threshold
    return Decision(score=aggregate_score, passed=passed, required_failed=required_failed)

"""Criterion types, validation and weighted aggregation.

These are pure functions over plain values: no I/O, no shared state. They are
safe to call from any number of concurrent evaluations.
"""

from __future__ import annotations

from iterative_canvas.evaluator.criteria.aggregate import AggregateResult, evaluate_criteria, score_criteria
from iterative_canvas.evaluator.criteria.base import (
    HARD,
    SOFT,
    Criterion,
    CriterionLike,
    HardCriterion,
    SoftCriterion,
    criterion_field,
    criterion_from_mapping,
    is_valid_criterion,
)

__all__ = [
    "HARD",
    "SOFT",
    "AggregateResult",
    "Criterion",
    "CriterionLike",
    "HardCriterion",
    "SoftCriterion",
    "criterion_field",
    "criterion_from_mapping",
    "evaluate_criteria",
    "is_valid_criterion",
    "score_criteria",
]

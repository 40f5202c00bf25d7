"""Weighted aggregation of hard and soft criteria into a single score.

Hard and soft criteria share one weighted arithmetic mean: a hard criterion
contributes 0 or 1, a soft criterion its continuous score, each multiplied by
its weight. Whether some criteria are gating is decided separately by
``iterative_canvas.evaluator.decision``.

Criteria are not validated here. Compose with ``is_valid_criterion`` first if
malformed data must be rejected rather than skew the mean.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from iterative_canvas.evaluator.criteria.base import CriterionLike, criterion_field


@dataclass(frozen=True)
class AggregateResult:
    """Aggregate score plus each criterion's share of it.

    Attributes:
        aggregate_score: Weighted mean of the scores, or NaN when the total
            weight is zero (including the empty collection).
        contributions: ``score * weight / total_weight`` per criterion, in
            input order. All NaN when the aggregate is NaN.
    """

    aggregate_score: float
    contributions: tuple[float, ...] = ()

    @property
    def is_defined(self) -> bool:
        return not math.isnan(self.aggregate_score)


def _total(values: list[float]) -> float:
    """Order-independent sum of ``values``.

    ``math.fsum`` is exactly rounded, so any permutation gives the same
    result. It raises on overflow and on ``inf - inf``; the plain sum gives
    the IEEE answer (inf or NaN) in those cases.
    """
    try:
        return math.fsum(values)
    except (OverflowError, ValueError):
        return sum(values)


def score_criteria(criteria: Iterable[CriterionLike]) -> AggregateResult:
    """Compute the weighted aggregate and per-criterion contributions."""
    items = list(criteria)
    weights = [criterion_field(c, "weight") for c in items]
    total_weight = _total(weights)

    if not items or total_weight == 0:
        return AggregateResult(aggregate_score=math.nan, contributions=tuple(math.nan for _ in items))

    weighted = [criterion_field(c, "score") * w for c, w in zip(items, weights)]
    return AggregateResult(
        aggregate_score=_total(weighted) / total_weight,
        contributions=tuple(value / total_weight for value in weighted),
    )


def evaluate_criteria(criteria: Iterable[CriterionLike]) -> float:
    """Return the weighted mean score of ``criteria``.

    Zero-weight criteria drop out of both numerator and denominator. An empty
    collection, or one whose weights sum to zero, yields ``math.nan``: there is
    no well-defined aggregate, which is not the same as scoring 0.
    """
    return score_criteria(criteria).aggregate_score

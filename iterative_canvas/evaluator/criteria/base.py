"""Criterion value types and the criterion validator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any, Literal, Union

HARD = "hard"
SOFT = "soft"


@dataclass(frozen=True)
class HardCriterion:
    """A binary pass/fail criterion. ``score`` is expected to be 0 or 1."""

    score: float
    weight: float = 1.0
    type: Literal["hard"] = HARD


@dataclass(frozen=True)
class SoftCriterion:
    """A subjective criterion. ``score`` is expected to lie in [0, 1]."""

    score: float
    weight: float = 1.0
    type: Literal["soft"] = SOFT


Criterion = Union[HardCriterion, SoftCriterion]

# Anything carrying ``type``/``score``/``weight``, as an object or a mapping.
CriterionLike = Union[Criterion, Mapping[str, Any]]


def criterion_field(criterion: CriterionLike, name: str) -> Any:
    """Read ``name`` from a criterion given as a dataclass or a mapping."""
    if isinstance(criterion, Mapping):
        return criterion[name]
    return getattr(criterion, name)


def criterion_from_mapping(data: Mapping[str, Any]) -> Criterion:
    """Build a typed criterion from a ``{"type", "score", "weight"}`` mapping.

    Raises:
        KeyError: If ``type`` or ``score`` is missing.
        ValueError: If ``type`` is neither ``"hard"`` nor ``"soft"``.
    """
    kind = data["type"]
    weight = data.get("weight", 1.0)
    if kind == HARD:
        return HardCriterion(score=data["score"], weight=weight)
    if kind == SOFT:
        return SoftCriterion(score=data["score"], weight=weight)
    raise ValueError(f"Unknown criterion type: {kind!r}")


def _is_number(value: Any) -> bool:
    # bool is a Real subclass but never a meaningful score or weight
    return isinstance(value, Real) and not isinstance(value, bool)


def is_valid_criterion(criterion: Any) -> bool:
    """Return True if the criterion's fields are well-formed.

    - soft: ``0 <= score <= 1`` and ``weight >= 0``
    - hard: ``score`` is exactly 0 or 1 and ``weight >= 0``
    - any other type tag, or a shape that is not a criterion at all: False

    Never raises. NaN scores or weights are invalid because every comparison
    against NaN is false.
    """
    try:
        kind = criterion_field(criterion, "type")
        score = criterion_field(criterion, "score")
        weight = criterion_field(criterion, "weight")
    except (KeyError, AttributeError, TypeError):
        return False

    if not (_is_number(score) and _is_number(weight)):
        return False

    if kind == SOFT:
        return 0 <= score <= 1 and weight >= 0
    if kind == HARD:
        return (score == 0 or score == 1) and weight >= 0
    return False

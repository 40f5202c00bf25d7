"""Repository pattern for database operations."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from iterative_canvas.db.models import EvaluationRecord, RequirementGroupRecord, RequirementRecord
from iterative_canvas.evaluator import Requirement, RequirementGroup, RequirementResult, RequirementType
from iterative_canvas.evaluator.exceptions import RequirementError


def _as_float(value: Decimal | float | None) -> float | None:
    return None if value is None else float(value)


def to_requirement(record: RequirementRecord) -> Requirement:
    """Map a stored requirement row to the domain model.

    Raises:
        RequirementError: If the stored type label is not recognised.
    """
    try:
        requirement_type = RequirementType(record.type)
    except ValueError as exc:
        raise RequirementError(
            f"Unknown requirement type {record.type!r}",
            context={"requirement_id": record.id},
        ) from exc

    return Requirement(
        id=record.id,
        text=record.content or "",
        weight=record.weight,
        type=requirement_type,
        threshold=_as_float(record.threshold),
        required=record.is_required,
    )


def to_requirement_group(record: RequirementGroupRecord) -> RequirementGroup:
    """Map a stored requirement group and its rows to the domain model."""
    return RequirementGroup(
        requirements=[to_requirement(r) for r in record.requirements],
        success_threshold=float(record.success_threshold),
    )


class RequirementGroupRepository:
    """Read access to requirement groups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_for_canvas_version(self, canvas_version_id: int) -> RequirementGroup | None:
        """Load the requirement group of a canvas version, if it has one."""
        result = await self.session.execute(
            select(RequirementGroupRecord)
            .options(selectinload(RequirementGroupRecord.requirements))
            .where(RequirementGroupRecord.canvas_version_id == canvas_version_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        return to_requirement_group(record)


class EvaluationRepository:
    """CRUD operations for requirement evaluations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_for_requirement(self, requirement_id: int) -> EvaluationRecord | None:
        """Retrieve the stored evaluation of a requirement."""
        result = await self.session.execute(
            select(EvaluationRecord).where(EvaluationRecord.requirement_id == requirement_id)
        )
        return result.scalar_one_or_none()

    async def save(self, result: RequirementResult) -> EvaluationRecord:
        """Persist a requirement result, replacing any earlier evaluation."""
        evaluation = await self.get_for_requirement(result.requirement_id)
        if evaluation is None:
            evaluation = EvaluationRecord(requirement_id=result.requirement_id)
            self.session.add(evaluation)

        evaluation.score = Decimal(str(result.score))
        evaluation.explanation = result.reasoning

        await self.session.flush()
        return evaluation

    async def save_all(self, results: list[RequirementResult]) -> list[EvaluationRecord]:
        """Persist every result of a run."""
        return [await self.save(result) for result in results]

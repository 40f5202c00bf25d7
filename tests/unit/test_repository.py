"""Unit tests for repository operations."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from iterative_canvas.db.models import EvaluationRecord, RequirementGroupRecord, RequirementRecord
from iterative_canvas.db.repository import (
    EvaluationRepository,
    RequirementGroupRepository,
    to_requirement,
    to_requirement_group,
)
from iterative_canvas.evaluator import RequirementResult, RequirementType, ResultStatus
from iterative_canvas.evaluator.exceptions import RequirementError


@pytest.fixture
def mock_session():
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    return session


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _requirement_record(**overrides) -> RequirementRecord:
    fields = {
        "id": 11,
        "requirement_group_id": 1,
        "content": "Include practical examples",
        "is_required": True,
        "weight": 2,
        "type": "Subjective",
        "threshold": Decimal("0.6"),
    }
    fields.update(overrides)
    return RequirementRecord(**fields)


class TestMapping:
    def test_to_requirement(self):
        req = to_requirement(_requirement_record())
        assert req.id == 11
        assert req.text == "Include practical examples"
        assert req.type is RequirementType.SUBJECTIVE
        assert req.threshold == pytest.approx(0.6)
        assert req.weight == 2
        assert req.required is True

    def test_null_threshold_uses_type_default(self):
        req = to_requirement(_requirement_record(type="Pass/Fail", threshold=None))
        assert req.type is RequirementType.PASS_FAIL
        assert req.threshold == 0.0

    @pytest.mark.parametrize("stored,expected", [
        ("pass_fail", RequirementType.PASS_FAIL),
        ("subjective", RequirementType.SUBJECTIVE),
        ("Pass/Fail", RequirementType.PASS_FAIL),
    ])
    def test_stored_type_labels(self, stored, expected):
        assert to_requirement(_requirement_record(type=stored)).type is expected

    def test_column_default_is_a_known_type(self):
        default = RequirementRecord.__table__.c.type.default.arg
        assert RequirementType(default) is RequirementType.PASS_FAIL

    def test_null_content(self):
        assert to_requirement(_requirement_record(content=None)).text == ""

    def test_unknown_type(self):
        with pytest.raises(RequirementError) as exc_info:
            to_requirement(_requirement_record(type="Ranking"))
        assert exc_info.value.context == {"requirement_id": 11}

    def test_to_requirement_group(self):
        record = RequirementGroupRecord(id=1, canvas_version_id=5, success_threshold=Decimal("0.75"))
        record.requirements = [_requirement_record(), _requirement_record(id=12, type="Pass/Fail", threshold=None)]

        group = to_requirement_group(record)

        assert group.success_threshold == pytest.approx(0.75)
        assert [r.id for r in group.requirements] == [11, 12]


class TestRequirementGroupRepository:
    @pytest.mark.asyncio
    async def test_get_for_canvas_version(self, mock_session):
        record = RequirementGroupRecord(id=1, canvas_version_id=5, success_threshold=Decimal("0.8"))
        record.requirements = [_requirement_record()]
        mock_session.execute.return_value = _scalar_result(record)

        group = await RequirementGroupRepository(mock_session).get_for_canvas_version(5)

        mock_session.execute.assert_awaited_once()
        assert group is not None
        assert group.success_threshold == pytest.approx(0.8)
        assert len(group.requirements) == 1

    @pytest.mark.asyncio
    async def test_missing_group(self, mock_session):
        mock_session.execute.return_value = _scalar_result(None)
        assert await RequirementGroupRepository(mock_session).get_for_canvas_version(99) is None


class TestEvaluationRepository:
    @pytest.mark.asyncio
    async def test_save_inserts_new_row(self, mock_session):
        mock_session.execute.return_value = _scalar_result(None)
        result = RequirementResult(requirement_id=11, result=ResultStatus.PASS, score=0.9, reasoning="good")

        evaluation = await EvaluationRepository(mock_session).save(result)

        mock_session.add.assert_called_once_with(evaluation)
        mock_session.flush.assert_awaited_once()
        assert evaluation.requirement_id == 11
        assert evaluation.score == Decimal("0.9")
        assert evaluation.explanation == "good"

    @pytest.mark.asyncio
    async def test_save_replaces_existing_row(self, mock_session):
        existing = EvaluationRecord(id=3, requirement_id=11, score=Decimal("0.1"), explanation="old")
        mock_session.execute.return_value = _scalar_result(existing)
        result = RequirementResult(requirement_id=11, result=ResultStatus.FAIL, score=0.0, reasoning="new")

        evaluation = await EvaluationRepository(mock_session).save(result)

        mock_session.add.assert_not_called()
        assert evaluation is existing
        assert evaluation.score == Decimal("0.0")
        assert evaluation.explanation == "new"

    @pytest.mark.asyncio
    async def test_save_all(self, mock_session):
        mock_session.execute.return_value = _scalar_result(None)
        results = [
            RequirementResult(requirement_id=i, result=ResultStatus.PASS, score=1.0, reasoning="ok")
            for i in (1, 2)
        ]

        evaluations = await EvaluationRepository(mock_session).save_all(results)

        assert [e.requirement_id for e in evaluations] == [1, 2]
        assert mock_session.flush.await_count == 2

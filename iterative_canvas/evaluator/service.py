"""Requirement evaluation service: runs judges and aggregates a verdict.

Provides ``RequirementEvaluationService`` with the two user-facing flows:
running a single requirement, and Run All, which judges every requirement of
a group concurrently and combines them with the weighted scorer and the
required-criteria gate.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from iterative_canvas.config import Settings, get_settings
from iterative_canvas.evaluator import (
    OverallResult,
    Requirement,
    RequirementGroup,
    RequirementResult,
    ResultStatus,
    RunReport,
)
from iterative_canvas.evaluator.criteria import Criterion, is_valid_criterion, score_criteria
from iterative_canvas.evaluator.decision import decide
from iterative_canvas.evaluator.exceptions import (
    EvaluatorError,
    JudgeError,
    LLMError,
    format_fatal_error,
    is_fatal_llm_error,
)
from iterative_canvas.evaluator.judge import JudgeVerdict, RequirementJudge
from iterative_canvas.evaluator.requirements import (
    judge_requirement_result,
    overall_reasoning,
    requirement_to_criterion,
)

logger = logging.getLogger(__name__)


class RequirementEvaluationService:
    """Scores a model response against requirements.

    Attributes:
        judge: Produces a raw score per requirement.
        settings: Application settings; bounds Run All concurrency.
    """

    def __init__(self, judge: RequirementJudge, settings: Settings | None = None) -> None:
        self.judge = judge
        self.settings = settings or get_settings()

    async def run_requirement(self, requirement: Requirement, response_text: str) -> RequirementResult:
        """Judge one requirement and return its local verdict.

        Raises:
            LLMError: On a fatal provider error (billing, keys, quota).
            JudgeError: When the requirement could not be judged.
        """
        verdict = await self._judge(requirement, response_text)
        result = judge_requirement_result(requirement, verdict.score, verdict.explanation)
        logger.info(
            "Requirement %s judged: score=%.2f result=%s",
            requirement.id,
            result.score,
            result.result.value,
        )
        return result

    async def run_all(self, group: RequirementGroup, response_text: str) -> RunReport:
        """Judge every requirement in ``group`` and decide the overall verdict."""
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_judgements)

        async def _bounded(requirement: Requirement) -> RequirementResult:
            async with semaphore:
                return await self.run_requirement(requirement, response_text)

        results = await asyncio.gather(*(_bounded(r) for r in group.requirements))
        return self.summarize(group, list(results))

    def summarize(self, group: RequirementGroup, results: Sequence[RequirementResult]) -> RunReport:
        """Combine per-requirement results into a ``RunReport``.

        Invalid criteria (out-of-range scores, negative weights) are excluded
        from the aggregate and reported. An invalid required criterion counts
        as a failed required criterion.
        """
        by_id = {result.requirement_id: result for result in results}
        criteria: list[Criterion] = []
        required_results: list[bool] = []
        excluded: list[int] = []

        for requirement in group.requirements:
            result = by_id.get(requirement.id)
            if result is None:
                continue
            criterion = requirement_to_criterion(requirement, result.score)
            if not is_valid_criterion(criterion):
                logger.warning(
                    "Excluding requirement %s from aggregate: invalid criterion %s",
                    requirement.id,
                    criterion,
                )
                excluded.append(requirement.id)
                if requirement.required:
                    required_results.append(False)
                continue
            criteria.append(criterion)
            if requirement.required:
                required_results.append(result.passed)

        aggregate = score_criteria(criteria)
        decision = decide(required_results, aggregate.aggregate_score, group.success_threshold)

        overall = OverallResult(
            result=ResultStatus.PASS if decision.passed else ResultStatus.FAIL,
            score=decision.score,
            reasoning=overall_reasoning(decision.score, group.success_threshold, decision.required_failed),
            required_failed=decision.required_failed,
        )
        logger.info(
            "Run complete: %d requirements, score=%s, result=%s",
            len(results),
            f"{decision.score:.2f}" if aggregate.is_defined else "undefined",
            overall.result.value,
        )
        return RunReport(
            requirement_results=list(results),
            overall=overall,
            excluded_requirement_ids=excluded,
        )

    async def _judge(self, requirement: Requirement, response_text: str) -> JudgeVerdict:
        try:
            return await self.judge.judge(requirement, response_text)
        except EvaluatorError:
            raise
        except Exception as exc:
            logger.exception("Judging requirement %s failed: %s", requirement.id, exc)
            if is_fatal_llm_error(exc):
                raise LLMError(
                    format_fatal_error(exc),
                    context={"requirement_id": requirement.id, "original_error": str(exc)},
                ) from exc
            raise JudgeError(
                f"Judging requirement {requirement.id} failed: {exc}",
                context={"requirement_id": requirement.id, "original_error": str(exc)},
            ) from exc

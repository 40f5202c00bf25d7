"""Requirement judges: score a model response against one requirement."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from iterative_canvas.evaluator import Requirement, RequirementType
from iterative_canvas.evaluator.exceptions import JudgeError
from iterative_canvas.evaluator.llm_schemas import RequirementJudgementLLMResponse
from iterative_canvas.prompts import JUDGE_HUMAN_TEMPLATE, get_judge_prompt
from iterative_canvas.utils.structured_output import invoke_structured

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JudgeVerdict:
    """Raw judgement of one requirement: a score and an optional explanation."""

    score: float
    explanation: str | None = None


class RequirementJudge(Protocol):
    async def judge(self, requirement: Requirement, response_text: str) -> JudgeVerdict: ...


class LLMRequirementJudge:
    """LLM-as-judge scoring with LangChain chat models.

    The caller builds the chat models; transport, retries and streaming are
    their concern. Each requirement is judged by the model registered under
    its ``Requirement.model`` name, or by ``llm`` when none is.

    Args:
        llm: Default chat model.
        models: Chat models keyed by model name, e.g. ``{"o3": ...}``.
    """

    def __init__(self, llm: BaseChatModel, models: Mapping[str, BaseChatModel] | None = None) -> None:
        self.llm = llm
        self.models = dict(models or {})

    def model_for(self, requirement: Requirement) -> BaseChatModel:
        return self.models.get(requirement.model, self.llm)

    async def judge(self, requirement: Requirement, response_text: str) -> JudgeVerdict:
        prompt = ChatPromptTemplate.from_messages([
            ("system", get_judge_prompt(requirement.type)),
            ("human", JUDGE_HUMAN_TEMPLATE),
        ])
        variables = {"requirement": requirement.text, "response": response_text}

        llm = self.model_for(requirement)
        parsed = await invoke_structured(llm, prompt, variables, RequirementJudgementLLMResponse)
        if parsed is None:
            raise JudgeError(
                f"Judge returned no parseable verdict for requirement {requirement.id}",
                context={"requirement_id": requirement.id, "response_length": len(response_text)},
            )

        score = parsed.score
        if requirement.type is RequirementType.PASS_FAIL and score not in (0.0, 1.0):
            # Pass/fail verdicts are snapped so the criterion stays binary.
            logger.debug("Snapping pass/fail score %.3f for requirement %s", score, requirement.id)
            score = 1.0 if score >= 0.5 else 0.0

        return JudgeVerdict(score=score, explanation=parsed.explanation or None)


class StaticScoreJudge:
    """Judge that replays precomputed scores keyed by requirement id.

    Used when scores come from a file or an earlier run instead of an LLM.
    """

    def __init__(self, scores: Mapping[int, float]) -> None:
        self.scores = dict(scores)

    async def judge(self, requirement: Requirement, response_text: str) -> JudgeVerdict:
        if requirement.id not in self.scores:
            raise JudgeError(
                f"No score recorded for requirement {requirement.id}",
                context={"requirement_id": requirement.id},
            )
        return JudgeVerdict(score=self.scores[requirement.id])

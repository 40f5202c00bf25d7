"""Unit tests for the requirement judges."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from iterative_canvas.evaluator import Requirement, RequirementType
from iterative_canvas.evaluator.exceptions import JudgeError
from iterative_canvas.evaluator.judge import JudgeVerdict, LLMRequirementJudge, StaticScoreJudge
from iterative_canvas.evaluator.llm_schemas import RequirementJudgementLLMResponse
from iterative_canvas.prompts import PASS_FAIL_JUDGE_SYSTEM_PROMPT, SUBJECTIVE_JUDGE_SYSTEM_PROMPT, get_judge_prompt

PASS_FAIL = Requirement(id=1, text="Response should be under 500 words")
SUBJECTIVE = Requirement(id=2, text="Include practical examples", type=RequirementType.SUBJECTIVE)


class TestLLMRequirementJudge:
    @pytest.mark.asyncio
    @patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock)
    async def test_subjective_score_passed_through(self, mock_invoke):
        mock_invoke.return_value = RequirementJudgementLLMResponse(score=0.72, explanation="Two examples given.")

        verdict = await LLMRequirementJudge(MagicMock()).judge(SUBJECTIVE, "Here are two examples...")

        assert verdict == JudgeVerdict(score=0.72, explanation="Two examples given.")
        variables = mock_invoke.call_args.args[2]
        assert variables == {"requirement": SUBJECTIVE.text, "response": "Here are two examples..."}
        assert mock_invoke.call_args.args[3] is RequirementJudgementLLMResponse

    @pytest.mark.asyncio
    @patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock)
    async def test_uses_prompt_for_requirement_type(self, mock_invoke):
        mock_invoke.return_value = RequirementJudgementLLMResponse(score=1.0, explanation="short")

        await LLMRequirementJudge(MagicMock()).judge(PASS_FAIL, "short answer")

        prompt = mock_invoke.call_args.args[1]
        messages = prompt.format_messages(requirement="r", response="x")
        assert messages[0].content.startswith("You are a strict evaluator")
        assert '"score"' in messages[0].content
        assert "Requirement:\n```\nr\n```" in messages[1].content

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw,expected", [(0.8, 1.0), (0.5, 1.0), (0.49, 0.0), (0.0, 0.0)])
    async def test_pass_fail_score_snapped(self, raw, expected):
        with patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock) as mock_invoke:
            mock_invoke.return_value = RequirementJudgementLLMResponse(score=raw, explanation="")
            verdict = await LLMRequirementJudge(MagicMock()).judge(PASS_FAIL, "text")
        assert verdict.score == expected
        assert verdict.explanation is None

    @pytest.mark.asyncio
    @patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock)
    async def test_unparseable_response_raises(self, mock_invoke):
        mock_invoke.return_value = None
        with pytest.raises(JudgeError) as exc_info:
            await LLMRequirementJudge(MagicMock()).judge(SUBJECTIVE, "text")
        assert exc_info.value.context["requirement_id"] == 2


class TestModelSelection:
    @pytest.mark.asyncio
    @patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock)
    async def test_uses_model_named_by_requirement(self, mock_invoke):
        mock_invoke.return_value = RequirementJudgementLLMResponse(score=1.0)
        default_llm, o3 = MagicMock(), MagicMock()
        judge = LLMRequirementJudge(default_llm, models={"o3": o3})

        await judge.judge(Requirement(id=5, text="x", model="o3"), "text")

        assert mock_invoke.call_args.args[0] is o3

    @pytest.mark.asyncio
    @patch("iterative_canvas.evaluator.judge.invoke_structured", new_callable=AsyncMock)
    async def test_unregistered_model_uses_default(self, mock_invoke):
        mock_invoke.return_value = RequirementJudgementLLMResponse(score=1.0)
        default_llm = MagicMock()
        judge = LLMRequirementJudge(default_llm, models={"o3": MagicMock()})

        await judge.judge(PASS_FAIL, "text")

        assert PASS_FAIL.model == "gpt-4o"
        assert mock_invoke.call_args.args[0] is default_llm


class TestStaticScoreJudge:
    @pytest.mark.asyncio
    async def test_replays_score(self):
        verdict = await StaticScoreJudge({1: 0.0}).judge(PASS_FAIL, "ignored")
        assert verdict == JudgeVerdict(score=0.0)

    @pytest.mark.asyncio
    async def test_missing_score(self):
        with pytest.raises(JudgeError):
            await StaticScoreJudge({}).judge(PASS_FAIL, "ignored")


class TestJudgePrompts:
    def test_prompt_per_type(self):
        assert get_judge_prompt(RequirementType.PASS_FAIL) is PASS_FAIL_JUDGE_SYSTEM_PROMPT
        assert get_judge_prompt(RequirementType.SUBJECTIVE) is SUBJECTIVE_JUDGE_SYSTEM_PROMPT

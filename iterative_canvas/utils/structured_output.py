"""Parse LLM replies into pydantic models.

Judges ask for native structured output first. Models that cannot do tool
calling, or that return something the schema rejects, are asked again with a
plain call whose text is searched for a JSON object.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCED = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL | re.IGNORECASE)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_NON_TEXT_BLOCKS = frozenset({"thinking", "reasoning"})


def _extract_json(content: str) -> str:
    """Return the JSON candidate in ``content``: a fenced block, else the outermost braces."""
    for pattern, group in ((_FENCED, 1), (_OBJECT, 0)):
        found = pattern.search(content)
        if found:
            return found.group(group).strip()
    return content.strip()


def _block_text(block: Any) -> str | None:
    if isinstance(block, str):
        return block
    if isinstance(block, dict) and block.get("type") not in _NON_TEXT_BLOCKS:
        return block.get("text")
    return None


def _extract_text_content(response: object) -> str:
    """Flatten ``response.content`` to text.

    Content is a string or a list of blocks; thinking and reasoning blocks
    are dropped.
    """
    content = getattr(response, "content", None)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        logger.warning("Coercing %s reply content to str", type(content).__name__)
        return str(content)

    parts = [text for text in map(_block_text, content) if text is not None]
    if not parts:
        logger.warning("Reply had %d content blocks and none carried text", len(content))
    return "\n".join(parts)


def _coerce(result: Any, schema: type[T]) -> T | None:
    if isinstance(result, schema):
        return result
    if isinstance(result, dict):
        return schema.model_validate(result)
    logger.warning("Structured %s call returned %s", schema.__name__, type(result).__name__)
    return None


async def _invoke_json_fallback(
    llm: BaseChatModel,
    prompt: ChatPromptTemplate,
    variables: dict,
    schema: type[T],
) -> T | None:
    response = await (prompt | llm).ainvoke(variables)
    text = _extract_text_content(response)
    if not text:
        return None

    try:
        return schema.model_validate(json.loads(_extract_json(text)))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Could not parse %s from %d chars of reply: %s", schema.__name__, len(text), exc)
        return None


async def invoke_structured(
    llm: BaseChatModel,
    prompt: ChatPromptTemplate,
    variables: dict,
    schema: type[T],
) -> T | None:
    """Run ``prompt`` against ``llm`` and parse the reply as ``schema``.

    Args:
        llm: Any LangChain chat model.
        prompt: Prompt template, formatted with ``variables``.
        variables: Template variables.
        schema: Pydantic model the reply must satisfy.

    Returns:
        The parsed model, or ``None`` when neither attempt produced a valid
        one. Provider errors are not caught here; callers classify them.
    """
    try:
        parsed = _coerce(await (prompt | llm.with_structured_output(schema)).ainvoke(variables), schema)
        if parsed is not None:
            return parsed
    except (NotImplementedError, TypeError, AttributeError) as exc:
        logger.debug("No native structured output for %s: %s", schema.__name__, exc)
    except ValidationError as exc:
        logger.warning("Structured %s reply failed validation: %s", schema.__name__, exc)

    return await _invoke_json_fallback(llm, prompt, variables, schema)

"""Errors raised while judging and scoring requirements."""

from __future__ import annotations

from typing import NamedTuple


class EvaluatorError(Exception):
    """Root of the package's exceptions.

    Args:
        message: What went wrong, shown to the user.
        context: Identifiers for logs, e.g. ``{"requirement_id": 3}``.
    """

    def __init__(self, message: str = "", context: dict | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class LLMError(EvaluatorError):
    """The judge's provider rejected the call (billing, credentials, quota)."""


class JudgeError(EvaluatorError):
    """A requirement could not be judged against a response."""


class ConfigurationError(EvaluatorError):
    """A requirement group file or setting is invalid."""


class RequirementError(EvaluatorError):
    """A stored requirement cannot be mapped to the domain model."""


class _ProviderFailure(NamedTuple):
    title: str
    advice: str
    markers: tuple[str, ...]


# Checked in order; the first rule with a marker in the lowercased message wins.
_PROVIDER_FAILURES: tuple[_ProviderFailure, ...] = (
    _ProviderFailure(
        "Insufficient Credits",
        "The LLM API returned a billing error. Check the provider account's plan and billing.",
        ("credit balance", "billing", "insufficient_quota"),
    ),
    _ProviderFailure(
        "Invalid API Key",
        "The API key is missing or invalid. Check the provider key in your `.env` file.",
        ("api key", "api_key", "x-api-key", "authentication"),
    ),
    _ProviderFailure(
        "Quota / Rate Limit Exceeded",
        "The API rate limit or quota has been exceeded. Wait a moment and run again.",
        ("quota", "rate limit", "too many requests"),
    ),
    _ProviderFailure(
        "Model Not Found",
        "The requested model is not available to this account. Pick another model for the requirement.",
        ("model_not_found",),
    ),
    _ProviderFailure(
        "Connection Refused",
        "Cannot connect to the LLM provider. Check the network and the provider base URL.",
        ("connection refused",),
    ),
    _ProviderFailure(
        "Provider Error",
        "The LLM API call failed with a provider-level error. Check your configuration and try again.",
        ("permission denied", "401 unauthorized", "403 forbidden"),
    ),
)


def _match(exc: Exception) -> _ProviderFailure | None:
    message = str(exc).lower()
    for failure in _PROVIDER_FAILURES:
        if any(marker in message for marker in failure.markers):
            return failure
    return None


def is_fatal_llm_error(exc: Exception) -> bool:
    """Return True when judging the remaining requirements cannot succeed either.

    Args:
        exc: Exception raised by the judge's chat model.
    """
    return _match(exc) is not None


def format_fatal_error(exc: Exception) -> str:
    """Render a provider failure as a short markdown message with the raw error.

    Args:
        exc: Exception raised by the judge's chat model.
    """
    failure = _match(exc) or _PROVIDER_FAILURES[-1]
    return f"**LLM {failure.title}**\n\n{failure.advice}\n\n```\n{str(exc)[:500]}\n```"

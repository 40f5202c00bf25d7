"""Load requirement groups from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from iterative_canvas.config import Settings, get_settings
from iterative_canvas.evaluator import Requirement, RequirementGroup, RequirementType
from iterative_canvas.evaluator.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REQUIREMENTS_PATH = Path(__file__).parent / "defaults" / "requirement_group.yaml"


def load_requirement_group(path: Path | None = None, settings: Settings | None = None) -> RequirementGroup:
    """Load a requirement group from a YAML file. Falls back to the default.

    The file may nest the group under a ``requirement_group`` key or hold it
    at the top level. A group without ``success_threshold`` and requirements
    without ``model`` take ``settings.default_success_threshold`` and
    ``settings.default_model``.

    Args:
        path: Optional explicit path to a YAML file.
        settings: Source of the defaults; ``get_settings()`` when omitted.

    Raises:
        ConfigurationError: If the file exists but is not a valid group.
    """
    settings = settings or get_settings()
    if path is None:
        path = DEFAULT_REQUIREMENTS_PATH

    if not path.exists():
        logger.debug("Requirement group file %s not found, using built-in default", path)
        return _default_group(settings)

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Cannot parse {path}: {exc}", context={"path": str(path)}) from exc

    group = _group_mapping(data, path)
    group.setdefault("success_threshold", settings.default_success_threshold)
    for requirement in group.get("requirements") or []:
        if isinstance(requirement, dict):
            requirement.setdefault("model", settings.default_model)

    try:
        return RequirementGroup(**group)
    except (TypeError, ValidationError) as exc:
        raise ConfigurationError(
            f"Invalid requirement group in {path}: {exc}",
            context={"path": str(path)},
        ) from exc


def _group_mapping(data: Any, path: Path) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, dict):
        group = data.get("requirement_group", data)
        if group is None:
            return {}
        if isinstance(group, dict):
            return group
        data = group
    raise ConfigurationError(
        f"Requirement group in {path} must be a mapping, got {type(data).__name__}",
        context={"path": str(path)},
    )


def _default_group(settings: Settings) -> RequirementGroup:
    """Return the hardcoded sample requirement group."""
    return RequirementGroup(
        success_threshold=settings.default_success_threshold,
        requirements=[
            Requirement(
                id=1,
                text="Response should be under 500 words",
                type=RequirementType.PASS_FAIL,
                model=settings.default_model,
            ),
            Requirement(
                id=2,
                text="Include practical examples",
                type=RequirementType.SUBJECTIVE,
                threshold=0.5,
                model=settings.default_model,
            ),
        ],
    )

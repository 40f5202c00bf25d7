"""Command line entrypoint with ``run`` and ``score`` commands."""

from __future__ import annotations

import asyncio
import logging
import math
from numbers import Real
from pathlib import Path
from typing import Any, Optional

import typer
import yaml

from iterative_canvas.config import get_settings
from iterative_canvas.config.eval_config import load_requirement_group
from iterative_canvas.evaluator import ResultStatus, RunReport
from iterative_canvas.evaluator.criteria import criterion_field, is_valid_criterion, score_criteria
from iterative_canvas.evaluator.decision import decide, passes_locally
from iterative_canvas.evaluator.exceptions import EvaluatorError
from iterative_canvas.evaluator.judge import StaticScoreJudge
from iterative_canvas.evaluator.service import RequirementEvaluationService
from iterative_canvas.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Score model responses against weighted requirements.")

_GREEN = "\033[32m"
_RED = "\033[31m"
_DIM = "\033[2m"
_RESET = "\033[0m"


def _configure_logging() -> None:
    settings = get_settings()
    setup_logging(level=settings.log_level, environment=settings.app_env.value)


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=2)
    with open(path) as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            typer.echo(f"Cannot parse {path}: {exc}", err=True)
            raise typer.Exit(code=2) from exc


def _read_scores(path: Path) -> dict[int, float]:
    """Read a ``{requirement_id: score}`` mapping, optionally under ``scores:``."""
    data = _read_yaml(path) or {}
    if isinstance(data, dict) and "scores" in data:
        data = data["scores"] or {}
    if not isinstance(data, dict):
        typer.echo(f"{path} must map requirement ids to scores, got {type(data).__name__}", err=True)
        raise typer.Exit(code=2)
    try:
        recorded = {int(key): value for key, value in data.items()}
    except (TypeError, ValueError) as exc:
        typer.echo(f"{path} has a requirement id that is not an integer: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    not_numeric = sorted(
        key for key, value in recorded.items() if isinstance(value, bool) or not isinstance(value, Real)
    )
    if not_numeric:
        typer.echo(f"{path} has non-numeric scores for requirements {not_numeric}", err=True)
        raise typer.Exit(code=2)
    return recorded


def _status(passed: bool) -> str:
    return f"{_GREEN}PASS{_RESET}" if passed else f"{_RED}FAIL{_RESET}"


def _format_score(score: float) -> str:
    return "n/a" if math.isnan(score) else f"{score:.2f}"


def _print_report(report: RunReport) -> None:
    for result in report.requirement_results:
        excluded = f" {_DIM}(excluded){_RESET}" if result.requirement_id in report.excluded_requirement_ids else ""
        typer.echo(f"  #{result.requirement_id:<4} {_status(result.passed)}  {_format_score(result.score)}{excluded}")
        typer.echo(f"        {_DIM}{result.reasoning}{_RESET}")
    typer.echo("")
    typer.echo(f"Overall: {_status(report.overall.passed)}  {_format_score(report.overall.score)}")
    typer.echo(report.overall.reasoning)


@app.command()
def run(
    scores: Path = typer.Argument(..., help="YAML mapping of requirement id to judged score."),
    requirements: Optional[Path] = typer.Option(None, "--requirements", "-r", help="Requirement group YAML."),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", min=0.0, max=1.0, help="Success threshold override."),
) -> None:
    """Run All over precomputed scores and print the verdict.

    Exits with status 1 when the run does not pass.
    """
    _configure_logging()

    try:
        group = load_requirement_group(requirements)
    except EvaluatorError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    if threshold is not None:
        group = group.model_copy(update={"success_threshold": threshold})

    recorded = _read_scores(scores)

    service = RequirementEvaluationService(StaticScoreJudge(recorded))
    try:
        report = asyncio.run(service.run_all(group, response_text=""))
    except EvaluatorError as exc:
        logger.error("Run failed: %s context=%s", exc, exc.context)
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    _print_report(report)
    if report.overall.result is not ResultStatus.PASS:
        raise typer.Exit(code=1)


@app.command()
def score(
    criteria_file: Path = typer.Argument(..., help="YAML list of criteria: type, score, weight, required, threshold."),
    threshold: float = typer.Option(0.8, "--threshold", "-t", min=0.0, max=1.0, help="Success threshold."),
) -> None:
    """Score raw criteria with the weighted scorer and the required gate.

    Exits with status 1 when the criteria do not pass.
    """
    _configure_logging()

    data = _read_yaml(criteria_file) or []
    items = (data.get("criteria") or []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        typer.echo(f"{criteria_file} must hold a list of criteria, got {type(items).__name__}", err=True)
        raise typer.Exit(code=2)

    valid: list[dict] = []
    required_results: list[bool] = []
    for index, item in enumerate(items):
        if not is_valid_criterion(item):
            typer.echo(f"  [{index}] {_RED}invalid{_RESET} {item}")
            continue
        valid.append(item)
        if item.get("required", False):
            required_results.append(passes_locally(item, item.get("threshold", 0.5)))

    aggregate = score_criteria(valid)
    for item, contribution in zip(valid, aggregate.contributions):
        typer.echo(
            f"  {criterion_field(item, 'type'):<5} score={criterion_field(item, 'score')} "
            f"weight={criterion_field(item, 'weight')} contribution={_format_score(contribution)}"
        )

    decision = decide(required_results, aggregate.aggregate_score, threshold)
    typer.echo("")
    typer.echo(f"Overall: {_status(decision.passed)}  {_format_score(decision.score)}")
    if decision.required_failed:
        typer.echo("A required criterion failed.")
    if not decision.passed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

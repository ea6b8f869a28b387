"""Load schedule requests and schedules from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from stripboard.exceptions import ValidationError
from stripboard.models import (
    OptimizationPriority,
    ScheduleRequest,
    SchedulingMode,
    ShootingSchedule,
)

EPISODE_KEYS = ("episodeNumbers", "episode_numbers")
BREAKDOWN_KEYS = ("breakdowns", "breakdownData")


def load_document(path: Path) -> Any:
    """Read a JSON or YAML document.

    Files without a ``.json`` suffix are read as YAML, which also accepts JSON.

    Raises:
        ValidationError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(
            message=f"Cannot read {path}: {e.strerror or e}",
            details={"file": str(path)},
        ) from e

    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(
            message=f"Cannot parse {path.name}: {e}",
            hint="Input files must be JSON or YAML documents",
            details={"file": str(path)},
        ) from e


def _validation_failure(
    path: Path, what: str, error: PydanticValidationError
) -> ValidationError:
    problems = [
        f"{'.'.join(str(part) for part in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()[:10]
    ]
    return ValidationError(
        message=f"Invalid {what} in {path.name}",
        hint="; ".join(problems) if problems else None,
        details={"file": str(path), "error_count": error.error_count()},
    )


def _breakdown_episodes(data: dict[str, Any]) -> list[int]:
    for key in BREAKDOWN_KEYS:
        breakdowns = data.get(key)
        if isinstance(breakdowns, dict):
            episodes = []
            for episode in breakdowns:
                try:
                    episodes.append(int(episode))
                except (TypeError, ValueError):
                    continue
            return sorted(episodes)
    return []


def load_schedule_request(
    path: Path,
    *,
    episodes: list[int] | None = None,
    mode: SchedulingMode | None = None,
    priority: OptimizationPriority | None = None,
) -> ScheduleRequest:
    """Load a schedule request, applying command-line overrides.

    Without episode numbers in the file or on the command line, every episode
    with a breakdown is scheduled.
    """
    data = load_document(path)
    if not isinstance(data, dict):
        raise ValidationError(
            message=f"{path.name} must contain a mapping at the top level",
            details={"file": str(path), "found": type(data).__name__},
        )

    if episodes:
        for key in EPISODE_KEYS:
            data.pop(key, None)
        data["episodeNumbers"] = list(episodes)
    elif not any(data.get(key) for key in EPISODE_KEYS):
        data["episodeNumbers"] = _breakdown_episodes(data)

    if mode is not None:
        data.pop("scheduling_mode", None)
        data["schedulingMode"] = mode.value
    if priority is not None:
        data.pop("optimization_priority", None)
        data["optimizationPriority"] = priority.value

    try:
        return ScheduleRequest.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_failure(path, "schedule request", e) from e


def load_schedule(path: Path) -> ShootingSchedule:
    """Load a previously generated shooting schedule."""
    data = load_document(path)
    try:
        return ShootingSchedule.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_failure(path, "shooting schedule", e) from e


def write_output(path: Path, content: str) -> None:
    """Write command output, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content if content.endswith("\n") else content + "\n", "utf-8")

"""CLI command for stripboard batches."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.formatters.table_formatter import TableFormatter
from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.cli.utils.input_loader import load_schedule_request
from stripboard.config import StripboardSettings, get_settings_for_cli
from stripboard.models import ScheduleRequest
from stripboard.scheduling import (
    DayCaps,
    aggregate_scenes,
    partition_batches,
    profile_locations,
)

console = Console()


def preview_batches(
    request: ScheduleRequest, settings: StripboardSettings
) -> dict[str, Any]:
    """Location statistics and the batch partition for a request, without generation."""
    scenes = aggregate_scenes(
        request.breakdowns,
        request.episode_numbers,
        default_duration=settings.default_scene_minutes,
    )
    profile = profile_locations(scenes, request.arc_locations, request.breakdowns)
    caps = DayCaps.from_settings(settings, len(request.episode_numbers))
    batches = partition_batches(profile, settings.max_scenes_per_batch)

    locations = []
    for name, stats in profile.stats.items():
        match = profile.resolve(name)
        locations.append(
            {
                "location": name,
                "venue": match.label if match else "",
                "scenes": stats.scene_count,
                "minutes": stats.total_minutes,
                "estimated_days": stats.estimated_days(caps.day_cap_minutes),
                "exterior": "yes" if stats.exterior else "no",
                "time_of_day": stats.describe_time_of_day(),
            }
        )

    return {
        "episodes": list(request.episode_numbers),
        "mode": request.mode.value,
        "scene_count": len(scenes),
        "day_cap_minutes": caps.day_cap_minutes,
        "arc_max_days": caps.arc_max_days,
        "locations": locations,
        "batches": [
            {
                "batch": batch.number,
                "scenes": batch.scene_count,
                "oversized": "yes" if batch.oversized else "no",
                "locations": ", ".join(batch.locations),
            }
            for batch in batches
        ],
    }


def batches_command(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Schedule request (JSON or YAML)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    episode: Annotated[
        list[int] | None,
        typer.Option("--episode", "-e", help="Episode to include (repeatable)"),
    ] = None,
    max_scenes: Annotated[
        int | None,
        typer.Option("--max-scenes", min=1, help="Scene ceiling per batch"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
) -> None:
    """Preview location statistics and how locations split into batches."""
    handler = CLIHandler(console)
    try:
        settings = get_settings_for_cli(config, {"max_scenes_per_batch": max_scenes})
        request = load_schedule_request(input_file, episodes=episode)
        preview = preview_batches(request, settings)
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        print(JsonFormatter().format(preview))
        return

    tables = TableFormatter(console)
    console.print(
        f"[bold cyan]{preview['scene_count']} scenes[/bold cyan] across "
        f"episodes {', '.join(str(n) for n in preview['episodes'])} "
        f"({preview['mode']}, {preview['day_cap_minutes']} min per day)"
    )
    console.print(tables.build_table(preview["locations"], title="Locations"))
    console.print(tables.build_table(preview["batches"], title="Batches"))

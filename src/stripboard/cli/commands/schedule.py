"""CLI command for stripboard schedule."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from stripboard.cli.formatters.base import OutputFormat
from stripboard.cli.formatters.schedule_formatter import ScheduleFormatter
from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.cli.utils.generation import open_text_generator
from stripboard.cli.utils.input_loader import load_schedule_request, write_output
from stripboard.config import StripboardSettings, get_logger, get_settings_for_cli
from stripboard.models import (
    OptimizationPriority,
    ScheduleRequest,
    SchedulingMode,
    ShootingSchedule,
)
from stripboard.scheduling import RehearsalSuggester, ScheduleGenerator, with_rehearsals

logger = get_logger(__name__)
console = Console()


async def run_schedule(
    request: ScheduleRequest,
    settings: StripboardSettings,
    *,
    offline: bool = False,
    rehearsals: bool = False,
) -> ShootingSchedule:
    """Generate a schedule, optionally adding rehearsal suggestions."""
    text_generator = await open_text_generator(settings, offline=offline)
    try:
        schedule = await ScheduleGenerator(text_generator, settings).generate(request)
        if rehearsals:
            if text_generator is None:
                logger.warning("Skipping rehearsal suggestions while offline")
            else:
                sessions = await RehearsalSuggester(text_generator, settings).suggest(
                    schedule, request.breakdowns
                )
                schedule = with_rehearsals(schedule, sessions)
    finally:
        if text_generator is not None:
            await text_generator.aclose()
    return schedule


def schedule_command(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Schedule request (JSON or YAML) with breakdowns per episode",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    episode: Annotated[
        list[int] | None,
        typer.Option(
            "--episode",
            "-e",
            help="Episode to schedule (repeatable; default: all with breakdowns)",
        ),
    ] = None,
    mode: Annotated[
        SchedulingMode | None,
        typer.Option("--mode", "-m", help="Scheduling mode"),
    ] = None,
    priority: Annotated[
        OptimizationPriority | None,
        typer.Option("--priority", "-p", help="What to optimize for first"),
    ] = None,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip generation and use the fallback"),
    ] = False,
    rehearsals: Annotated[
        bool,
        typer.Option("--rehearsals", help="Also suggest rehearsals"),
    ] = False,
    max_scenes: Annotated[
        int | None,
        typer.Option("--max-scenes", min=1, help="Scene ceiling per batch"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the schedule JSON to a file"),
    ] = None,
    markdown: Annotated[
        bool, typer.Option("--markdown", help="Output as Markdown")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (YAML, TOML, or JSON)",
        ),
    ] = None,
) -> None:
    """Generate a shooting schedule from script breakdowns.

    Scenes are grouped by location across the requested episodes. Any batch
    that cannot be generated uses the deterministic fallback scheduler.

    Examples:
        stripboard schedule arc.yaml
        stripboard schedule arc.yaml -e 1 -e 2 --priority cast
        stripboard schedule arc.json --offline --json
    """
    handler = CLIHandler(console)
    formatter = ScheduleFormatter(console)
    format_type = handler.get_output_format(json=json_output, markdown=markdown)

    try:
        settings = get_settings_for_cli(
            config, {"max_scenes_per_batch": max_scenes}
        )
        request = load_schedule_request(
            input_file, episodes=episode, mode=mode, priority=priority
        )
        schedule = asyncio.run(
            run_schedule(request, settings, offline=offline, rehearsals=rehearsals)
        )
        if output:
            write_output(output, formatter.format(schedule, OutputFormat.JSON))
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        print(formatter.format(schedule, OutputFormat.JSON))
        return

    formatter.print(schedule, format_type)
    if output:
        console.print(f"[green]Schedule written to {output}[/green]")

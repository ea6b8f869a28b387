"""CLI command for stripboard rehearse."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from stripboard.cli.formatters.base import OutputFormat, render_to_text
from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.formatters.schedule_formatter import ScheduleFormatter
from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.cli.utils.generation import open_text_generator
from stripboard.cli.utils.input_loader import (
    load_schedule,
    load_schedule_request,
    write_output,
)
from stripboard.config import StripboardSettings, get_settings_for_cli
from stripboard.exceptions import ConfigurationError
from stripboard.models import EpisodeBreakdown, RehearsalSession, ShootingSchedule
from stripboard.scheduling import RehearsalSuggester, with_rehearsals

console = Console()


async def run_rehearsals(
    schedule: ShootingSchedule,
    breakdowns: dict[int, EpisodeBreakdown],
    settings: StripboardSettings,
) -> list[RehearsalSession]:
    text_generator = await open_text_generator(settings)
    if text_generator is None:
        raise ConfigurationError(
            message="No LLM provider available for rehearsal suggestions",
            hint=(
                "Set STRIPBOARD_LLM_ENDPOINT and STRIPBOARD_LLM_API_KEY, "
                "or GITHUB_TOKEN"
            ),
        )
    try:
        return await RehearsalSuggester(text_generator, settings).suggest(
            schedule, breakdowns
        )
    finally:
        await text_generator.aclose()


def rehearse_command(
    schedule_file: Annotated[
        Path,
        typer.Argument(
            help="Shooting schedule JSON produced by 'stripboard schedule'",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Schedule request with the breakdowns used for the schedule",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o", help="Write the schedule with rehearsals to a file"
        ),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
) -> None:
    """Suggest rehearsals for an existing shooting schedule."""
    handler = CLIHandler(console)
    formatter = ScheduleFormatter(console)
    try:
        settings = get_settings_for_cli(config)
        schedule = load_schedule(schedule_file)
        request = load_schedule_request(input_file)
        sessions = asyncio.run(run_rehearsals(schedule, request.breakdowns, settings))
        if output:
            updated = with_rehearsals(schedule, sessions)
            write_output(output, formatter.format(updated, OutputFormat.JSON))
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        print(JsonFormatter().format(sessions))
        return

    if not sessions:
        console.print("[yellow]No rehearsal suggestions were produced[/yellow]")
    else:
        console.print(
            render_to_text(formatter.rehearsals_table(sessions)),
            markup=False,
            highlight=False,
            end="",
        )
    if output:
        console.print(f"[green]Schedule written to {output}[/green]")

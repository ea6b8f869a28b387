"""Configuration display commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.tree import Tree

from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.config import StripboardSettings, get_settings_for_cli

console = Console()

config_app = typer.Typer(
    name="config",
    help="Inspect Stripboard configuration",
    pretty_exceptions_enable=False,
)

SECRET_FIELDS = {"llm_api_key", "github_token"}


def _group_for(field_name: str) -> str:
    if field_name.startswith(("llm_", "github_")):
        return "llm"
    if field_name.startswith("log_") or field_name == "debug":
        return "logging"
    if field_name.startswith(("schedule_", "rehearsal_")):
        return "generation"
    return "scheduling"


def effective_settings(settings: StripboardSettings) -> dict[str, dict[str, Any]]:
    """Settings grouped by concern, with secrets masked."""
    groups: dict[str, dict[str, Any]] = {}
    for field_name in type(settings).model_fields:
        value = getattr(settings, field_name)
        if field_name in SECRET_FIELDS and value:
            value = "********"
        groups.setdefault(_group_for(field_name), {})[field_name] = value
    groups["scheduling"]["day_cap_minutes"] = settings.day_cap_minutes
    return groups


@config_app.command(name="show")
def config_show(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
) -> None:
    """Display the effective configuration after merging all sources.

    Examples:
        stripboard config show
        stripboard config show --json
    """
    handler = CLIHandler(console)
    try:
        groups = effective_settings(get_settings_for_cli(config))
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        print(JsonFormatter().format(groups))
        return

    tree = Tree("[bold cyan]Stripboard Configuration[/bold cyan]")
    for group_name, items in sorted(groups.items()):
        branch = tree.add(f"[bold]{group_name}[/bold]")
        for field_name, value in sorted(items.items()):
            branch.add(f"{field_name}: [green]{value}[/green]")
    console.print(tree)

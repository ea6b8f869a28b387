"""Main CLI entry point."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from stripboard import __version__
from stripboard.cli.commands import (
    batches_command,
    config_app,
    rehearse_command,
    schedule_command,
)
from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.config import (
    StripboardSettings,
    clear_settings_cache,
    configure_logging,
    get_logger,
    get_settings,
    set_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="stripboard",
    help="Shooting schedules for micro-budget episodic productions",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="schedule")(schedule_command)
app.command(name="batches")(batches_command)
app.command(name="rehearse")(rehearse_command)

app.add_typer(config_app, name="config")


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show Stripboard version."""
    version_info = {
        "name": "Stripboard",
        "version": __version__,
        "description": "Shooting schedules for micro-budget episodic productions",
    }

    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"Stripboard v{version_info['version']}")


def _reconfigure_logging(level: str, debug: bool = False) -> None:
    os.environ["STRIPBOARD_LOG_LEVEL"] = level
    if debug:
        os.environ["STRIPBOARD_DEBUG"] = "true"
    clear_settings_cache()
    configure_logging(get_settings())


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            envvar="STRIPBOARD_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug", help="Enable debug logging", envvar="STRIPBOARD_DEBUG"
        ),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        _reconfigure_logging("DEBUG", debug=True)
        logger.debug("Debug mode enabled")
    elif verbose:
        _reconfigure_logging("INFO")
        logger.info("Verbose mode enabled")

    if config:
        # Commands without their own --config read the global settings
        try:
            settings = StripboardSettings.from_multiple_sources(
                config_files=[config]
            )
        except Exception as e:
            CLIHandler(console).handle_error(e)
        set_settings(settings)
        configure_logging(settings)
        logger.debug("Loaded configuration", path=str(config))


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()

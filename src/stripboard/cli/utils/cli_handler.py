"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

from typing import Any, NoReturn

import typer
from rich.console import Console

from stripboard.cli.formatters.base import OutputFormat
from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.config import get_logger
from stripboard.exceptions import StripboardError, ValidationError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> NoReturn:
        """Display an error consistently and exit.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use
        """
        logger.error(
            "Command failed",
            error=str(error),
            error_type=type(error).__name__,
        )

        if json_output:
            # Plain print keeps the JSON free of console styling
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, StripboardError):
            label = "Error"
            if isinstance(error, ValidationError):
                label = "Validation Error"
            self.console.print(f"[red]{label}: {error.message}[/red]", highlight=False)
            if error.hint:
                self.console.print(f"[yellow]Hint: {error.hint}[/yellow]")
        else:
            self.console.print(f"[red]Error: {error}[/red]", highlight=False)

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        if json_output:
            print(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{message}[/green]")

    def get_output_format(
        self,
        json: bool = False,
        markdown: bool = False,
    ) -> OutputFormat:
        """Determine output format from flags."""
        if json:
            return OutputFormat.JSON
        if markdown:
            return OutputFormat.MARKDOWN
        return OutputFormat.TABLE

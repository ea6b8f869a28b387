"""Base formatter classes for CLI output."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, TypeVar

from rich.console import Console

T = TypeVar("T")

RENDER_WIDTH = 120


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    TABLE = "table"
    MARKDOWN = "markdown"


def render_to_text(*renderables: Any, width: int = RENDER_WIDTH) -> str:
    """Render rich objects to plain text."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None)
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue()


class OutputFormatter(ABC, Generic[T]):
    """Base class for output formatters."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize formatter.

        Args:
            console: Rich console for output. If None, creates new instance.
        """
        self.console = console or Console()

    @abstractmethod
    def format(self, data: T, format_type: OutputFormat = OutputFormat.TEXT) -> str:
        """Format data for output.

        Args:
            data: Data to format
            format_type: Output format type

        Returns:
            Formatted string
        """
        pass

    def print(self, data: T, format_type: OutputFormat = OutputFormat.TEXT) -> None:
        """Format and print data to console."""
        output = self.format(data, format_type)
        if format_type == OutputFormat.JSON:
            self.console.print_json(output)
        else:
            # Already rendered; brackets in venue names are not markup
            self.console.print(output, markup=False, highlight=False, end="")

    def format_error(self, error: str | Exception) -> str:
        error_msg = str(error) if isinstance(error, Exception) else error
        return f"[red]Error: {error_msg}[/red]"

    def print_error(self, error: str | Exception) -> None:
        self.console.print(self.format_error(error))

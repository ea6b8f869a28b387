"""Shared helpers for CLI commands."""

from stripboard.cli.utils.cli_handler import CLIHandler
from stripboard.cli.utils.generation import open_text_generator
from stripboard.cli.utils.input_loader import (
    load_document,
    load_schedule,
    load_schedule_request,
    write_output,
)

__all__ = [
    "CLIHandler",
    "load_document",
    "load_schedule",
    "load_schedule_request",
    "open_text_generator",
    "write_output",
]

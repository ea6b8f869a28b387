"""Output formatters for CLI commands."""

from stripboard.cli.formatters.base import OutputFormat, OutputFormatter
from stripboard.cli.formatters.json_formatter import JsonFormatter
from stripboard.cli.formatters.schedule_formatter import ScheduleFormatter
from stripboard.cli.formatters.table_formatter import TableFormatter

__all__ = [
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
    "ScheduleFormatter",
    "TableFormatter",
]

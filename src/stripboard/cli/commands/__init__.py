"""CLI commands for Stripboard."""

from stripboard.cli.commands.batches import batches_command
from stripboard.cli.commands.config import config_app
from stripboard.cli.commands.rehearse import rehearse_command
from stripboard.cli.commands.schedule import schedule_command

__all__ = [
    "batches_command",
    "config_app",
    "rehearse_command",
    "schedule_command",
]

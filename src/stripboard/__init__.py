"""Stripboard: shooting schedules for micro-budget episodic video.

Stripboard turns per-episode script breakdowns into a day-by-day shooting
schedule that groups scenes by location, respects day-length limits and
falls back to a deterministic schedule whenever generation fails.
"""

from stripboard.config import StripboardSettings, get_logger, get_settings
from stripboard.exceptions import StripboardError
from stripboard.models import ScheduleRequest, ShootingSchedule

__version__ = "0.1.0"

__all__ = [
    "ScheduleRequest",
    "ShootingSchedule",
    "StripboardError",
    "StripboardSettings",
    "__version__",
    "get_logger",
    "get_settings",
]

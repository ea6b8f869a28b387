"""Day-length and day-count limits shared by the scheduling components."""

from __future__ import annotations

import math
from dataclasses import dataclass

from stripboard.config.settings import StripboardSettings

ARC_MIN_DAYS = 3
ARC_MAX_DAYS = 7
ARC_TARGET_DAYS = (3, 5)


def arc_max_days(episode_count: int) -> int:
    """Hard ceiling for an arc: half the episode count, clamped to 3..7."""
    return min(ARC_MAX_DAYS, max(ARC_MIN_DAYS, math.ceil(episode_count / 2)))


@dataclass(frozen=True)
class DayCaps:
    """Limits that apply to one scheduling run."""

    max_hours_per_day: float = 10.0
    setup_buffer_minutes: int = 60
    arc_max_days: int = ARC_MAX_DAYS
    series_target_days: int = 21
    series_max_days: int = 28

    @property
    def day_cap_minutes(self) -> int:
        """Usable shooting minutes per day after the setup buffer."""
        return max(1, int(self.max_hours_per_day * 60) - self.setup_buffer_minutes)

    @classmethod
    def from_settings(
        cls, settings: StripboardSettings, episode_count: int
    ) -> DayCaps:
        return cls(
            max_hours_per_day=settings.max_hours_per_day,
            setup_buffer_minutes=settings.setup_buffer_minutes,
            arc_max_days=arc_max_days(episode_count),
            series_target_days=settings.series_target_days,
            series_max_days=settings.series_max_days,
        )

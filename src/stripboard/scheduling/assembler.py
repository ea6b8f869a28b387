"""Stitch per-batch day lists into one schedule."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from stripboard.config import get_logger
from stripboard.models import (
    DayCapReport,
    EpisodeBreakdown,
    OptimizationPriority,
    SchedulingMode,
    ShootingDay,
    ShootingSchedule,
)
from stripboard.scheduling.caps import DayCaps

logger = get_logger(__name__)


@dataclass
class BatchResult:
    """Days produced for one batch and how they were produced."""

    index: int
    days: list[ShootingDay]
    used_fallback: bool = False
    error: str | None = None


@dataclass
class AssemblyContext:
    """Run-level facts the assembled schedule carries."""

    episode_numbers: Sequence[int]
    mode: SchedulingMode
    priority: OptimizationPriority = OptimizationPriority.LOCATION
    breakdowns: Mapping[int, EpisodeBreakdown] = field(default_factory=dict)
    caps: DayCaps = field(default_factory=DayCaps)
    updated_by: str = "stripboard"


def renumber_days(days: Sequence[ShootingDay], start: int = 1) -> list[ShootingDay]:
    """Return copies of ``days`` numbered contiguously from ``start``."""
    return [
        day.model_copy(update={"day_number": start + offset})
        for offset, day in enumerate(days)
    ]


def evaluate_day_caps(total_days: int, caps: DayCaps) -> DayCapReport:
    """Compare a day count with the arc and series ceilings."""
    return DayCapReport(
        total_days=total_days,
        arc_max_days=caps.arc_max_days,
        series_target_days=caps.series_target_days,
        series_max_days=caps.series_max_days,
    )


def assemble_schedule(
    batch_results: Sequence[BatchResult],
    *,
    context: AssemblyContext,
) -> ShootingSchedule:
    """Concatenate batch days in batch order and number them 1..N.

    Day content is left untouched apart from the day number; it does not
    matter whether a day was generated or came from the fallback.
    """
    ordered = sorted(batch_results, key=lambda result: result.index)
    days = renumber_days([day for result in ordered for day in result.days])
    report = evaluate_day_caps(len(days), context.caps)

    if report.exceeds_series_cap:
        logger.warning(
            "Schedule exceeds the series day ceiling",
            total_days=report.total_days,
            series_max_days=report.series_max_days,
        )
    elif report.exceeds_arc_cap:
        logger.info(
            "Schedule exceeds the arc day ceiling",
            total_days=report.total_days,
            arc_max_days=report.arc_max_days,
        )

    single = context.mode is SchedulingMode.SINGLE_EPISODE
    first_episode = context.episode_numbers[0] if context.episode_numbers else None
    episode_title = None
    if single and first_episode is not None:
        breakdown = context.breakdowns.get(first_episode)
        episode_title = breakdown.episode_title if breakdown else None

    schedule = ShootingSchedule(
        episode_number=first_episode if single else None,
        episode_numbers=None if single else list(context.episode_numbers),
        episode_title=episode_title or None,
        scheduling_mode=context.mode,
        optimization_priority=context.priority,
        total_shoot_days=len(days),
        days=days,
        rest_days=[],
        rehearsals=[],
        last_updated=datetime.now(UTC),
        updated_by=context.updated_by,
        batch_count=len(ordered),
        fallback_batches=[result.index for result in ordered if result.used_fallback],
        day_caps=report,
    )
    logger.info(
        "Assembled schedule",
        total_days=schedule.total_shoot_days,
        batch_count=schedule.batch_count,
        fallback_batches=schedule.fallback_batches,
    )
    return schedule

"""Deterministic shooting-day packer used when generation is unavailable.

Scenes are grouped by location in order of first appearance. An exterior
location with both NIGHT and non-NIGHT scenes becomes a DAY group followed
by a NIGHT group. Each group is packed greedily, longest scene first, into
days that stay within the daily cap.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from stripboard.config import get_logger
from stripboard.models import (
    DaySource,
    Scene,
    ScenePriority,
    SceneReference,
    ShootingDay,
)
from stripboard.scheduling.profiler import LocationProfile, is_exterior

logger = get_logger(__name__)

DAY_CAP_MINUTES = 10 * 60 - 60
CALL_TIME = "08:00"
WRAP_TIME = "18:00"
NOTE_PREFIX = "Fallback schedule: AI response unavailable"
EXTERIOR_WEATHER_NOTE = (
    "Check weather and daylight for exterior; plan lighting for night scenes."
)
NIGHT_SETUP_NOTE = "Includes NIGHT exterior; plan lighting and power."


@dataclass(frozen=True)
class SceneGroup:
    """Scenes at one location that may share a shooting day."""

    location: str
    scenes: tuple[Scene, ...]
    exterior: bool
    night: bool = False


def group_scenes(scenes: Iterable[Scene]) -> list[SceneGroup]:
    """Group scenes by location, splitting mixed exterior day/night sets."""
    by_location: dict[str, list[Scene]] = {}
    for scene in sorted(scenes, key=lambda s: s.order_index):
        by_location.setdefault(scene.location, []).append(scene)

    groups: list[SceneGroup] = []
    for location, located in by_location.items():
        exterior = is_exterior(location)
        night = [scene for scene in located if scene.is_night]
        day = [scene for scene in located if not scene.is_night]
        if exterior and night and day:
            groups.append(SceneGroup(location, tuple(day), exterior))
            groups.append(SceneGroup(location, tuple(night), exterior, night=True))
        else:
            groups.append(
                SceneGroup(
                    location, tuple(located), exterior, night=exterior and bool(night)
                )
            )
    return groups


def pack_group(scenes: Sequence[Scene], day_cap_minutes: int) -> list[list[Scene]]:
    """Pack scenes longest-first into days of at most ``day_cap_minutes``.

    A scene longer than the cap gets a day to itself.
    """
    ordered = sorted(scenes, key=lambda s: s.duration, reverse=True)
    packed: list[list[Scene]] = []
    current: list[Scene] = []
    minutes = 0
    for scene in ordered:
        if current and minutes + scene.duration > day_cap_minutes:
            packed.append(current)
            current = []
            minutes = 0
        current.append(scene)
        minutes += scene.duration
    if current:
        packed.append(current)
    return packed


def _reference(scene: Scene) -> SceneReference:
    return SceneReference(
        episode_number=scene.episode_number,
        scene_number=scene.scene_number,
        scene_title=scene.title,
        estimated_duration=scene.duration,
        priority=ScenePriority.MUST_HAVE,
        location=scene.location,
        time_of_day=scene.time_of_day,
    )


def _build_day(
    day_number: int,
    group: SceneGroup,
    scenes: Sequence[Scene],
    profile: LocationProfile | None,
) -> ShootingDay:
    notes = f"{NOTE_PREFIX} | Location: {group.location}"
    if group.night:
        notes += " | NIGHT exterior"
    return ShootingDay(
        day_number=day_number,
        location=profile.day_label(group.location) if profile else group.location,
        call_time=CALL_TIME,
        estimated_wrap_time=WRAP_TIME,
        scenes=[_reference(scene) for scene in scenes],
        special_notes=notes,
        weather_contingency=EXTERIOR_WEATHER_NOTE if group.exterior else None,
        setup_notes=NIGHT_SETUP_NOTE if group.night else None,
        venue=profile.venue_metadata(group.location) if profile else None,
        source=DaySource.FALLBACK,
    )


def build_fallback_days(
    scenes: Iterable[Scene],
    profile: LocationProfile | None = None,
    *,
    day_cap_minutes: int = DAY_CAP_MINUTES,
) -> list[ShootingDay]:
    """Build a valid schedule for ``scenes`` without any generation.

    Pure and idempotent: the same scenes always give the same days, numbered
    from 1 in emission order.

    Args:
        scenes: Scenes to schedule
        profile: Optional location profile used to label days by venue
        day_cap_minutes: Usable shooting minutes per day

    Returns:
        Shooting days, each at a single location
    """
    days: list[ShootingDay] = []
    for group in group_scenes(scenes):
        for packed in pack_group(group.scenes, day_cap_minutes):
            days.append(_build_day(len(days) + 1, group, packed, profile))

    logger.debug(
        "Built fallback days",
        day_count=len(days),
        day_cap_minutes=day_cap_minutes,
    )
    return days

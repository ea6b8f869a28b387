"""Per-location statistics and venue resolution."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from stripboard.config import get_logger
from stripboard.models import (
    ArcLocations,
    EpisodeBreakdown,
    LocationGroup,
    Scene,
    TimeOfDay,
    VenueMetadata,
    VenueSuggestion,
)

logger = get_logger(__name__)

EXTERIOR_KEYWORDS = ("EXT", "EXTERIOR", "OUTSIDE", "STREET", "PARK")


def is_exterior(location: str) -> bool:
    """Whether a location name reads as an exterior."""
    upper = (location or "").upper()
    return any(keyword in upper for keyword in EXTERIOR_KEYWORDS)


@dataclass
class LocationStats:
    """Aggregate numbers for every scene at one location string."""

    location: str
    first_index: int
    scene_count: int = 0
    total_minutes: int = 0
    time_of_day_counts: Counter[TimeOfDay] = field(default_factory=Counter)
    exterior: bool = False

    def add(self, scene: Scene) -> None:
        self.scene_count += 1
        self.total_minutes += scene.duration
        self.time_of_day_counts[scene.time_of_day] += 1

    @property
    def has_day_and_night(self) -> bool:
        night = self.time_of_day_counts.get(TimeOfDay.NIGHT, 0)
        return 0 < night < self.scene_count

    def estimated_days(self, day_cap_minutes: int) -> int:
        """Days needed to shoot the location if packed perfectly."""
        return max(1, math.ceil(self.total_minutes / day_cap_minutes))

    def describe_time_of_day(self) -> str:
        return ", ".join(
            f"{tod.value}:{count}" for tod, count in self.time_of_day_counts.items()
        )


@dataclass(frozen=True)
class VenueMatch:
    """A location group that has scenes in the run, with its chosen venue."""

    group: LocationGroup
    venue: VenueSuggestion | None
    scene_keys: tuple[tuple[int, int], ...]

    @property
    def group_name(self) -> str:
        return self.group.parent_location_name

    @property
    def venue_name(self) -> str:
        return (self.venue.venue_name or "") if self.venue else ""

    @property
    def label(self) -> str:
        """Name a day at this location should carry."""
        return self.venue_name or self.group_name

    @property
    def episodes(self) -> list[int]:
        return sorted({episode for episode, _ in self.scene_keys})

    def metadata(self) -> VenueMetadata | None:
        if self.venue is None:
            return None
        return VenueMetadata.from_group(self.group, self.venue)

    def matches(self, label: str) -> bool:
        """Substring match in either direction against group or venue name."""
        if not label:
            return False
        for name in (self.group_name, self.venue_name):
            if name and (name in label or label in name):
                return True
        return False


@dataclass
class LocationProfile:
    """Location statistics for a run plus any resolved venues."""

    stats: dict[str, LocationStats]
    venues: dict[str, VenueMatch] = field(default_factory=dict)

    @property
    def locations(self) -> list[str]:
        """Location names in first-appearance order."""
        return list(self.stats)

    def resolve(self, label: str) -> VenueMatch | None:
        """Find the venue group a location or day label refers to."""
        for match in self.venues.values():
            if match.matches(label):
                return match
        return None

    def venue_metadata(self, label: str) -> VenueMetadata | None:
        match = self.resolve(label)
        return match.metadata() if match else None

    def day_label(self, location: str) -> str:
        """Resolved venue name, else the group's name, else the location."""
        match = self.resolve(location)
        if match is None:
            return location
        return match.label or location


def map_location_groups(
    breakdowns: Mapping[int, EpisodeBreakdown],
    arc_locations: ArcLocations,
) -> dict[str, VenueMatch]:
    """Match arc location groups to breakdown scenes through episode usage.

    Groups with no scene in ``breakdowns`` are dropped. The result is keyed
    by canonical location id.
    """
    known = {
        (episode_number, scene.scene_number)
        for episode_number, breakdown in breakdowns.items()
        for scene in breakdown.scenes
    }
    mapping: dict[str, VenueMatch] = {}
    for group in arc_locations.location_groups:
        keys = tuple(
            (usage.episode_number, scene_number)
            for usage in group.episode_usage
            for scene_number in usage.scene_numbers
            if (usage.episode_number, scene_number) in known
        )
        if not keys:
            continue
        mapping[group.canonical_id] = VenueMatch(
            group=group, venue=group.selected_venue(), scene_keys=keys
        )
    return mapping


def collect_stats(scenes: Iterable[Scene]) -> dict[str, LocationStats]:
    """Build per-location stats in first-appearance order."""
    stats: dict[str, LocationStats] = {}
    for scene in scenes:
        entry = stats.get(scene.location)
        if entry is None:
            entry = LocationStats(
                location=scene.location,
                first_index=scene.order_index,
                exterior=is_exterior(scene.location),
            )
            stats[scene.location] = entry
        entry.add(scene)
    return stats


def profile_locations(
    scenes: Iterable[Scene],
    arc_locations: ArcLocations | None = None,
    breakdowns: Mapping[int, EpisodeBreakdown] | None = None,
) -> LocationProfile:
    """Profile the aggregated scenes and resolve venues when groups are given.

    Never fails: locations without a matching group simply carry no venue.
    """
    stats = collect_stats(scenes)
    venues: dict[str, VenueMatch] = {}
    if arc_locations is not None and breakdowns:
        venues = map_location_groups(breakdowns, arc_locations)

    logger.debug(
        "Profiled locations",
        location_count=len(stats),
        exterior_count=sum(1 for entry in stats.values() if entry.exterior),
        venue_groups=len(venues),
    )
    return LocationProfile(stats=stats, venues=venues)

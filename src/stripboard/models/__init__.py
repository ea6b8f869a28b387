"""Stripboard data models.

Boundary models accept the camelCase documents produced by the
pre-production app as well as snake_case input. Aggregated scenes are
frozen; schedules and days are rebuilt rather than mutated.
"""

from stripboard.models.base import StripboardModel, TimeOfDay
from stripboard.models.breakdown import (
    UNSPECIFIED_LOCATION,
    BreakdownCharacter,
    BreakdownScene,
    EpisodeBreakdown,
    Scene,
)
from stripboard.models.casting import (
    AvailabilityWindow,
    CastingData,
    CastMember,
    SeriesContext,
)
from stripboard.models.locations import (
    ArcLocations,
    CostBreakdown,
    EpisodeUsage,
    LocationGroup,
    VenueLogistics,
    VenueMetadata,
    VenueSuggestion,
)
from stripboard.models.schedule import (
    CastReference,
    DayCapReport,
    DaySource,
    DayStatus,
    OptimizationPriority,
    RehearsalLocation,
    RehearsalSession,
    RehearsalStatus,
    RehearsalType,
    ScenePriority,
    SceneReference,
    ScheduleRequest,
    ScheduleSummary,
    SchedulingMode,
    ShootingDay,
    ShootingSchedule,
)

__all__ = [
    "UNSPECIFIED_LOCATION",
    "ArcLocations",
    "AvailabilityWindow",
    "BreakdownCharacter",
    "BreakdownScene",
    "CastMember",
    "CastReference",
    "CastingData",
    "CostBreakdown",
    "DayCapReport",
    "DaySource",
    "DayStatus",
    "EpisodeBreakdown",
    "EpisodeUsage",
    "LocationGroup",
    "OptimizationPriority",
    "RehearsalLocation",
    "RehearsalSession",
    "RehearsalStatus",
    "RehearsalType",
    "Scene",
    "ScenePriority",
    "SceneReference",
    "ScheduleRequest",
    "ScheduleSummary",
    "SchedulingMode",
    "ShootingDay",
    "ShootingSchedule",
    "StripboardModel",
    "TimeOfDay",
    "VenueLogistics",
    "VenueMetadata",
    "VenueSuggestion",
]

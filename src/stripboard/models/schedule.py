"""Shooting schedule, shooting day and rehearsal models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, Field, field_validator, model_validator

from stripboard.models.base import StripboardModel, TimeOfDay
from stripboard.models.breakdown import EpisodeBreakdown
from stripboard.models.casting import CastingData, SeriesContext
from stripboard.models.locations import ArcLocations, VenueMetadata


class SchedulingMode(str, Enum):
    """Whether a schedule covers one episode or groups across episodes."""

    SINGLE_EPISODE = "single-episode"
    CROSS_EPISODE = "cross-episode"


class OptimizationPriority(str, Enum):
    """What the schedule should optimize for first."""

    LOCATION = "location"
    CAST = "cast"
    BALANCED = "balanced"


class ScenePriority(str, Enum):
    MUST_HAVE = "must-have"
    NICE_TO_HAVE = "nice-to-have"
    OPTIONAL = "optional"


class DayStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    SHOT = "shot"
    POSTPONED = "postponed"


class DaySource(str, Enum):
    """Which path produced a shooting day."""

    GENERATIVE = "generative"
    FALLBACK = "fallback"


class RehearsalType(str, Enum):
    TABLE_READ = "table-read"
    BLOCKING = "blocking"
    TECHNICAL = "technical"
    FULL_RUN = "full-run"


class RehearsalLocation(str, Enum):
    IN_PERSON = "in-person"
    VIDEO_CALL = "video-call"


class RehearsalStatus(str, Enum):
    SUGGESTED = "suggested"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SceneReference(StripboardModel):
    """A scene placed on a shooting day or rehearsal."""

    episode_number: int
    scene_number: int
    scene_title: str = ""
    estimated_duration: int = 30  # minutes
    priority: ScenePriority = ScenePriority.MUST_HAVE
    location: str | None = None
    time_of_day: TimeOfDay | None = None


class CastReference(StripboardModel):
    """A character required on a shooting day."""

    character_name: str
    actor_name: str | None = None
    is_available: bool = True


class ShootingDay(StripboardModel):
    """One calendar day of filming at a single location."""

    day_number: int = Field(ge=1)
    date: str | None = None
    location: str
    call_time: str = "09:00"
    estimated_wrap_time: str = "18:00"
    scenes: list[SceneReference] = Field(default_factory=list)
    cast_required: list[CastReference] = Field(default_factory=list)
    crew_required: list[str] = Field(default_factory=list)
    equipment_required: list[str] = Field(default_factory=list)
    special_notes: str = ""
    weather_contingency: str | None = None
    setup_notes: str | None = None
    status: DayStatus = DayStatus.SCHEDULED
    venue: VenueMetadata | None = None
    source: DaySource = DaySource.GENERATIVE

    @property
    def total_minutes(self) -> int:
        """Sum of scene durations on the day."""
        return sum(scene.estimated_duration for scene in self.scenes)

    @property
    def scene_keys(self) -> set[tuple[int, int]]:
        """Episode and scene number pairs scheduled on the day."""
        return {(scene.episode_number, scene.scene_number) for scene in self.scenes}


class RehearsalSession(StripboardModel):
    """A rehearsal, usually suggested ahead of the shoot."""

    id: str
    date: str = ""
    time: str = "10:00"
    duration: int = 120  # minutes
    scenes: list[SceneReference] = Field(default_factory=list)
    actors: list[str] = Field(default_factory=list)
    location: RehearsalLocation = RehearsalLocation.IN_PERSON
    location_details: str | None = None
    rehearsal_type: RehearsalType = RehearsalType.BLOCKING
    goals: list[str] = Field(default_factory=list)
    session_notes: str = ""
    status: RehearsalStatus = RehearsalStatus.SUGGESTED
    suggested_by_ai: bool = Field(default=True, alias="suggestedByAI")
    linked_to_shoot_day: int | None = None


class DayCapReport(StripboardModel):
    """How a schedule's day count compares with the configured caps."""

    total_days: int
    arc_max_days: int
    series_target_days: int
    series_max_days: int

    @property
    def exceeds_arc_cap(self) -> bool:
        return self.total_days > self.arc_max_days

    @property
    def exceeds_series_cap(self) -> bool:
        return self.total_days > self.series_max_days


class ScheduleSummary(StripboardModel):
    """Production-facing totals for a schedule."""

    total_days: int
    total_scenes: int
    total_scene_minutes: int
    location_moves: int
    fallback_days: int
    total_location_cost: float
    completed_days: int
    upcoming_days: int


class ShootingSchedule(StripboardModel):
    """A complete day-by-day shooting schedule."""

    episode_number: int | None = None
    episode_numbers: list[int] | None = None
    episode_title: str | None = None
    scheduling_mode: SchedulingMode
    optimization_priority: OptimizationPriority = OptimizationPriority.LOCATION
    total_shoot_days: int = 0
    days: list[ShootingDay] = Field(default_factory=list)
    rest_days: list[int] = Field(default_factory=list)
    rehearsals: list[RehearsalSession] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_by: str = "stripboard"
    batch_count: int = 0
    fallback_batches: list[int] = Field(default_factory=list)
    day_caps: DayCapReport | None = None

    def summary(self) -> ScheduleSummary:
        """Totals across the schedule's days."""
        moves = sum(
            1
            for previous, current in zip(self.days, self.days[1:], strict=False)
            if previous.location != current.location
        )
        # a venue is paid once per day booked
        cost = sum(day.venue.location_cost for day in self.days if day.venue)
        completed = sum(1 for day in self.days if day.status is DayStatus.SHOT)
        return ScheduleSummary(
            total_days=len(self.days),
            total_scenes=sum(len(day.scenes) for day in self.days),
            total_scene_minutes=sum(day.total_minutes for day in self.days),
            location_moves=moves,
            fallback_days=sum(
                1 for day in self.days if day.source is DaySource.FALLBACK
            ),
            total_location_cost=cost,
            completed_days=completed,
            upcoming_days=len(self.days) - completed,
        )


class ScheduleRequest(StripboardModel):
    """Everything the scheduler needs for one run."""

    episode_numbers: list[int] = Field(min_length=1)
    breakdowns: dict[int, EpisodeBreakdown] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("breakdowns", "breakdownData"),
    )
    scheduling_mode: SchedulingMode | None = None
    optimization_priority: OptimizationPriority = OptimizationPriority.LOCATION
    arc_locations: ArcLocations | None = None
    casting: dict[int, CastingData] = Field(default_factory=dict)
    series: SeriesContext | None = None
    updated_by: str = "stripboard"

    @field_validator("episode_numbers")
    @classmethod
    def unique_episodes(cls, v: list[int]) -> list[int]:
        """Drop repeated episode numbers, keeping request order."""
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def infer_mode(self) -> "ScheduleRequest":
        """Default to cross-episode grouping when several episodes are asked for."""
        if self.scheduling_mode is None:
            self.scheduling_mode = (
                SchedulingMode.SINGLE_EPISODE
                if len(self.episode_numbers) == 1
                else SchedulingMode.CROSS_EPISODE
            )
        return self

    @property
    def mode(self) -> SchedulingMode:
        return self.scheduling_mode or SchedulingMode.CROSS_EPISODE

    def breakdown_for(self, episode_number: int) -> EpisodeBreakdown | None:
        return self.breakdowns.get(episode_number)


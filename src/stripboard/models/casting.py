"""Cast availability and series context handed to the scheduler."""

from pydantic import AliasChoices, Field

from stripboard.models.base import StripboardModel


class AvailabilityWindow(StripboardModel):
    """A date range an actor can shoot."""

    start_date: str
    end_date: str
    time_of_day: str | None = None
    notes: str | None = None


class CastMember(StripboardModel):
    """Casting record for one character."""

    character_name: str
    actor_name: str | None = None
    availability_windows: list[AvailabilityWindow] = Field(default_factory=list)
    availability_notes: str | None = None
    preferred_shooting_days: list[str] = Field(default_factory=list)
    blackout_dates: list[str] = Field(default_factory=list)

    def describe(self) -> str:
        """One-line availability summary."""
        line = self.character_name
        if self.actor_name:
            line += f" ({self.actor_name})"
        if self.availability_windows:
            windows = ", ".join(
                f"{w.start_date} to {w.end_date}" for w in self.availability_windows
            )
            line += f" - Available: {windows}"
        elif self.availability_notes:
            line += f" - {self.availability_notes}"
        if self.preferred_shooting_days:
            line += f" - Prefers: {', '.join(self.preferred_shooting_days)}"
        if self.blackout_dates:
            line += f" - NOT available: {', '.join(self.blackout_dates)}"
        return line


class CastingData(StripboardModel):
    """Cast list for an episode."""

    episode_number: int | None = None
    cast: list[CastMember] = Field(default_factory=list)


class SeriesContext(StripboardModel):
    """Series-level framing for schedule instructions."""

    series_title: str = Field(
        default="Untitled Series",
        validation_alias=AliasChoices("seriesTitle", "series_title", "title"),
    )
    series_overview: str = ""
    genre: str = "Drama"
    tone: str = "Realistic"
    setting: str = ""

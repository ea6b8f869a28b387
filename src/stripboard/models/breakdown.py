"""Script breakdown models and the aggregated scene record."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stripboard.models.base import StripboardModel, TimeOfDay

UNSPECIFIED_LOCATION = "Unspecified Location"


class BreakdownCharacter(StripboardModel):
    """A character appearing in a broken-down scene."""

    name: str
    line_count: int = 0
    importance: str | None = None


class BreakdownScene(StripboardModel):
    """One scene of an episode breakdown as produced upstream."""

    scene_number: int
    scene_title: str = ""
    location: str = UNSPECIFIED_LOCATION
    time_of_day: TimeOfDay = TimeOfDay.DAY
    estimated_shoot_time: int | None = None  # minutes
    characters: list[BreakdownCharacter] = Field(default_factory=list)
    special_requirements: list[str] = Field(default_factory=list)

    @field_validator("location", mode="before")
    @classmethod
    def default_location(cls, v: Any) -> Any:
        """Blank locations collapse to a shared placeholder."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNSPECIFIED_LOCATION
        return v

    @field_validator("time_of_day", mode="before")
    @classmethod
    def normalize_time_of_day(cls, v: Any) -> TimeOfDay:
        """Unknown or missing values become DAY."""
        return TimeOfDay.parse(v)

    @field_validator("estimated_shoot_time", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> int | None:
        """Accept numeric strings; treat zero, negative or junk as unknown."""
        if v is None or isinstance(v, bool):
            return None
        try:
            minutes = int(float(v))
        except (TypeError, ValueError):
            return None
        return minutes if minutes > 0 else None

    @field_validator("characters", mode="before")
    @classmethod
    def coerce_characters(cls, v: Any) -> Any:
        """Allow bare character names alongside full character objects."""
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def character_names(self) -> list[str]:
        """Names of every character in the scene."""
        return [character.name for character in self.characters]


class EpisodeBreakdown(StripboardModel):
    """Breakdown for a single episode."""

    episode_number: int | None = None
    episode_title: str = ""
    scenes: list[BreakdownScene] = Field(default_factory=list)

    def title_for(self, episode_number: int) -> str:
        """Episode title, or a generic label when the breakdown has none."""
        return self.episode_title or f"Episode {episode_number}"

    def find_scene(self, scene_number: int) -> BreakdownScene | None:
        """Look up a scene by its number."""
        for scene in self.scenes:
            if scene.scene_number == scene_number:
                return scene
        return None


class Scene(BaseModel):
    """A scene in the aggregated stream, with its duration already resolved.

    Scenes are immutable once aggregated; every downstream component reads
    them without copying.
    """

    model_config = ConfigDict(frozen=True)

    episode_number: int
    scene_number: int
    title: str
    location: str
    time_of_day: TimeOfDay = TimeOfDay.DAY
    duration: int  # minutes
    cast: tuple[str, ...] = ()
    special_requirements: tuple[str, ...] = ()
    order_index: int

    @property
    def is_night(self) -> bool:
        """Whether the scene is written for NIGHT."""
        return self.time_of_day is TimeOfDay.NIGHT

    @property
    def key(self) -> tuple[int, int]:
        """Episode and scene number pair identifying the scene."""
        return (self.episode_number, self.scene_number)

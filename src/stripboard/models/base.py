"""Shared model configuration for Stripboard data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StripboardModel(BaseModel):
    """Base class for boundary models.

    Accepts both the camelCase keys used by the pre-production app and
    snake_case keys, and serializes with camelCase aliases when
    ``by_alias=True``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump the model as JSON-compatible camelCase data."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TimeOfDay(str, Enum):
    """Lighting condition a scene is written for."""

    DAY = "DAY"
    NIGHT = "NIGHT"
    SUNRISE = "SUNRISE"
    SUNSET = "SUNSET"
    MAGIC_HOUR = "MAGIC_HOUR"

    @classmethod
    def parse(cls, value: Any) -> "TimeOfDay":
        """Parse loosely formatted input, defaulting to DAY."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.DAY
        key = value.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            return cls.DAY

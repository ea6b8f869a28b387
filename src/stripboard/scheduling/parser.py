"""Turn generated schedule text into shooting days.

Generated text is often wrapped in Markdown fences, carries trailing commas
or comments, or is cut off mid-array when the token limit is reached.
``parse_or_recover`` tries progressively more forgiving layers and reports
which one succeeded; ``map_days`` applies defaults to the raw day objects.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stripboard.config import get_logger
from stripboard.exceptions import ScheduleParseError
from stripboard.models import (
    UNSPECIFIED_LOCATION,
    CastReference,
    DaySource,
    ScenePriority,
    SceneReference,
    ShootingDay,
    TimeOfDay,
)
from stripboard.scheduling.profiler import LocationProfile

logger = get_logger(__name__)

FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")
LEADING_FENCE = re.compile(r"^```[A-Za-z]*\s*")
TRAILING_FENCE = re.compile(r"\s*```\s*$")
DAYS_KEY = re.compile(r'"days"\s*:\s*\[')
LEADING_INT = re.compile(r"^\s*(-?\d+)")

DEFAULT_CALL_TIME = "09:00"
DEFAULT_WRAP_TIME = "18:00"
DEFAULT_SCENE_MINUTES = 30


class RecoveryLayer(str, Enum):
    """Which parsing layer produced the result."""

    DIRECT = "direct"
    DAYS_KEY = "days_key"
    TRUNCATION = "truncation"


@dataclass(frozen=True)
class ParseOutcome:
    """Raw day objects plus the layer that recovered them."""

    days: list[dict[str, Any]]
    layer: RecoveryLayer

    @property
    def recovered(self) -> bool:
        return self.layer is not RecoveryLayer.DIRECT


def strip_code_fences(text: str) -> str:
    """Return the contents of a fenced block, or drop a dangling fence."""
    text = text.strip()
    match = FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    if text.startswith("```"):
        text = LEADING_FENCE.sub("", text)
        text = TRAILING_FENCE.sub("", text)
    return text.strip()


class _Lex(Enum):
    CODE = "code"
    STRING = "string"
    COMMENT = "comment"


def _lex(text: str) -> list[tuple[int, str, _Lex]]:
    """Characters with their positions and lexical state.

    A ``//`` comment runs to the end of its line; quotes inside it never
    open a string.
    """
    out = []
    state = _Lex.CODE
    escaped = False
    for position, char in enumerate(text):
        if state is _Lex.COMMENT:
            if char == "\n":
                state = _Lex.CODE
                out.append((position, char, _Lex.CODE))
            else:
                out.append((position, char, _Lex.COMMENT))
            continue
        if state is _Lex.STRING:
            out.append((position, char, _Lex.STRING))
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                state = _Lex.CODE
            continue
        if char == '"':
            state = _Lex.STRING
            out.append((position, char, _Lex.STRING))
        elif char == "/" and text.startswith("//", position):
            state = _Lex.COMMENT
            out.append((position, char, _Lex.COMMENT))
        else:
            out.append((position, char, _Lex.CODE))
    return out


def _scan(text: str) -> list[tuple[int, str, bool]]:
    """Characters with their positions and whether they sit outside code."""
    return [
        (position, char, state is not _Lex.CODE)
        for position, char, state in _lex(text)
    ]


def remove_line_comments(text: str) -> str:
    """Drop ``//`` comments that start outside string literals."""
    return "".join(
        char for _, char, state in _lex(text) if state is not _Lex.COMMENT
    )


def remove_trailing_commas(text: str) -> str:
    """Drop commas that precede a closing bracket or the end of the text."""
    result = []
    length = len(text)
    for position, char, quoted in _scan(text):
        if char == "," and not quoted:
            cursor = position + 1
            while cursor < length and text[cursor].isspace():
                cursor += 1
            if cursor == length or text[cursor] in "}]":
                continue
        result.append(char)
    return "".join(result)


def clean_json_text(text: str) -> str:
    """Remove comments and trailing commas outside string literals."""
    return remove_trailing_commas(remove_line_comments(text)).strip()


def _array_start(text: str) -> int:
    """Position of the first ``[`` that opens an array of objects.

    Falls back to the first ``[`` of any kind.
    """
    first = -1
    for position, char, quoted in _scan(text):
        if quoted or char != "[":
            continue
        if first == -1:
            first = position
        if text[position + 1 :].lstrip().startswith("{"):
            return position
    return first


def _matching_close(text: str, start: int) -> int:
    """Index of the bracket closing ``text[start]``, or -1 if unbalanced."""
    depth = 0
    for position, char, quoted in _scan(text[start:]):
        if quoted:
            continue
        if char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
            if depth == 0:
                return start + position
    return -1


def slice_array(text: str) -> str:
    """Cut the text down to its JSON array.

    A truncated array is kept to the end of the text so the repair layer can
    still close it.
    """
    start = _array_start(text)
    if start == -1:
        return text
    end = _matching_close(text, start)
    if end == -1:
        return text[start:]
    return text[start : end + 1]


def close_truncated_array(text: str) -> str | None:
    """Keep every complete top-level object of an unclosed array and close it.

    Returns None when the array is already closed or has no complete object.
    """
    if not text.startswith("["):
        return None
    depth = 0
    last_complete = -1
    for position, char, quoted in _scan(text):
        if quoted:
            continue
        if char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
            if depth == 0:
                return None
            if depth == 1 and char == "}":
                last_complete = position
    if last_complete == -1:
        return None
    return text[: last_complete + 1] + "]"


def _extract_days_array(text: str) -> str | None:
    match = DAYS_KEY.search(text)
    if not match:
        return None
    start = match.end() - 1
    end = _matching_close(text, start)
    if end == -1:
        return text[start:]
    return text[start : end + 1]


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def _require_days(value: Any, raw: str) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        raise ScheduleParseError(
            "Expected a JSON array of shooting days", raw=raw
        )
    if not value:
        raise ScheduleParseError("Response contained no shooting days", raw=raw)
    if not all(isinstance(item, dict) for item in value):
        raise ScheduleParseError(
            "Every shooting day must be a JSON object", raw=raw
        )
    return value


def _opens_with_object(text: str) -> bool:
    """Whether the first bracket outside strings opens an object."""
    for _, char, quoted in _scan(text):
        if not quoted and char in "[{":
            return char == "{"
    return False


def _from_days_key(unfenced: str, raw: str) -> ParseOutcome | None:
    days_text = _extract_days_array(unfenced)
    if days_text is None:
        return None
    days_cleaned = clean_json_text(days_text)
    parsed = _loads(days_cleaned)
    if parsed is None:
        repaired = close_truncated_array(days_cleaned)
        parsed = _loads(repaired) if repaired else None
    if parsed is None:
        return None
    logger.warning("Recovered schedule from days key", response_length=len(raw))
    return ParseOutcome(_require_days(parsed, raw), RecoveryLayer.DAYS_KEY)


def parse_or_recover(raw: str) -> ParseOutcome:
    """Parse generated schedule text, recovering from common damage.

    A response wrapped in an object is read through its ``days`` key before
    any bare array inside it is considered.

    Args:
        raw: The raw response text

    Returns:
        The raw day objects and the layer that produced them

    Raises:
        ScheduleParseError: If no layer yields a non-empty array of objects
    """
    if not raw or not raw.strip():
        raise ScheduleParseError("Response was empty", raw=raw)

    unfenced = remove_line_comments(strip_code_fences(raw))
    wrapped = _opens_with_object(unfenced)
    if wrapped:
        outcome = _from_days_key(unfenced, raw)
        if outcome is not None:
            return outcome
        if DAYS_KEY.search(unfenced):
            # sibling arrays such as "warnings" are never shooting days
            raise ScheduleParseError(
                "Days array in the response could not be recovered", raw=raw
            )

    cleaned = clean_json_text(slice_array(unfenced))
    parsed = _loads(cleaned)
    if parsed is not None:
        return ParseOutcome(_require_days(parsed, raw), RecoveryLayer.DIRECT)

    if not wrapped:
        outcome = _from_days_key(unfenced, raw)
        if outcome is not None:
            return outcome

    repaired = close_truncated_array(cleaned)
    if repaired is not None:
        parsed = _loads(repaired)
        if parsed is not None:
            logger.warning(
                "Recovered truncated schedule response",
                response_length=len(raw),
                kept_chars=len(repaired),
            )
            return ParseOutcome(_require_days(parsed, raw), RecoveryLayer.TRUNCATION)

    raise ScheduleParseError("Response is not valid schedule JSON", raw=raw)


def pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def as_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _priority(value: Any) -> ScenePriority:
    try:
        return ScenePriority(str(value).strip().lower())
    except ValueError:
        return ScenePriority.MUST_HAVE


def map_scene(
    data: Any, day_location: str | None, fallback_episode: int
) -> SceneReference:
    """Map one raw scene object onto a scene reference with defaults."""
    if not isinstance(data, dict):
        raise ScheduleParseError(f"Scene entry is not an object: {data!r}")
    scene_number = as_int(pick(data, "sceneNumber", "scene_number")) or 0
    episode_number = as_int(pick(data, "episodeNumber", "episode_number"))
    duration = as_int(pick(data, "estimatedDuration", "estimated_duration"))
    time_of_day = pick(data, "timeOfDay", "time_of_day")
    return SceneReference(
        episode_number=episode_number or fallback_episode,
        scene_number=scene_number,
        scene_title=as_text(pick(data, "sceneTitle", "scene_title"))
        or f"Scene {scene_number}",
        estimated_duration=(
            duration if duration and duration > 0 else DEFAULT_SCENE_MINUTES
        ),
        priority=_priority(pick(data, "priority")),
        location=as_text(pick(data, "location")) or day_location,
        time_of_day=TimeOfDay.parse(time_of_day) if time_of_day else None,
    )


def map_cast(data: Any) -> CastReference | None:
    """Map a cast entry given either as an object or a bare name."""
    if isinstance(data, str):
        name = data.strip()
        return CastReference(character_name=name) if name else None
    if not isinstance(data, dict):
        return None
    name = as_text(pick(data, "characterName", "character_name", "name"))
    if not name:
        return None
    return CastReference(
        character_name=name,
        actor_name=as_text(pick(data, "actorName", "actor_name")),
        is_available=data.get("isAvailable", data.get("is_available")) is not False,
    )


def map_day(
    data: dict[str, Any],
    index: int,
    *,
    episode_numbers: Sequence[int],
    profile: LocationProfile | None = None,
) -> ShootingDay:
    """Map one raw day object onto a shooting day with defaults applied."""
    location = as_text(pick(data, "location")) or UNSPECIFIED_LOCATION
    fallback_episode = episode_numbers[0] if episode_numbers else 1
    raw_scenes = data.get("scenes")
    scenes = (
        [map_scene(item, location, fallback_episode) for item in raw_scenes]
        if isinstance(raw_scenes, list)
        else []
    )
    raw_cast = pick(data, "castRequired", "cast_required")
    cast = (
        [ref for ref in (map_cast(item) for item in raw_cast) if ref is not None]
        if isinstance(raw_cast, list)
        else []
    )
    day_number = as_int(pick(data, "dayNumber", "day_number"))
    return ShootingDay(
        day_number=day_number if day_number and day_number > 0 else index + 1,
        date=as_text(pick(data, "date")),
        location=location,
        call_time=as_text(pick(data, "callTime", "call_time")) or DEFAULT_CALL_TIME,
        estimated_wrap_time=as_text(
            pick(data, "estimatedWrapTime", "estimated_wrap_time")
        )
        or DEFAULT_WRAP_TIME,
        scenes=scenes,
        cast_required=cast,
        crew_required=string_list(pick(data, "crewRequired", "crew_required")),
        equipment_required=string_list(
            pick(data, "equipmentRequired", "equipment_required")
        ),
        special_notes=as_text(pick(data, "specialNotes", "special_notes")) or "",
        weather_contingency=as_text(
            pick(data, "weatherContingency", "weather_contingency")
        ),
        setup_notes=as_text(pick(data, "setupNotes", "setup_notes")),
        venue=profile.venue_metadata(location) if profile else None,
        source=DaySource.GENERATIVE,
    )


def map_days(
    raw_days: Sequence[dict[str, Any]],
    *,
    episode_numbers: Sequence[int],
    profile: LocationProfile | None = None,
) -> list[ShootingDay]:
    """Map raw day objects onto shooting days.

    Raises:
        ScheduleParseError: If a day or scene entry is not an object
    """
    days = []
    for index, data in enumerate(raw_days):
        if not isinstance(data, dict):
            raise ScheduleParseError(f"Day entry is not an object: {data!r}")
        days.append(
            map_day(data, index, episode_numbers=episode_numbers, profile=profile)
        )
    return days

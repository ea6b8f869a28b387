"""Rehearsal suggestions for a finished shooting schedule."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from stripboard.config import StripboardSettings, get_logger, get_settings
from stripboard.llm.protocols import TextGenerator
from stripboard.models import (
    EpisodeBreakdown,
    RehearsalLocation,
    RehearsalSession,
    RehearsalStatus,
    RehearsalType,
    ShootingSchedule,
)
from stripboard.scheduling.parser import (
    as_int,
    as_text,
    map_scene,
    parse_or_recover,
    pick,
    string_list,
)

logger = get_logger(__name__)

DEFAULT_REHEARSAL_TIME = "10:00"
DEFAULT_REHEARSAL_MINUTES = 120

REHEARSAL_SYSTEM_INSTRUCTION = """You are an experienced director and acting coach for web series production.

TASK: Analyze the shooting schedule and suggest rehearsals based on scene complexity.

RULES:
1. Suggest rehearsals for complex emotional scenes (long dialogue, conflict, intimate moments), scenes with stunts or choreography, ensemble scenes with several actors, and the first scenes of the production.
2. Rehearsal types:
   - table-read: script reading for all episodes (1-2 hours, all cast)
   - blocking: physical movement rehearsal (1-2 hours per scene)
   - technical: integration with camera and lights (30-60 minutes)
   - full-run: complete run-through (episode length)
3. Timing: table reads one week before the first shoot day, blocking 2-3 days before the scene's shoot day, technical the day before, full runs mid-production.
4. Be selective. Simple scenes (establishing shots, background action) need no rehearsal.

OUTPUT: a JSON array of rehearsal suggestions. Each has:
- date (YYYY-MM-DD, or empty when the shoot is undated)
- time (HH:MM)
- duration (minutes)
- scenes (array of objects with episodeNumber, sceneNumber, sceneTitle)
- actors (array of actor or character names)
- location ("in-person" or "video-call")
- rehearsalType ("table-read", "blocking", "technical" or "full-run")
- goals (array of strings explaining why the rehearsal is valuable)
- linkedToShootDay (day number, optional)

No markdown, no explanations. Only the JSON array."""


def build_rehearsal_instruction(
    schedule: ShootingSchedule,
    breakdowns: Mapping[int, EpisodeBreakdown],
) -> str:
    """Describe each shoot day's scenes with cast, duration and requirements."""
    lines = ["Suggest rehearsals for the following shooting schedule:", ""]
    lines.append("SHOOTING SCHEDULE:")
    for day in schedule.days:
        lines.append(f"Day {day.day_number} ({day.date or 'TBD'}) at {day.location}:")
        for scene in day.scenes:
            lines.append(
                f"  - Ep{scene.episode_number} Scene {scene.scene_number}: "
                f"{scene.scene_title}"
            )
            breakdown = breakdowns.get(scene.episode_number)
            detail = breakdown.find_scene(scene.scene_number) if breakdown else None
            if detail is None:
                continue
            lines.append(f"    Characters: {', '.join(detail.character_names)}")
            lines.append(f"    Duration: {scene.estimated_duration} minutes")
            if detail.special_requirements:
                lines.append(
                    "    Special Requirements: "
                    + ", ".join(detail.special_requirements)
                )
        lines.append("")
    lines.append(
        "Generate 3-5 strategic rehearsal suggestions that will improve "
        "production quality."
    )
    return "\n".join(lines)


def _enum_value(enum_cls: Any, value: Any, default: Any) -> Any:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def map_rehearsal(
    data: Any, index: int, fallback_episode: int
) -> RehearsalSession | None:
    """Map one raw suggestion onto a rehearsal session, or None if unusable."""
    if not isinstance(data, dict):
        return None
    duration = as_int(pick(data, "duration"))
    raw_scenes = data.get("scenes")
    scenes = [
        map_scene(scene, None, fallback_episode)
        for scene in (raw_scenes if isinstance(raw_scenes, list) else [])
        if isinstance(scene, dict)
    ]
    return RehearsalSession(
        id=f"rehearsal-{uuid4().hex[:12]}-{index}",
        date=as_text(pick(data, "date")) or "",
        time=as_text(pick(data, "time")) or DEFAULT_REHEARSAL_TIME,
        duration=duration if duration and duration > 0 else DEFAULT_REHEARSAL_MINUTES,
        scenes=scenes,
        actors=string_list(data.get("actors")),
        location=_enum_value(
            RehearsalLocation, pick(data, "location"), RehearsalLocation.IN_PERSON
        ),
        location_details=as_text(pick(data, "locationDetails", "location_details")),
        rehearsal_type=_enum_value(
            RehearsalType,
            pick(data, "rehearsalType", "rehearsal_type"),
            RehearsalType.BLOCKING,
        ),
        goals=string_list(data.get("goals")),
        status=RehearsalStatus.SUGGESTED,
        suggested_by_ai=True,
        linked_to_shoot_day=as_int(
            pick(data, "linkedToShootDay", "linked_to_shoot_day")
        ),
    )


def _first_episode(schedule: ShootingSchedule) -> int:
    if schedule.episode_number is not None:
        return schedule.episode_number
    if schedule.episode_numbers:
        return schedule.episode_numbers[0]
    for day in schedule.days:
        for scene in day.scenes:
            return scene.episode_number
    return 1


class RehearsalSuggester:
    """Ask the text generator for rehearsal suggestions.

    Suggestions are a nice-to-have: every failure is logged and produces an
    empty list.
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        settings: StripboardSettings | None = None,
    ) -> None:
        self.text_generator = text_generator
        self.settings = settings or get_settings()

    async def suggest(
        self,
        schedule: ShootingSchedule,
        breakdowns: Mapping[int, EpisodeBreakdown],
    ) -> list[RehearsalSession]:
        if not schedule.days:
            return []

        fallback_episode = _first_episode(schedule)
        raw: str | None = None
        try:
            raw = await asyncio.wait_for(
                self.text_generator.generate(
                    REHEARSAL_SYSTEM_INSTRUCTION,
                    build_rehearsal_instruction(schedule, breakdowns),
                    temperature=self.settings.rehearsal_temperature,
                    max_tokens=self.settings.rehearsal_max_tokens,
                ),
                timeout=self.settings.schedule_request_timeout,
            )
            outcome = parse_or_recover(raw)
            sessions = [
                session
                for index, entry in enumerate(outcome.days)
                if (session := map_rehearsal(entry, index, fallback_episode))
                is not None
            ]
        except Exception as e:
            logger.warning(
                "Rehearsal suggestions failed",
                error=str(e) or type(e).__name__,
                error_type=type(e).__name__,
                response_length=len(raw) if raw is not None else 0,
            )
            return []

        logger.info("Generated rehearsal suggestions", count=len(sessions))
        return sessions


def with_rehearsals(
    schedule: ShootingSchedule, sessions: list[RehearsalSession]
) -> ShootingSchedule:
    """Return a copy of ``schedule`` carrying ``sessions``."""
    return schedule.model_copy(update={"rehearsals": list(sessions)})

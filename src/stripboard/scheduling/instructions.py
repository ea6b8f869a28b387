"""Build the system and user instructions for one scheduling request.

Everything here is pure: the same inputs always produce the same text.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from stripboard.models import (
    CastingData,
    EpisodeBreakdown,
    OptimizationPriority,
    Scene,
    SchedulingMode,
    SeriesContext,
)
from stripboard.scheduling.caps import ARC_TARGET_DAYS, DayCaps
from stripboard.scheduling.partitioner import Batch
from stripboard.scheduling.profiler import LocationProfile, VenueMatch

MAX_LISTED_LOCATIONS = 15
MAX_LISTED_CHARACTERS = 5
MAX_LISTED_REQUIREMENTS = 2

DAY_FIELDS = (
    "dayNumber (sequential)",
    "location (the single filming location for the day)",
    "callTime (HH:MM)",
    "estimatedWrapTime (HH:MM)",
    "scenes (array of objects with episodeNumber, sceneNumber, sceneTitle, "
    "estimatedDuration, priority, location)",
    "castRequired (array of objects with characterName, actorName, isAvailable)",
    'crewRequired (array of strings, e.g. ["Director", "DP", "Sound"])',
    'equipmentRequired (array of strings, e.g. ["Camera", "Lights"])',
    "specialNotes (string)",
    "weatherContingency (string, required for exterior locations)",
    "setupNotes (string with camera and lighting setup)",
)


@dataclass(frozen=True)
class ScheduleInstruction:
    """A ready-to-send scheduling request."""

    system: str
    user: str
    batch_number: int = 1
    batch_total: int = 1

    @property
    def batched(self) -> bool:
        return self.batch_total > 1


def build_system_instruction(
    mode: SchedulingMode,
    priority: OptimizationPriority,
    caps: DayCaps,
) -> str:
    """Persona, scheduling rules and output shape for the generator."""
    low, high = ARC_TARGET_DAYS
    hours = f"{caps.max_hours_per_day:g}"
    fields = "\n".join(f"- {name}" for name in DAY_FIELDS)
    return f"""You are an experienced 1st Assistant Director scheduling a micro-budget web series.

RULES:
1. Location grouping comes first. Group every scene at the same location together, even across episodes. A company move costs 2-4 hours.
2. One location per day. Never combine locations on a single day.
3. Finish a location in 1-3 consecutive days before moving on. Never return to a location later.
4. Never exceed {hours}-hour days including a {caps.setup_buffer_minutes}-minute setup buffer. Split a location across consecutive days when its scenes run longer.
5. Exterior locations with both DAY and NIGHT scenes may be split into a DAY day followed by a NIGHT day at the same location.
6. Shoot emotionally demanding or complex scenes early while cast and crew are fresh, and always give exterior days a weather contingency.
7. Standard call times are 08:00 or 09:00. Wrap times cover every scene plus buffer.
8. Day counts: an arc targets {low}-{high} shoot days and never more than {caps.arc_max_days}. A whole series targets about {caps.series_target_days} days and never more than {caps.series_max_days}.
9. Name each day by its real venue when one is known, never by a generic label.

OUTPUT FORMAT:
Strictly valid JSON: an array of shooting days. Each day contains:
{fields}

No markdown, no code fences, no explanations. Only the JSON array.

Current mode: {mode.value}
Optimization priority: {priority.value}"""


def _episode_lines(
    scenes: Sequence[Scene],
    episode_numbers: Sequence[int],
    breakdowns: Mapping[int, EpisodeBreakdown],
) -> list[str]:
    counts = Counter(scene.episode_number for scene in scenes)
    lines = []
    for number in episode_numbers:
        if not counts[number]:
            continue
        breakdown = breakdowns.get(number)
        title = breakdown.title_for(number) if breakdown else f"Episode {number}"
        lines.append(f'- Episode {number}: "{title}" ({counts[number]} scenes)')
    return lines


def _location_lines(
    scenes: Sequence[Scene],
    profile: LocationProfile,
    caps: DayCaps,
    batched: bool,
) -> tuple[list[str], list[str]]:
    counts = Counter(scene.location for scene in scenes)
    ordered = [location for location in profile.locations if counts[location]]
    if batched:
        listed = ordered
        extra = 0
    else:
        by_size = sorted(ordered, key=lambda location: -counts[location])
        listed = by_size[:MAX_LISTED_LOCATIONS]
        extra = len(by_size) - len(listed)

    locations = [f"- {location}: {counts[location]} scene(s)" for location in listed]
    if extra > 0:
        locations.append(f"- ... and {extra} more locations")

    stats_lines = []
    for location in listed:
        entry = profile.stats[location]
        stats_lines.append(
            f"- {location}: {entry.scene_count} scene(s), ~{entry.total_minutes} min, "
            f"time-of-day [{entry.describe_time_of_day()}], "
            f"exterior={'yes' if entry.exterior else 'no'}, "
            f"estimated days needed: {entry.estimated_days(caps.day_cap_minutes)}"
        )
    return locations, stats_lines


def _venue_lines(scenes: Sequence[Scene], profile: LocationProfile) -> list[str]:
    keys = {scene.key for scene in scenes}
    relevant: list[VenueMatch] = [
        match
        for match in profile.venues.values()
        if keys.intersection(match.scene_keys)
    ]
    lines = []
    for match in relevant:
        name = match.group_name or "Unknown Location"
        scene_total = len(keys.intersection(match.scene_keys))
        if match.venue is None:
            lines.append(f"- {name}: Venue selection pending ({scene_total} scene(s))")
            continue
        venue = match.venue
        lines.append(
            f"- {name} -> {match.label} ({venue.display_address or 'Address TBD'})"
        )
        if venue.logistics and venue.logistics.describe():
            lines.append(f"  Logistics: {', '.join(venue.logistics.describe())}")
        cost = f"  Cost: ${venue.all_in_cost:g}/day"
        if venue.permit_required:
            cost += " | Permit required: Yes"
        if venue.insurance_required:
            cost += " | Insurance required: Yes"
        lines.append(cost)
        episodes = ", ".join(str(number) for number in match.episodes)
        lines.append(f"  Scenes: {scene_total} scene(s) across episodes {episodes}")
    if lines:
        example = next((m.label for m in relevant if m.venue), "Venue Name")
        lines.append("")
        lines.append(
            f'Use the real venue names above (e.g. "{example}") as day labels, '
            "not generic names like \"Coffee Shop\" or \"Office\"."
        )
    return lines


def _cast_label(cast: Sequence[str]) -> str:
    if not cast:
        return "None"
    if len(cast) > MAX_LISTED_CHARACTERS:
        shortened = ", ".join(name[:3] for name in cast[:3])
        return f"{shortened} +{len(cast) - 3}"
    return ", ".join(cast)


def _scene_lines(
    scenes: Sequence[Scene],
    breakdowns: Mapping[int, EpisodeBreakdown],
) -> list[str]:
    lines = []
    current_episode: int | None = None
    for scene in scenes:
        if scene.episode_number != current_episode:
            if current_episode is not None:
                lines.append("")
            current_episode = scene.episode_number
            breakdown = breakdowns.get(current_episode)
            title = (
                breakdown.title_for(current_episode)
                if breakdown
                else f"Episode {current_episode}"
            )
            lines.append(f"=== EPISODE {current_episode}: {title} ===")
        lines.append(f"Scene {scene.scene_number}: {scene.title}")
        lines.append(f"  Location: {scene.location}")
        lines.append(f"  Time of Day: {scene.time_of_day.value}")
        lines.append(f"  Characters: {_cast_label(scene.cast)}")
        lines.append(f"  Duration: {scene.duration}min")
        if scene.special_requirements:
            requirements = scene.special_requirements[:MAX_LISTED_REQUIREMENTS]
            lines.append(f"  Requirements: {', '.join(requirements)}")
    return lines


def _cast_lines(
    scenes: Sequence[Scene], casting: Mapping[int, CastingData]
) -> list[str]:
    episodes = dict.fromkeys(scene.episode_number for scene in scenes)
    seen: set[str] = set()
    lines = []
    for number in episodes:
        data = casting.get(number)
        if data is None:
            continue
        for member in data.cast:
            if member.character_name in seen:
                continue
            seen.add(member.character_name)
            lines.append(f"- {member.describe()}")
    return lines


def build_user_instruction(
    scenes: Sequence[Scene],
    profile: LocationProfile,
    episode_numbers: Sequence[int],
    breakdowns: Mapping[int, EpisodeBreakdown],
    *,
    mode: SchedulingMode,
    caps: DayCaps,
    series: SeriesContext | None = None,
    casting: Mapping[int, CastingData] | None = None,
    batch: Batch | None = None,
    batch_total: int = 1,
) -> str:
    """Describe the scenes of one batch and what to produce for them."""
    series = series or SeriesContext()
    batched = batch is not None and batch_total > 1
    low, high = ARC_TARGET_DAYS
    hours = f"{caps.max_hours_per_day:g}"
    episode_lines = _episode_lines(scenes, episode_numbers, breakdowns)

    out: list[str] = []
    if batched and batch is not None:
        out.append(
            f'Generate the shooting schedule for BATCH {batch.number} of '
            f'{batch_total} for "{series.series_title}".'
        )
        out.append(
            f"This is batch {batch.number} of {batch_total}. Only schedule the "
            "locations in this batch. Day numbers are adjusted when batches "
            "are combined."
        )
    else:
        out.append(
            f"Generate an optimized shooting schedule for {len(episode_lines)} "
            f'episode(s) of "{series.series_title}".'
        )
    out.append("")

    out.append("SERIES CONTEXT:")
    if series.series_overview:
        out.append(f"Series Overview: {series.series_overview}")
    out.append(f"Genre: {series.genre}")
    out.append(f"Tone: {series.tone}")
    if series.setting:
        out.append(f"World Setting: {series.setting}")
    out.append(f"Scheduling Mode: {mode.value}")
    out.append("")
    out.append(
        f"TOTAL SHOOT DAYS CAP: target {low}-{high} days, up to "
        f"{caps.arc_max_days} for this selection if truly needed. A full series "
        f"targets ~{caps.series_target_days} days and never exceeds "
        f"{caps.series_max_days}."
    )
    out.append("")

    out.append("CRITICAL LOCATION RULES:")
    out.append("1. ONE LOCATION PER DAY. Never combine locations on one day.")
    out.append(
        "2. COMPLETE A LOCATION BEFORE MOVING ON, in 1-3 consecutive days."
    )
    out.append(
        f"3. SPLIT BY DURATION when a location runs past ~{hours} hours "
        f"(including the {caps.setup_buffer_minutes} min buffer)."
    )
    out.append(
        "4. EXTERIOR DAY/NIGHT: exterior locations with DAY and NIGHT scenes "
        "may be split into consecutive DAY and NIGHT days."
    )
    out.append("5. NO RETURN TRIPS to a finished location.")
    out.append("6. NAME EACH DAY BY ITS LOCATION, using the venue name when known.")
    out.append("")

    out.append("EPISODES TO SCHEDULE:")
    out.extend(episode_lines)
    out.append("")

    locations, stats_lines = _location_lines(scenes, profile, caps, batched)
    if batched and batch is not None:
        out.append(
            f"BATCH {batch.number}/{batch_total} - SCHEDULE ONLY THESE LOCATIONS:"
        )
    else:
        out.append(f"UNIQUE LOCATIONS ({len(profile.stats)} total):")
    out.extend(locations)
    out.append("")
    out.append("LOCATION STATS:")
    out.extend(stats_lines)
    out.append("")

    venue_lines = _venue_lines(scenes, profile)
    if venue_lines:
        out.append("REAL-WORLD VENUES:")
        out.extend(venue_lines)
        out.append("")

    out.append("DETAILED SCENE BREAKDOWN:")
    out.extend(_scene_lines(scenes, breakdowns))
    out.append("")

    cast_lines = _cast_lines(scenes, casting or {})
    if cast_lines:
        out.append("CAST INFORMATION:")
        out.extend(cast_lines)
        out.append("")

    out.append("INSTRUCTIONS:")
    if mode is SchedulingMode.CROSS_EPISODE:
        out.append(
            "Create a CROSS-EPISODE schedule that groups scenes by location across "
            "all episodes. Scenes from different episodes at the same location "
            "belong on the same day."
        )
    else:
        out.append(
            "Create a single-episode schedule that groups scenes by location "
            "within the episode."
        )
    out.append(
        f"Keep every day within {hours} hours including buffers and consider "
        "cast availability within each location's days. Only schedule the "
        "locations listed above."
    )
    out.append("")
    out.append(
        "Output ONLY a JSON array. Keep descriptions brief (max 100 chars each). "
        "NO markdown."
    )
    return "\n".join(out)


def build_schedule_instruction(
    scenes: Sequence[Scene],
    profile: LocationProfile,
    episode_numbers: Sequence[int],
    breakdowns: Mapping[int, EpisodeBreakdown],
    *,
    mode: SchedulingMode,
    priority: OptimizationPriority,
    caps: DayCaps,
    series: SeriesContext | None = None,
    casting: Mapping[int, CastingData] | None = None,
    batch: Batch | None = None,
    batch_total: int = 1,
) -> ScheduleInstruction:
    """Build the full request for one batch of scenes."""
    return ScheduleInstruction(
        system=build_system_instruction(mode, priority, caps),
        user=build_user_instruction(
            scenes,
            profile,
            episode_numbers,
            breakdowns,
            mode=mode,
            caps=caps,
            series=series,
            casting=casting,
            batch=batch,
            batch_total=batch_total,
        ),
        batch_number=batch.number if batch is not None else 1,
        batch_total=batch_total,
    )

"""Flatten per-episode breakdowns into one ordered scene stream."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from stripboard.config import get_logger
from stripboard.exceptions import MissingBreakdownError
from stripboard.models import EpisodeBreakdown, Scene

logger = get_logger(__name__)

DEFAULT_SCENE_MINUTES = 45


def aggregate_scenes(
    breakdowns: Mapping[int, EpisodeBreakdown],
    episode_numbers: Sequence[int],
    default_duration: int = DEFAULT_SCENE_MINUTES,
) -> list[Scene]:
    """Flatten the requested episodes into a single ordered scene list.

    Episodes are walked in request order and scenes in breakdown order.
    Missing durations get ``default_duration`` here so nothing downstream
    has to guess.

    Args:
        breakdowns: Episode breakdowns keyed by episode number
        episode_numbers: Episodes to include, in request order
        default_duration: Minutes assumed for scenes without an estimate

    Returns:
        Scenes with sequential ``order_index`` values

    Raises:
        MissingBreakdownError: If any requested episode has no breakdown
            or no scenes
    """
    missing = [
        number
        for number in episode_numbers
        if number not in breakdowns or not breakdowns[number].scenes
    ]
    if missing:
        logger.error("Breakdowns missing for requested episodes", episodes=missing)
        raise MissingBreakdownError(missing)

    scenes: list[Scene] = []
    defaulted = 0
    for episode_number in episode_numbers:
        for item in breakdowns[episode_number].scenes:
            if item.estimated_shoot_time is None:
                defaulted += 1
            scenes.append(
                Scene(
                    episode_number=episode_number,
                    scene_number=item.scene_number,
                    title=item.scene_title or f"Scene {item.scene_number}",
                    location=item.location,
                    time_of_day=item.time_of_day,
                    duration=item.estimated_shoot_time or default_duration,
                    cast=tuple(item.character_names),
                    special_requirements=tuple(item.special_requirements),
                    order_index=len(scenes),
                )
            )

    logger.debug(
        "Aggregated scenes",
        episodes=list(episode_numbers),
        scene_count=len(scenes),
        defaulted_durations=defaulted,
    )
    return scenes

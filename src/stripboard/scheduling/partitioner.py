"""Split a run's locations into generation-sized batches."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from stripboard.config import get_logger
from stripboard.models import Scene
from stripboard.scheduling.profiler import LocationProfile, LocationStats

logger = get_logger(__name__)

MAX_SCENES_PER_BATCH = 35


@dataclass
class Batch:
    """A subset of locations scheduled by one generative request."""

    index: int
    locations: list[str] = field(default_factory=list)
    scene_count: int = 0
    max_scenes: int = MAX_SCENES_PER_BATCH

    @property
    def oversized(self) -> bool:
        """A single location larger than the ceiling."""
        return self.scene_count > self.max_scenes

    @property
    def number(self) -> int:
        """One-based position used in instructions and logs."""
        return self.index + 1

    def __contains__(self, location: object) -> bool:
        return location in self.locations


def partition_batches(
    profile: LocationProfile | Mapping[str, LocationStats],
    max_scenes: int = MAX_SCENES_PER_BATCH,
) -> list[Batch]:
    """Group whole locations into batches of at most ``max_scenes`` scenes.

    Locations are walked in the stats map's natural order. A location is
    never split; one larger than the ceiling gets a batch of its own.
    """
    if max_scenes < 1:
        raise ValueError(f"max_scenes must be positive, got {max_scenes}")

    stats = profile.stats if isinstance(profile, LocationProfile) else profile
    batches: list[Batch] = []
    current = Batch(index=0, max_scenes=max_scenes)

    for location, entry in stats.items():
        if current.locations and current.scene_count + entry.scene_count > max_scenes:
            batches.append(current)
            current = Batch(index=len(batches), max_scenes=max_scenes)
        current.locations.append(location)
        current.scene_count += entry.scene_count

    if current.locations:
        batches.append(current)

    oversized = [batch.number for batch in batches if batch.oversized]
    logger.info(
        "Partitioned locations into batches",
        batch_count=len(batches),
        location_count=len(stats),
        scene_count=sum(batch.scene_count for batch in batches),
        oversized_batches=oversized,
    )
    return batches


def scenes_for_batch(scenes: Iterable[Scene], batch: Batch) -> list[Scene]:
    """Scenes at the batch's locations, in aggregate order."""
    wanted = set(batch.locations)
    return [scene for scene in scenes if scene.location in wanted]

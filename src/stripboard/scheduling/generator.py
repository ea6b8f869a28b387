"""Run a full scheduling request: batch, generate, recover, assemble."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from stripboard.config import StripboardSettings, get_logger, get_settings
from stripboard.exceptions import ScheduleParseError, ValidationError
from stripboard.llm.protocols import TextGenerator
from stripboard.models import Scene, ScheduleRequest, ShootingDay, ShootingSchedule
from stripboard.scheduling.aggregator import aggregate_scenes
from stripboard.scheduling.assembler import (
    AssemblyContext,
    BatchResult,
    assemble_schedule,
)
from stripboard.scheduling.caps import DayCaps
from stripboard.scheduling.fallback import build_fallback_days
from stripboard.scheduling.instructions import build_schedule_instruction
from stripboard.scheduling.parser import map_days, parse_or_recover
from stripboard.scheduling.partitioner import (
    Batch,
    partition_batches,
    scenes_for_batch,
)
from stripboard.scheduling.profiler import LocationProfile, profile_locations

logger = get_logger(__name__)

PREVIEW_CHARS = 200


class ScheduleGenerator:
    """Produce a shooting schedule for a request.

    Each batch makes at most one generation call. Any failure for a batch
    (an exception, a timeout or an unparseable response) is replaced by the
    deterministic fallback for that batch, so a run only fails on invalid
    input.

    Without a text generator every batch uses the fallback.
    """

    def __init__(
        self,
        text_generator: TextGenerator | None = None,
        settings: StripboardSettings | None = None,
    ) -> None:
        self.text_generator = text_generator
        self.settings = settings or get_settings()

    @property
    def offline(self) -> bool:
        return self.text_generator is None

    async def generate(self, request: ScheduleRequest) -> ShootingSchedule:
        """Schedule every scene of the requested episodes.

        Raises:
            MissingBreakdownError: If a requested episode has no scenes
            ValidationError: If the series day ceiling is exceeded and
                ``enforce_series_day_cap`` is set
        """
        settings = self.settings
        scenes = aggregate_scenes(
            request.breakdowns,
            request.episode_numbers,
            default_duration=settings.default_scene_minutes,
        )
        profile = profile_locations(scenes, request.arc_locations, request.breakdowns)
        caps = DayCaps.from_settings(settings, len(request.episode_numbers))
        batches = partition_batches(profile, settings.max_scenes_per_batch)

        logger.info(
            "Starting schedule generation",
            episodes=request.episode_numbers,
            mode=request.mode.value,
            priority=request.optimization_priority.value,
            scene_count=len(scenes),
            location_count=len(profile.stats),
            batch_count=len(batches),
            offline=self.offline,
        )

        results = []
        for batch in batches:
            batch_scenes = scenes_for_batch(scenes, batch)
            result = await self._schedule_batch(
                request, batch, len(batches), batch_scenes, profile, caps
            )
            results.append(result)

        schedule = assemble_schedule(
            results,
            context=AssemblyContext(
                episode_numbers=request.episode_numbers,
                mode=request.mode,
                priority=request.optimization_priority,
                breakdowns=request.breakdowns,
                caps=caps,
                updated_by=request.updated_by,
            ),
        )
        self._check_day_cap(schedule)
        return schedule

    async def _schedule_batch(
        self,
        request: ScheduleRequest,
        batch: Batch,
        batch_total: int,
        scenes: Sequence[Scene],
        profile: LocationProfile,
        caps: DayCaps,
    ) -> BatchResult:
        if self.text_generator is None:
            return self._fallback(batch, scenes, profile, caps, error="offline")

        raw: str | None = None
        try:
            instruction = build_schedule_instruction(
                scenes,
                profile,
                request.episode_numbers,
                request.breakdowns,
                mode=request.mode,
                priority=request.optimization_priority,
                caps=caps,
                series=request.series,
                casting=request.casting,
                batch=batch,
                batch_total=batch_total,
            )
            raw = await asyncio.wait_for(
                self.text_generator.generate(
                    instruction.system,
                    instruction.user,
                    temperature=self.settings.schedule_temperature,
                    max_tokens=self.settings.schedule_max_tokens,
                ),
                timeout=self.settings.schedule_request_timeout,
            )
            outcome = parse_or_recover(raw)
            try:
                days = map_days(
                    outcome.days,
                    episode_numbers=request.episode_numbers,
                    profile=profile,
                )
            except ScheduleParseError as e:
                raise ScheduleParseError(e.message, raw=raw) from e
        except Exception as e:
            self._log_batch_failure(batch, e, raw)
            return self._fallback(batch, scenes, profile, caps, error=repr(e))

        logger.info(
            "Batch scheduled",
            batch=batch.number,
            batch_total=batch_total,
            day_count=len(days),
            recovery_layer=outcome.layer.value,
        )
        self._warn_omitted_scenes(batch, scenes, days)
        return BatchResult(index=batch.index, days=days)

    def _fallback(
        self,
        batch: Batch,
        scenes: Sequence[Scene],
        profile: LocationProfile,
        caps: DayCaps,
        *,
        error: str,
    ) -> BatchResult:
        days = build_fallback_days(
            scenes, profile, day_cap_minutes=caps.day_cap_minutes
        )
        logger.info(
            "Using fallback schedule for batch",
            batch=batch.number,
            locations=batch.locations,
            day_count=len(days),
        )
        return BatchResult(
            index=batch.index, days=days, used_fallback=True, error=error
        )

    def _log_batch_failure(
        self, batch: Batch, error: Exception, raw: str | None
    ) -> None:
        if isinstance(error, ScheduleParseError):
            response_length = error.response_length
            preview = error.head[:PREVIEW_CHARS]
        else:
            response_length = len(raw) if raw is not None else 0
            preview = (raw or "")[:PREVIEW_CHARS]
        logger.warning(
            "Batch generation failed, falling back",
            batch=batch.number,
            locations=batch.locations,
            error=str(error) or type(error).__name__,
            error_type=type(error).__name__,
            response_length=response_length,
            response_preview=preview,
        )

    def _warn_omitted_scenes(
        self, batch: Batch, scenes: Sequence[Scene], days: Sequence[ShootingDay]
    ) -> None:
        placed: set[tuple[int, int]] = set()
        for day in days:
            placed |= day.scene_keys
        missing = sorted(scene.key for scene in scenes if scene.key not in placed)
        if missing:
            logger.warning(
                "Generated days omit scenes",
                batch=batch.number,
                missing_count=len(missing),
                missing=[f"{episode}x{number}" for episode, number in missing[:20]],
            )

    def _check_day_cap(self, schedule: ShootingSchedule) -> None:
        report = schedule.day_caps
        if (
            self.settings.enforce_series_day_cap
            and report is not None
            and report.exceeds_series_cap
        ):
            raise ValidationError(
                message=(
                    f"Schedule needs {report.total_days} days, more than the "
                    f"{report.series_max_days}-day series ceiling"
                ),
                hint="Raise series_max_days or schedule fewer episodes per run",
                details={
                    "total_days": report.total_days,
                    "series_max_days": report.series_max_days,
                },
            )


async def generate_schedule(
    request: ScheduleRequest,
    text_generator: TextGenerator | None = None,
    settings: StripboardSettings | None = None,
) -> ShootingSchedule:
    """Convenience wrapper around ``ScheduleGenerator.generate``."""
    return await ScheduleGenerator(text_generator, settings).generate(request)

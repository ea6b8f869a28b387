"""Tests for the end-to-end schedule generator."""

import asyncio
import json

import pytest

from stripboard.config import StripboardSettings
from stripboard.exceptions import (
    MissingBreakdownError,
    ScheduleParseError,
    ValidationError,
)
from stripboard.models import DaySource, ScheduleRequest, SchedulingMode
from stripboard.scheduling import ScheduleGenerator, generate_schedule


def _generated_days(request: ScheduleRequest) -> str:
    """One generated day per location covering every scene."""
    by_location: dict[str, list[dict]] = {}
    for episode in request.episode_numbers:
        for scene in request.breakdowns[episode].scenes:
            by_location.setdefault(scene.location, []).append(
                {
                    "episodeNumber": episode,
                    "sceneNumber": scene.scene_number,
                    "estimatedDuration": scene.estimated_shoot_time or 45,
                }
            )
    days = [
        {"dayNumber": n, "location": location, "callTime": "07:00", "scenes": scenes}
        for n, (location, scenes) in enumerate(by_location.items(), 1)
    ]
    return "```json\n" + json.dumps(days) + "\n```"


def _scene_keys(schedule) -> list[tuple[int, int]]:
    return sorted(
        (ref.episode_number, ref.scene_number)
        for day in schedule.days
        for ref in day.scenes
    )


class SlowGenerator:
    async def generate(self, system, prompt, *, temperature, max_tokens):
        await asyncio.sleep(5)
        return "[]"


class TestScheduleGenerator:
    @pytest.mark.asyncio
    async def test_generated_batch(self, two_episode_request, fake_generator):
        generator = fake_generator(_generated_days(two_episode_request))

        schedule = await ScheduleGenerator(generator).generate(two_episode_request)

        assert len(generator.calls) == 1
        assert generator.calls[0]["temperature"] == 0.6
        assert generator.calls[0]["max_tokens"] == 8000
        assert schedule.fallback_batches == []
        assert all(day.source is DaySource.GENERATIVE for day in schedule.days)
        assert schedule.days[0].call_time == "07:00"
        assert schedule.scheduling_mode is SchedulingMode.CROSS_EPISODE
        assert _scene_keys(schedule) == [
            (1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)
        ]

    @pytest.mark.asyncio
    async def test_exception_falls_back(self, two_episode_request, fake_generator):
        generator = fake_generator(RuntimeError("provider exploded"))

        schedule = await ScheduleGenerator(generator).generate(two_episode_request)

        assert schedule.fallback_batches == [0]
        assert all(day.source is DaySource.FALLBACK for day in schedule.days)
        assert len(_scene_keys(schedule)) == 6

    @pytest.mark.asyncio
    async def test_garbage_response_falls_back(
        self, two_episode_request, fake_generator
    ):
        generator = fake_generator("I'm sorry, I can't help with that.")

        schedule = await ScheduleGenerator(generator).generate(two_episode_request)

        assert schedule.fallback_batches == [0]
        assert len(_scene_keys(schedule)) == 6

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, two_episode_request):
        settings = StripboardSettings(_env_file=None, schedule_request_timeout=0.05)

        schedule = await ScheduleGenerator(SlowGenerator(), settings).generate(
            two_episode_request
        )

        assert schedule.fallback_batches == [0]

    @pytest.mark.asyncio
    async def test_offline_uses_fallback_for_every_batch(self, two_episode_request):
        settings = StripboardSettings(_env_file=None, max_scenes_per_batch=2)

        generator = ScheduleGenerator(None, settings)
        schedule = await generator.generate(two_episode_request)

        assert generator.offline
        assert schedule.batch_count == 3
        assert schedule.fallback_batches == [0, 1, 2]
        assert [d.day_number for d in schedule.days] == list(
            range(1, schedule.total_shoot_days + 1)
        )

    @pytest.mark.asyncio
    async def test_one_failed_batch_keeps_the_others(
        self, two_episode_request, fake_generator
    ):
        settings = StripboardSettings(_env_file=None, max_scenes_per_batch=3)
        good = json.dumps(
            [
                {
                    "location": "INT. COFFEE SHOP",
                    "scenes": [
                        {"episodeNumber": 1, "sceneNumber": 1},
                        {"episodeNumber": 1, "sceneNumber": 3},
                        {"episodeNumber": 2, "sceneNumber": 1},
                    ],
                }
            ]
        )
        generator = fake_generator(good, "not json")

        schedule = await ScheduleGenerator(generator, settings).generate(
            two_episode_request
        )

        assert schedule.batch_count == 2
        assert schedule.fallback_batches == [1]
        assert schedule.days[0].source is DaySource.GENERATIVE
        assert schedule.days[-1].source is DaySource.FALLBACK

    @pytest.mark.asyncio
    async def test_unmappable_day_reports_response(
        self, two_episode_request, fake_generator
    ):
        raw = json.dumps(
            [{"dayNumber": 1, "location": "INT. COFFEE SHOP", "scenes": ["1x1"]}]
        )
        generator = ScheduleGenerator(fake_generator(raw))
        failures = []
        generator._log_batch_failure = lambda batch, error, text: failures.append(
            error
        )

        schedule = await generator.generate(two_episode_request)

        assert schedule.fallback_batches == [0]
        assert isinstance(failures[0], ScheduleParseError)
        assert failures[0].response_length == len(raw)
        assert failures[0].head == raw

    @pytest.mark.asyncio
    async def test_missing_breakdown_fails_run(self, make_breakdown, fake_generator):
        request = ScheduleRequest(
            episode_numbers=[1, 2],
            breakdowns={1: make_breakdown(1, [("INT. A", 10, "DAY")])},
        )
        generator = fake_generator("[]")

        with pytest.raises(MissingBreakdownError):
            await ScheduleGenerator(generator).generate(request)
        assert generator.calls == []

    @pytest.mark.asyncio
    async def test_series_cap_enforced_when_configured(self, make_breakdown):
        request = ScheduleRequest(
            episode_numbers=[1],
            breakdowns={
                1: make_breakdown(1, [(f"INT. ROOM {n}", 30, "DAY") for n in range(5)])
            },
        )
        settings = StripboardSettings(
            _env_file=None, series_max_days=3, enforce_series_day_cap=True
        )

        with pytest.raises(ValidationError, match="series ceiling"):
            await generate_schedule(request, None, settings)

    @pytest.mark.asyncio
    async def test_series_cap_advisory_by_default(self, make_breakdown):
        request = ScheduleRequest(
            episode_numbers=[1],
            breakdowns={
                1: make_breakdown(1, [(f"INT. ROOM {n}", 30, "DAY") for n in range(5)])
            },
        )
        settings = StripboardSettings(_env_file=None, series_max_days=3)

        schedule = await generate_schedule(request, None, settings)

        assert schedule.total_shoot_days == 5
        assert schedule.day_caps.exceeds_series_cap
        assert schedule.scheduling_mode is SchedulingMode.SINGLE_EPISODE

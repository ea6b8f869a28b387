"""Tests for rehearsal suggestions."""

import json

import pytest

from stripboard.models import (
    RehearsalLocation,
    RehearsalStatus,
    RehearsalType,
    SchedulingMode,
    ShootingSchedule,
)
from stripboard.scheduling import RehearsalSuggester, generate_schedule, with_rehearsals
from stripboard.scheduling.rehearsals import build_rehearsal_instruction, map_rehearsal


@pytest.fixture
async def schedule(two_episode_request):
    return await generate_schedule(two_episode_request)


class TestMapRehearsal:
    def test_defaults(self):
        session = map_rehearsal({"scenes": [{"sceneNumber": 2}]}, 0, 4)

        assert session.id.startswith("rehearsal-")
        assert session.id.endswith("-0")
        assert session.time == "10:00"
        assert session.duration == 120
        assert session.location is RehearsalLocation.IN_PERSON
        assert session.rehearsal_type is RehearsalType.BLOCKING
        assert session.status is RehearsalStatus.SUGGESTED
        assert session.suggested_by_ai is True
        assert session.scenes[0].episode_number == 4

    def test_reads_fields(self):
        session = map_rehearsal(
            {
                "date": "2025-05-01",
                "time": "14:00",
                "duration": "90",
                "actors": ["MAYA", "JONAH"],
                "location": "Video-Call",
                "rehearsalType": "table-read",
                "goals": ["Find the rhythm of the argument"],
                "linkedToShootDay": 2,
            },
            3,
            1,
        )

        assert session.duration == 90
        assert session.location is RehearsalLocation.VIDEO_CALL
        assert session.rehearsal_type is RehearsalType.TABLE_READ
        assert session.linked_to_shoot_day == 2
        assert session.to_json_dict()["suggestedByAI"] is True

    def test_non_object_is_skipped(self):
        assert map_rehearsal("table read", 0, 1) is None


class TestRehearsalSuggester:
    @pytest.mark.asyncio
    async def test_suggestions_mapped(
        self, schedule, two_episode_request, fake_generator
    ):
        raw = json.dumps(
            [
                {"rehearsalType": "table-read", "actors": ["MAYA"]},
                "junk",
                {"rehearsalType": "technical", "duration": 45},
            ]
        )
        generator = fake_generator(raw)

        sessions = await RehearsalSuggester(generator).suggest(
            schedule, two_episode_request.breakdowns
        )

        assert [s.rehearsal_type for s in sessions] == [
            RehearsalType.TABLE_READ,
            RehearsalType.TECHNICAL,
        ]
        assert generator.calls[0]["temperature"] == 0.7
        assert "SHOOTING SCHEDULE:" in generator.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_failure_yields_empty_list(
        self, schedule, two_episode_request, fake_generator
    ):
        generator = fake_generator(ConnectionError("down"))

        sessions = await RehearsalSuggester(generator).suggest(
            schedule, two_episode_request.breakdowns
        )

        assert sessions == []

    @pytest.mark.asyncio
    async def test_empty_schedule_skips_generation(self, fake_generator):
        generator = fake_generator("[]")
        empty = ShootingSchedule(scheduling_mode=SchedulingMode.SINGLE_EPISODE)

        assert await RehearsalSuggester(generator).suggest(empty, {}) == []
        assert generator.calls == []


class TestRehearsalHelpers:
    @pytest.mark.asyncio
    async def test_instruction_lists_characters(self, schedule, two_episode_request):
        text = build_rehearsal_instruction(schedule, two_episode_request.breakdowns)

        assert "Day 1 (TBD)" in text
        assert "Characters: MAYA, JONAH" in text

    @pytest.mark.asyncio
    async def test_with_rehearsals_copies(self, schedule):
        session = map_rehearsal({}, 0, 1)

        updated = with_rehearsals(schedule, [session])

        assert updated.rehearsals == [session]
        assert schedule.rehearsals == []

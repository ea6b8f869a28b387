"""Tests for schedule assembly and day caps."""

from stripboard.models import DaySource, SchedulingMode, ShootingDay
from stripboard.scheduling import (
    AssemblyContext,
    BatchResult,
    DayCaps,
    arc_max_days,
    assemble_schedule,
    renumber_days,
)


def _days(count: int, location: str) -> list[ShootingDay]:
    return [
        ShootingDay(day_number=n, location=location, source=DaySource.FALLBACK)
        for n in range(1, count + 1)
    ]


class TestArcMaxDays:
    def test_clamped(self):
        assert arc_max_days(1) == 3
        assert arc_max_days(7) == 4
        assert arc_max_days(10) == 5
        assert arc_max_days(40) == 7

    def test_day_cap_minutes(self):
        assert DayCaps().day_cap_minutes == 540
        caps = DayCaps(max_hours_per_day=8, setup_buffer_minutes=30)
        assert caps.day_cap_minutes == 450


class TestAssembleSchedule:
    def test_batches_concatenate_and_renumber(self):
        results = [
            BatchResult(index=1, days=_days(2, "B"), used_fallback=True),
            BatchResult(index=0, days=_days(3, "A")),
        ]

        schedule = assemble_schedule(
            results,
            context=AssemblyContext(
                episode_numbers=[1, 2], mode=SchedulingMode.CROSS_EPISODE
            ),
        )

        assert schedule.total_shoot_days == 5
        assert [d.day_number for d in schedule.days] == [1, 2, 3, 4, 5]
        assert [d.location for d in schedule.days] == ["A", "A", "A", "B", "B"]
        assert schedule.episode_numbers == [1, 2]
        assert schedule.episode_number is None
        assert schedule.batch_count == 2
        assert schedule.fallback_batches == [1]
        assert schedule.rest_days == []
        assert schedule.rehearsals == []

    def test_single_episode_carries_title(self, make_breakdown):
        schedule = assemble_schedule(
            [BatchResult(index=0, days=_days(1, "A"))],
            context=AssemblyContext(
                episode_numbers=[4],
                mode=SchedulingMode.SINGLE_EPISODE,
                breakdowns={4: make_breakdown(4, [("A", 10, "DAY")], title="Finale")},
            ),
        )

        assert schedule.episode_number == 4
        assert schedule.episode_numbers is None
        assert schedule.episode_title == "Finale"

    def test_day_cap_report(self):
        schedule = assemble_schedule(
            [BatchResult(index=0, days=_days(30, "A"))],
            context=AssemblyContext(
                episode_numbers=[1, 2], mode=SchedulingMode.CROSS_EPISODE
            ),
        )

        report = schedule.day_caps
        assert report.total_days == 30
        assert report.exceeds_arc_cap
        assert report.exceeds_series_cap

    def test_summary(self):
        schedule = assemble_schedule(
            [BatchResult(index=0, days=_days(2, "A") + _days(1, "B"))],
            context=AssemblyContext(
                episode_numbers=[1], mode=SchedulingMode.SINGLE_EPISODE
            ),
        )

        summary = schedule.summary()
        assert summary.total_days == 3
        assert summary.location_moves == 1
        assert summary.fallback_days == 3
        assert summary.upcoming_days == 3

    def test_renumber_does_not_mutate(self):
        days = _days(2, "A")

        renumbered = renumber_days(days, start=10)

        assert [d.day_number for d in renumbered] == [10, 11]
        assert [d.day_number for d in days] == [1, 2]

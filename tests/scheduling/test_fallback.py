"""Tests for the deterministic fallback scheduler."""

from stripboard.models import DaySource, TimeOfDay
from stripboard.scheduling import build_fallback_days, profile_locations
from stripboard.scheduling.fallback import (
    EXTERIOR_WEATHER_NOTE,
    NIGHT_SETUP_NOTE,
    NOTE_PREFIX,
    pack_group,
)


class TestBuildFallbackDays:
    def test_forty_coffee_shop_scenes_fill_two_days(self, make_scene):
        scenes = [make_scene("INT. COFFEE SHOP", 20) for _ in range(40)]

        days = build_fallback_days(scenes, day_cap_minutes=540)

        assert [day.total_minutes for day in days] == [540, 260]
        assert [day.day_number for day in days] == [1, 2]
        assert all(day.location == "INT. COFFEE SHOP" for day in days)
        assert all(day.source is DaySource.FALLBACK for day in days)
        assert all(day.call_time == "08:00" for day in days)
        assert all(day.estimated_wrap_time == "18:00" for day in days)
        assert days[0].special_notes.startswith(NOTE_PREFIX)
        assert days[0].weather_contingency is None

    def test_exterior_day_and_night_split(self, make_scene):
        scenes = [make_scene("EXT. PARK", 20) for _ in range(5)]
        scenes += [
            make_scene("EXT. PARK", 30, time_of_day=TimeOfDay.NIGHT) for _ in range(3)
        ]

        days = build_fallback_days(scenes, day_cap_minutes=540)

        assert len(days) == 2
        day, night = days
        assert day.total_minutes == 100
        assert night.total_minutes == 90
        assert all(s.time_of_day is TimeOfDay.NIGHT for s in night.scenes)
        assert day.weather_contingency == EXTERIOR_WEATHER_NOTE
        assert night.weather_contingency == EXTERIOR_WEATHER_NOTE
        assert day.setup_notes is None
        assert night.setup_notes == NIGHT_SETUP_NOTE
        assert "NIGHT exterior" in night.special_notes

    def test_interior_night_is_not_split(self, make_scene):
        scenes = [
            make_scene("INT. APARTMENT", 30),
            make_scene("INT. APARTMENT", 30, time_of_day=TimeOfDay.NIGHT),
        ]

        days = build_fallback_days(scenes)

        assert len(days) == 1
        assert days[0].setup_notes is None

    def test_every_scene_placed_exactly_once(self, make_scene):
        scenes = [
            make_scene(location, duration)
            for location, duration in [
                ("INT. A", 200),
                ("EXT. B", 45),
                ("INT. A", 400),
                ("INT. C", 90),
                ("EXT. B", 600),
            ]
        ]

        days = build_fallback_days(scenes, day_cap_minutes=540)

        placed = [ref.scene_number for day in days for ref in day.scenes]
        assert sorted(placed) == sorted(s.scene_number for s in scenes)

    def test_scene_longer_than_cap_gets_own_day(self, make_scene):
        scenes = [make_scene("INT. A", 600), make_scene("INT. A", 30)]

        days = build_fallback_days(scenes, day_cap_minutes=540)

        assert [day.total_minutes for day in days] == [600, 30]

    def test_idempotent(self, make_scene):
        scenes = [make_scene("INT. A", 100 + i * 7) for i in range(12)]

        first = build_fallback_days(scenes)
        second = build_fallback_days(scenes)

        assert [d.model_dump() for d in first] == [d.model_dump() for d in second]

    def test_groups_follow_first_appearance(self, make_scene):
        scenes = [
            make_scene("INT. B", 10),
            make_scene("INT. A", 10),
            make_scene("INT. B", 10),
        ]

        days = build_fallback_days(scenes)

        assert [day.location for day in days] == ["INT. B", "INT. A"]

    def test_profile_labels_days_with_venue(self, make_scene, make_breakdown):
        from stripboard.models import ArcLocations

        breakdowns = {1: make_breakdown(1, [("INT. COFFEE SHOP", 20, "DAY")])}
        arc = ArcLocations.model_validate(
            {
                "locationGroups": [
                    {
                        "id": "cafe",
                        "parentLocationName": "COFFEE SHOP",
                        "episodeUsage": [{"episodeNumber": 1, "sceneNumbers": [1]}],
                        "shootingLocationSuggestions": [
                            {"id": "v", "venueName": "Bean There", "estimatedCost": 120}
                        ],
                    }
                ]
            }
        )
        scenes = [make_scene("INT. COFFEE SHOP", 20, number=1)]

        days = build_fallback_days(scenes, profile_locations(scenes, arc, breakdowns))

        assert days[0].location == "Bean There"
        assert days[0].venue.location_cost == 120


class TestPackGroup:
    def test_longest_first(self, make_scene):
        scenes = [make_scene("A", 10), make_scene("A", 300), make_scene("A", 250)]

        packed = pack_group(scenes, 540)

        assert [[s.duration for s in day] for day in packed] == [[300], [250, 10]]

"""Tests for scene aggregation."""

import pytest

from stripboard.exceptions import MissingBreakdownError, ValidationError
from stripboard.models import EpisodeBreakdown
from stripboard.scheduling import aggregate_scenes


class TestAggregateScenes:
    """Flattening breakdowns into one scene stream."""

    def test_request_order_and_sequential_indexes(self, make_breakdown):
        breakdowns = {
            1: make_breakdown(1, [("INT. A", 10, "DAY"), ("INT. B", 20, "DAY")]),
            2: make_breakdown(2, [("INT. C", 30, "NIGHT")]),
        }

        scenes = aggregate_scenes(breakdowns, [2, 1])

        assert [s.key for s in scenes] == [(2, 1), (1, 1), (1, 2)]
        assert [s.order_index for s in scenes] == [0, 1, 2]

    def test_missing_duration_uses_default(self, make_breakdown):
        breakdowns = {1: make_breakdown(1, [("INT. A", None, "DAY")])}

        scenes = aggregate_scenes(breakdowns, [1], default_duration=50)

        assert scenes[0].duration == 50

    def test_cast_and_title_carried(self, make_breakdown):
        breakdowns = {1: make_breakdown(1, [("INT. A", 10, "DAY")])}

        scene = aggregate_scenes(breakdowns, [1])[0]

        assert scene.cast == ("MAYA", "JONAH")
        assert scene.title == "Ep1 Scene 1"

    def test_blank_title_gets_scene_label(self):
        breakdowns = {
            3: EpisodeBreakdown.model_validate(
                {"scenes": [{"sceneNumber": 7, "location": "INT. A"}]}
            )
        }

        scene = aggregate_scenes(breakdowns, [3])[0]

        assert scene.title == "Scene 7"
        assert scene.episode_number == 3

    def test_missing_breakdowns_reported_together(self, make_breakdown):
        breakdowns = {
            1: make_breakdown(1, [("INT. A", 10, "DAY")]),
            2: EpisodeBreakdown(episode_number=2, scenes=[]),
        }

        with pytest.raises(MissingBreakdownError) as exc_info:
            aggregate_scenes(breakdowns, [1, 2, 3])

        assert exc_info.value.episode_numbers == [2, 3]
        assert "2, 3" in exc_info.value.message
        assert isinstance(exc_info.value, ValidationError)

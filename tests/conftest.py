"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest

from stripboard.config import StripboardSettings, reset_settings, set_settings
from stripboard.models import (
    BreakdownScene,
    EpisodeBreakdown,
    Scene,
    ScheduleRequest,
    TimeOfDay,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test with default settings and no ambient credentials.

    Config files and ``.env`` in the working directory would otherwise leak
    into the global settings.
    """
    for var in list(os.environ):
        if var.startswith("STRIPBOARD_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)

    reset_settings()
    set_settings(StripboardSettings(_env_file=None))
    yield
    reset_settings()


@pytest.fixture
def settings() -> StripboardSettings:
    return StripboardSettings(_env_file=None)


@pytest.fixture
def make_scene() -> Callable[..., Scene]:
    """Build aggregated scenes with sequential order indexes."""
    counter = {"index": 0}

    def _make(
        location: str = "INT. COFFEE SHOP",
        duration: int = 20,
        episode: int = 1,
        number: int | None = None,
        time_of_day: TimeOfDay = TimeOfDay.DAY,
        cast: tuple[str, ...] = (),
    ) -> Scene:
        index = counter["index"]
        counter["index"] += 1
        scene_number = number if number is not None else index + 1
        return Scene(
            episode_number=episode,
            scene_number=scene_number,
            title=f"Scene {scene_number}",
            location=location,
            time_of_day=time_of_day,
            duration=duration,
            cast=cast,
            order_index=index,
        )

    return _make


@pytest.fixture
def make_breakdown() -> Callable[..., EpisodeBreakdown]:
    """Build an episode breakdown from ``(location, minutes, time_of_day)`` rows."""

    def _make(
        episode: int,
        rows: list[tuple[str, int | None, str]],
        title: str = "",
    ) -> EpisodeBreakdown:
        return EpisodeBreakdown(
            episode_number=episode,
            episode_title=title,
            scenes=[
                BreakdownScene(
                    scene_number=number,
                    scene_title=f"Ep{episode} Scene {number}",
                    location=location,
                    time_of_day=time_of_day,
                    estimated_shoot_time=minutes,
                    characters=["MAYA", "JONAH"] if number % 2 else ["MAYA"],
                )
                for number, (location, minutes, time_of_day) in enumerate(rows, 1)
            ],
        )

    return _make


@pytest.fixture
def two_episode_request(make_breakdown) -> ScheduleRequest:
    """Two episodes sharing a coffee shop, each with one exterior."""
    return ScheduleRequest(
        episode_numbers=[1, 2],
        breakdowns={
            1: make_breakdown(
                1,
                [
                    ("INT. COFFEE SHOP", 30, "DAY"),
                    ("EXT. PARK", 20, "DAY"),
                    ("INT. COFFEE SHOP", 25, "DAY"),
                ],
                title="Pilot",
            ),
            2: make_breakdown(
                2,
                [
                    ("INT. COFFEE SHOP", 40, "DAY"),
                    ("EXT. PARK", 15, "NIGHT"),
                    ("INT. APARTMENT", None, "NIGHT"),
                ],
            ),
        },
    )


class FakeTextGenerator:
    """Text generator returning canned responses in order."""

    def __init__(self, *responses: str | BaseException) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "system": system,
                "prompt": prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        response = self.responses.pop(0) if self.responses else ""
        if isinstance(response, BaseException):
            raise response
        return response

    async def aclose(self) -> None:
        pass


@pytest.fixture
def fake_generator() -> Callable[..., FakeTextGenerator]:
    return FakeTextGenerator

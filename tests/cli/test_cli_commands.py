"""Tests for the stripboard command line interface."""

import json
import re

import pytest
import yaml
from typer.testing import CliRunner

from stripboard import __version__
from stripboard.cli.main import app

ANSI = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

REQUEST = {
    "episodeNumbers": [1, 2],
    "breakdowns": {
        "1": {
            "episodeTitle": "Pilot",
            "scenes": [
                {
                    "sceneNumber": 1,
                    "sceneTitle": "Opening",
                    "location": "INT. COFFEE SHOP",
                    "timeOfDay": "DAY",
                    "estimatedShootTime": 30,
                    "characters": [{"name": "MAYA"}],
                },
                {
                    "sceneNumber": 2,
                    "location": "EXT. PARK",
                    "timeOfDay": "NIGHT",
                    "estimatedShootTime": 20,
                },
            ],
        },
        "2": {
            "scenes": [
                {
                    "sceneNumber": 1,
                    "location": "INT. COFFEE SHOP",
                    "estimatedShootTime": "40",
                }
            ]
        },
    },
}


def clean(text: str) -> str:
    return ANSI.sub("", text)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(REQUEST))
    return path


class TestScheduleCommand:
    def test_offline_json(self, runner, request_file):
        result = runner.invoke(
            app, ["schedule", str(request_file), "--offline", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["schedulingMode"] == "cross-episode"
        assert data["totalShootDays"] == len(data["days"])
        assert data["fallbackBatches"] == [0]
        placed = sorted(
            (scene["episodeNumber"], scene["sceneNumber"])
            for day in data["days"]
            for scene in day["scenes"]
        )
        assert placed == [(1, 1), (1, 2), (2, 1)]

    def test_offline_table_and_output_file(self, runner, request_file, tmp_path):
        output = tmp_path / "schedule.json"

        result = runner.invoke(
            app,
            ["schedule", str(request_file), "--offline", "-e", "1", "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert "COFFEE" in clean(result.stdout)
        saved = json.loads(output.read_text())
        assert saved["episodeNumber"] == 1
        assert saved["schedulingMode"] == "single-episode"

    def test_yaml_request_and_markdown(self, runner, tmp_path):
        path = tmp_path / "request.yaml"
        path.write_text(yaml.safe_dump(REQUEST))

        result = runner.invoke(app, ["schedule", str(path), "--offline", "--markdown"])

        assert result.exit_code == 0, result.output
        assert "## Day 1: INT. COFFEE SHOP" in result.stdout

    def test_missing_breakdown_exits_nonzero(self, runner, request_file):
        result = runner.invoke(
            app, ["schedule", str(request_file), "--offline", "-e", "3", "--json"]
        )

        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert "episode(s): 3" in error["error"]

    def test_invalid_document(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["schedule", str(path), "--offline"])

        assert result.exit_code == 1
        assert "Validation Error" in clean(result.output)


class TestBatchesCommand:
    def test_json_preview(self, runner, request_file):
        result = runner.invoke(
            app, ["batches", str(request_file), "--max-scenes", "2", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["scene_count"] == 3
        assert data["day_cap_minutes"] == 540
        assert [loc["location"] for loc in data["locations"]] == [
            "INT. COFFEE SHOP",
            "EXT. PARK",
        ]
        assert [b["locations"] for b in data["batches"]] == [
            "INT. COFFEE SHOP",
            "EXT. PARK",
        ]

    def test_table(self, runner, request_file):
        result = runner.invoke(app, ["batches", str(request_file)])

        assert result.exit_code == 0, result.output
        assert "3 scenes" in clean(result.stdout)


class TestRehearseCommand:
    def test_requires_provider(self, runner, request_file, tmp_path):
        schedule_path = tmp_path / "schedule.json"
        runner.invoke(
            app,
            ["schedule", str(request_file), "--offline", "-o", str(schedule_path)],
        )

        result = runner.invoke(
            app, ["rehearse", str(schedule_path), str(request_file), "--json"]
        )

        assert result.exit_code == 1
        assert "No LLM provider" in json.loads(result.stdout)["error"]


class TestConfigAndVersion:
    def test_config_show_masks_secrets(self, runner, monkeypatch):
        monkeypatch.setenv("STRIPBOARD_LLM_API_KEY", "super-secret")
        from stripboard.config import clear_settings_cache

        clear_settings_cache()

        result = runner.invoke(app, ["config", "show", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["llm"]["llm_api_key"] == "********"
        assert data["scheduling"]["day_cap_minutes"] == 540
        assert "super-secret" not in result.stdout

    def test_version(self, runner):
        result = runner.invoke(app, ["version", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["version"] == __version__

    def test_global_config_option(self, runner, request_file, tmp_path):
        config = tmp_path / "run.yaml"
        config.write_text(yaml.safe_dump({"max_scenes_per_batch": 1}))

        result = runner.invoke(
            app, ["--config", str(config), "batches", str(request_file), "--json"]
        )

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)["batches"]) == 2

"""Smoke tests for the CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dreamlog.cli import app
from dreamlog.models import DreamEntry
from dreamlog.store import JsonEntryStore


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner(env={"NO_COLOR": "1", "FORCE_COLOR": None})


@pytest.fixture
def store_path(tmp_path: Path, monkeypatch) -> Path:
    """An isolated journal file, with no config picked up from the CWD."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("dreamlog.config.GLOBAL_CONFIG", tmp_path / "none.toml")
    for var in ("DREAMLOG_STORE_PATH", "DREAMLOG_STORE_KEY", "DREAMLOG_MONTHS"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "journal.json"


@pytest.fixture
def seeded_store(store_path: Path) -> Path:
    JsonEntryStore(store_path).save_all(
        [
            DreamEntry(id="100a", title="Sky", description="Flew high", date="2026-10-17T07:00:00",
                       mood="joyful", themes=["Flying", "Sky"], lucidity="fully-lucid"),
            DreamEntry(id="200b", title="Exam", description="Forgot everything", date="2026-10-16T07:00:00",
                       mood="scary", themes=["School", "flying"]),
            DreamEntry(id="300c", title="Beach", description="Waves", date="2026-09-01T07:00:00",
                       mood="peaceful", themes=["Beach"]),
        ]
    )
    return store_path


def _invoke(runner: CliRunner, store: Path, *args: str):
    return runner.invoke(app, ["--store", str(store), *args])


class TestCLI:
    def test_main_help(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "streak" in result.output

    def test_main_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "dreamlog" in result.output


class TestAddCommands:
    def test_add_then_list(self, runner, store_path):
        result = _invoke(runner, store_path, "add", "--title", "Falling", "--description", "Down a well",
                         "--theme", "Falling", "--theme", "Water", "--mood", "scary")
        assert result.exit_code == 0, result.output
        entries = JsonEntryStore(store_path).load_all()
        assert len(entries) == 1
        assert entries[0].themes == ["Falling", "Water"]
        assert entries[0].mood == "scary"

    def test_add_rejects_blank_description(self, runner, store_path):
        result = _invoke(runner, store_path, "add", "--title", "x", "--description", " ")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not store_path.exists()

    def test_add_rejects_unknown_lucidity(self, runner, store_path):
        result = _invoke(runner, store_path, "add", "-t", "x", "-d", "y", "--lucidity", "sort-of")
        assert result.exit_code == 1

    def test_tag_entry(self, runner, store_path):
        result = _invoke(runner, store_path, "tag", "Flying", "Water", "Forest", "--mood", "peaceful")
        assert result.exit_code == 0, result.output
        entry = JsonEntryStore(store_path).load_all()[0]
        assert entry.title == "Dream with Flying, Water, Forest"

    def test_tag_entry_needs_three_tags(self, runner, store_path):
        result = _invoke(runner, store_path, "tag", "Flying", "--mood", "joyful")
        assert result.exit_code == 1
        assert "at least 3 tags" in result.output


class TestReadCommands:
    def test_list_json_newest_first(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "list", "--format", "json")
        assert result.exit_code == 0, result.output
        assert [e["id"] for e in json.loads(result.output)] == ["100a", "200b", "300c"]

    def test_list_search(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "list", "--search", "FLY", "--format", "json")
        assert [e["id"] for e in json.loads(result.output)] == ["100a", "200b"]

    def test_list_empty(self, runner, store_path):
        result = _invoke(runner, store_path, "list")
        assert result.exit_code == 0
        assert "No Dreams Yet" in result.output

    def test_show(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "show", "200")
        assert result.exit_code == 0
        assert "Exam" in result.output
        assert "Dream Analysis" in result.output

    def test_show_unknown(self, runner, seeded_store):
        assert _invoke(runner, seeded_store, "show", "999").exit_code == 1

    def test_streak_json(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "streak", "--date", "2026-10-17", "--format", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["current_streak"] == 2
        assert [c["has_entry"] for c in data["week_view"]] == [False] * 5 + [True, True]

    def test_streak_table(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "streak", "--date", "2026-10-20")
        assert result.exit_code == 0
        assert "Current streak: 0" in result.output

    def test_streak_bad_date(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "streak", "--date", "17/10/2026")
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_stats_json(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "stats", "--date", "2026-10-17", "--format", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_entries"] == 3
        assert data["lucidity_rate"] == 33
        assert [b["count"] for b in data["monthly"]][-2:] == [1, 2]

    def test_stats_range(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "stats", "--date", "2026-10-17", "--range", "last-week",
                         "--format", "json")
        assert json.loads(result.output)["total_entries"] == 2

    def test_stats_bad_range(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "stats", "--range", "forever")
        assert result.exit_code == 1

    def test_stats_empty_state(self, runner, store_path):
        result = _invoke(runner, store_path, "stats")
        assert result.exit_code == 0
        assert "No Analytics Yet" in result.output

    def test_stats_table(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "stats", "--date", "2026-10-17")
        assert result.exit_code == 0
        assert "Mood Distribution" in result.output

    def test_themes_category(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "themes", "--category", "Actions", "--format", "json")
        assert json.loads(result.output) == [{"term": "Flying", "count": 2}]

    def test_themes_unknown_category(self, runner, seeded_store):
        result = _invoke(runner, seeded_store, "themes", "--category", "Colours")
        assert result.exit_code == 1
        assert "Unknown category" in result.output

    def test_cloud_is_deterministic(self, runner, seeded_store):
        first = _invoke(runner, seeded_store, "cloud")
        second = _invoke(runner, seeded_store, "cloud")
        assert first.exit_code == 0, first.output
        placements = json.loads(first.output)
        assert placements == json.loads(second.output)
        assert placements[0]["text"] == "Flying"

    def test_report(self, runner, seeded_store, tmp_path):
        out = tmp_path / "report.md"
        result = _invoke(runner, seeded_store, "report", "--output", str(out), "--date", "2026-10-17")
        assert result.exit_code == 0, result.output
        assert "# Dream Analytics" in out.read_text(encoding="utf-8")

    def test_bad_format(self, runner, seeded_store):
        assert _invoke(runner, seeded_store, "list", "--format", "xml").exit_code == 1

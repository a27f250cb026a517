"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from autoday.cli import main
from autoday.config import Config


@pytest.fixture
def run(tmp_path):
    """Invoke the CLI against a data dir under tmp_path."""
    runner = CliRunner()
    config = Config(data_dir=str(tmp_path / "data"), google_config_folder=str(tmp_path / "google"))

    def _run(*args: str):
        with patch("autoday.cli.load_config", return_value=config):
            return runner.invoke(main, list(args))

    return _run


@pytest.fixture
def day(run):
    run("settings", "set", "--date", "2025-01-15", "--start", "09:00", "--end", "12:00", "--buffer", "0")
    return run


def task_ids(run) -> list[str]:
    return [t["id"] for t in json.loads(run("task", "list", "--json").output)]


class TestTaskCommands:
    def test_add_and_list(self, day):
        result = day("task", "add", "Write report", "-d", "90", "-p", "high", "--no-split")

        assert result.exit_code == 0
        assert result.output.startswith("Added Write report (90 min)")

        listing = day("task", "list").output
        assert "[ ] Write report - 90 min, high, no split" in listing

    def test_list_empty(self, day):
        assert day("task", "list").output == "No tasks.\n"

    def test_add_invalid(self, day):
        result = day("task", "add", "Nap", "-d", "0")

        assert result.exit_code == 1
        assert "Error: Task duration must be a positive number of minutes" in result.output

    def test_edit_delete_done(self, day):
        day("task", "add", "Write report", "-d", "60")
        [task_id] = task_ids(day)

        assert day("task", "edit", task_id, "--title", "Report").exit_code == 0
        assert day("task", "done", task_id).output == "Completed Report\n"
        assert "[x] Report" in day("task", "list").output
        assert day("task", "delete", task_id).output == "Deleted Report\n"
        assert task_ids(day) == []

    def test_unknown_task(self, day):
        result = day("task", "delete", "missing")

        assert result.exit_code == 1
        assert "No task with id 'missing'" in result.output


class TestSettingsCommands:
    def test_show(self, day):
        day("settings", "set", "--break", "10:00-10:30", "--break-title", "Coffee")

        output = day("settings", "show").output
        assert "Day:       09:00-12:00" in output
        assert "Break:     10:00-10:30 (Coffee)" in output

    def test_show_json(self, day):
        data = json.loads(day("settings", "show", "--json").output)

        assert data["date"] == "2025-01-15"
        assert data["start"] == "09:00"
        assert data["break"] is None

    def test_invalid_window_rejected(self, day):
        result = day("settings", "set", "--end", "09:30")

        assert result.exit_code == 1
        assert result.output.startswith("Error:")
        assert json.loads(day("settings", "show", "--json").output)["end"] == "12:00"

    def test_no_break(self, day):
        day("settings", "set", "--break", "10:00-10:30")
        day("settings", "set", "--no-break")

        assert "Break:     none" in day("settings", "show").output


class TestScheduleCommands:
    def test_show_before_generate(self, day):
        result = day("show")

        assert result.exit_code == 1
        assert "No schedule yet" in result.output

    def test_generate_and_show(self, day):
        day("task", "add", "Write report", "-d", "60")
        day("task", "add", "Too big", "-d", "300", "--no-split")

        result = day("generate")

        assert result.exit_code == 0
        assert "09:00-10:00 Write report (task)" in result.output
        assert "- Too big (300 min left)" in result.output
        assert day("show").output == result.output

    def test_generate_json(self, day):
        day("task", "add", "Write report", "-d", "60")

        data = json.loads(day("generate", "--json").output)

        assert data["date"] == "2025-01-15"
        assert [(b["start"], b["end"]) for b in data["blocks"]] == [(540, 600)]

    def test_move(self, day):
        day("task", "add", "Write report", "-d", "60")
        day("generate")
        [task_id] = task_ids(day)

        result = day("move", f"{task_id}#1", "--to", "10:30")
        assert result.output == "Moved: 10:30-11:30 Write report\n"

        result = day("move", f"{task_id}#1", "--by", "-7")
        assert result.output == "Moved: 10:25-11:25 Write report\n"

    def test_move_overlap_reverted(self, day):
        day("settings", "set", "--break", "10:00-10:30")
        day("task", "add", "Write report", "-d", "60")
        day("generate")
        [task_id] = task_ids(day)

        result = day("move", f"{task_id}#1", "--to", "09:45")

        assert result.exit_code == 0
        assert result.output == "Not moved: Overlaps 'Break' (10:00-10:30)\n"

    def test_move_needs_one_target(self, day):
        result = day("move", "x#1")

        assert result.exit_code == 1
        assert "exactly one of --to or --by" in result.output

    def test_done_and_remove(self, day):
        day("task", "add", "Write report", "-d", "60")
        day("generate")
        [task_id] = task_ids(day)
        block_id = f"{task_id}#1"

        assert day("done", block_id).output == "Done: 09:00-10:00 Write report\n"
        assert day("remove", block_id).output == f"Removed {block_id}\n"
        assert day("remove", block_id).exit_code == 1

    def test_export(self, day, tmp_path):
        day("task", "add", "Write report", "-d", "60")
        day("generate")
        out = tmp_path / "day.ics"

        result = day("export", "-o", str(out))

        assert result.exit_code == 0
        assert b"SUMMARY:Write report\r\n" in out.read_bytes()


class TestGoogleCommands:
    def test_auth_without_client_secret(self, run):
        result = run("auth")

        assert result.exit_code == 1
        assert "GOOGLE_CLIENT_SECRET_FILE not set" in result.output

    def test_sync_without_token(self, run):
        result = run("sync")

        assert result.exit_code == 1
        assert "Run 'autoday auth' first" in result.output

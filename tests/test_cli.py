"""Tests for the `jarvis` command line."""

from __future__ import annotations

import json

import pytest

from jarvis import cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **kw: None)


@pytest.fixture()
def run(tmp_path, capsys):
    def _run(*argv: str) -> tuple[int, str, str]:
        code = cli.main(["--data-dir", str(tmp_path), *argv])
        captured = capsys.readouterr()
        return code, captured.out.strip(), captured.err.strip()

    return _run


def _add_read(run) -> None:
    code, out, _ = run("add", "Read", "--minutes", "30", "--target", "2099-12-31", "--priority", "high")
    assert code == 0
    assert out.startswith("✓ Goal added successfully! (Read, id ")


class TestGoals:
    def test_add_writes_goals_file(self, run, tmp_path):
        _add_read(run)
        stored = json.loads((tmp_path / "goals.json").read_text())
        assert stored[0]["description"] == "Read"
        assert stored[0]["metric"]["dailyMinutes"] == 30

    def test_add_weekly_without_day_fails(self, run, tmp_path):
        code, out, err = run("add", "Swim", "--frequency", "weekly", "--target", "2099-12-31")
        assert code == 1
        assert err.startswith("❌")
        assert not (tmp_path / "goals.json").exists()

    def test_goals_empty(self, run):
        code, out, _ = run("goals")
        assert code == 0
        assert out == "📊 No goals yet! Add one with: jarvis add"

    def test_goals_lists_progress(self, run):
        _add_read(run)
        _, out, _ = run("goals")
        assert "1. Read" in out
        assert "Progress: 0% | Streak: 0 🔥" in out

    def test_delete(self, run):
        _add_read(run)
        code, out, _ = run("delete", "1")
        assert code == 0
        assert out == "✓ Goal deleted: Read"
        assert run("goals")[1].startswith("📊 No goals yet!")

    def test_delete_bad_number(self, run):
        _add_read(run)
        code, _, err = run("delete", "3")
        assert code == 1
        assert "You have 1 goals" in err


class TestScheduleAndComplete:
    def test_schedule_without_goals(self, run):
        assert run("schedule")[1] == "No goals yet! Add one with: jarvis add"

    def test_schedule_then_complete(self, run):
        _add_read(run)
        _, out, _ = run("schedule")
        assert " 1 | " in out
        assert "Read" in out
        assert "HIGH" in out

        code, out, _ = run("complete", "1")
        assert code == 0
        assert out == "✓ Task completed: Read\nGoal progress updated!"
        assert run("schedule")[1] == "🎉 No tasks scheduled for today! All caught up!"

        _, out, _ = run("progress")
        assert "Completed: 1" in out
        assert "  • Read" in out

    def test_compact_schedule_hides_priority(self, run):
        _add_read(run)
        _, out, _ = run("schedule", "--compact")
        assert out.startswith("📋 TODAY'S SCHEDULE:")
        assert "HIGH" not in out

    def test_complete_without_number(self, run):
        _add_read(run)
        code, _, err = run("complete")
        assert code == 1
        assert err == "❌ Please specify a task number, e.g. complete 1"

    def test_complete_out_of_range(self, run):
        _add_read(run)
        code, _, err = run("complete", "2")
        assert code == 1
        assert err == "❌ Invalid task number. You have 1 tasks today."

    def test_insights_empty(self, run):
        assert run("insights")[1] == "No patterns detected yet. Keep tracking!"


class TestConfig:
    def test_show_defaults(self, run):
        _, out, _ = run("config")
        assert "Start Time: 09:00" in out
        assert "Available Hours: 8" in out
        assert "Fixed Blocks: 0" in out

    def test_start_time(self, run, tmp_path):
        assert run("config", "start-time", "07:30")[1] == "✓ Start time set to 07:30"
        assert json.loads((tmp_path / "config.json").read_text())["startTime"] == "07:30"

    def test_start_time_invalid(self, run, tmp_path):
        code, _, err = run("config", "start-time", "7am")
        assert code == 1
        assert "Invalid time format" in err
        assert not (tmp_path / "config.json").exists()

    @pytest.mark.parametrize("value", ["0", "25", "many"])
    def test_available_hours_invalid(self, run, value):
        assert run("config", "available-hours", value)[0] == 1

    def test_available_hours(self, run):
        assert run("config", "available-hours", "6")[1] == "✓ Available hours set to 6"

    def test_blocks(self, run):
        assert run("config", "add-block", "Lunch", "12:00", "13:00")[1] == "✓ Fixed block added: Lunch (12:00 - 13:00)"
        run("config", "add-block", "Review", "16:00", "16:30", "--weekly", "friday")
        run("config", "add-block", "Dentist", "15:00", "16:00", "--on", "2026-03-02")
        _, out, _ = run("config")
        assert "1. Lunch: 12:00 - 13:00 (Daily)" in out
        assert "2. Review: 16:00 - 16:30 (Every Friday)" in out
        assert "3. Dentist: 15:00 - 16:00 (On 2026-03-02)" in out

        assert run("config", "remove-block", "1")[1] == "✓ Fixed block removed: Lunch"
        assert "Fixed Blocks: 2" in run("config")[1]

    def test_block_end_before_start(self, run):
        code, _, err = run("config", "add-block", "Odd", "13:00", "12:00")
        assert code == 1
        assert err.startswith("❌")

    def test_bad_stored_block_can_be_removed_around(self, run, tmp_path):
        (tmp_path / "config.json").write_text(
            json.dumps(
                {
                    "fixedBlocks": [
                        {"name": "Lunch", "startTime": "12:00", "endTime": "13:00", "recurrence": "daily"},
                        {"name": "Oops", "startTime": "14:00", "endTime": "13:00", "recurring": True},
                    ]
                }
            )
        )
        code, out, _ = run("config")
        assert code == 0
        assert "Fixed Blocks: 1" in out
        assert run("config", "remove-block", "1") == (0, "✓ Fixed block removed: Lunch", "")

    def test_remove_missing_block(self, run):
        code, _, err = run("config", "remove-block", "1")
        assert code == 1
        assert err == "❌ No fixed block at position 1"


def test_prompted_goal():
    answers = iter(["Swim", "weekly", "Saturday", "", "2099-01-01", ""])
    data = cli._prompt_goal(lambda prompt: next(answers))
    assert data == {
        "description": "Swim",
        "frequency": "weekly",
        "weekDay": "Saturday",
        "dailyMinutes": 60,
        "targetDate": "2099-01-01",
        "priority": "medium",
    }

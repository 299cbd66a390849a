"""Tests for progress and streak recalculation."""

from datetime import date, datetime, timedelta

from jarvis.planner.eligibility import should_generate_task_today
from jarvis.planner.models import HistoryType
from jarvis.planner.progress import (
    Progress,
    apply_completion,
    apply_skip,
    calculate_progress,
    calculate_streak,
)
from tests.conftest import NOW, TODAY, make_goal


def _days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


class TestCalculateProgress:
    def test_one_time_incomplete(self):
        goal = make_goal(frequency="one-time", target_date=_days_ago(1))
        assert calculate_progress(goal, TODAY) == Progress(progress_percentage=0, expected_completions=1)

    def test_one_time_complete(self):
        goal = make_goal(frequency="one-time", target_date=_days_ago(1), completed=1)
        assert calculate_progress(goal, TODAY) == Progress(progress_percentage=100, expected_completions=1)

    def test_daily_expected_is_days_since_created(self):
        goal = make_goal(created_date=_days_ago(15), completed=3)
        assert calculate_progress(goal, TODAY) == Progress(progress_percentage=20, expected_completions=15)

    def test_daily_rounds_half_up(self):
        goal = make_goal(created_date=_days_ago(8), completed=1)
        assert calculate_progress(goal, TODAY).progress_percentage == 13

    def test_daily_created_today_expects_one(self):
        goal = make_goal(created_date=TODAY, completed=2)
        progress = calculate_progress(goal, TODAY)
        assert progress.expected_completions == 1
        assert progress.progress_percentage == 100

    def test_weekly_expected_is_whole_weeks(self):
        goal = make_goal(frequency="weekly", week_day="Monday", created_date=_days_ago(28), completed=3)
        assert calculate_progress(goal, TODAY) == Progress(progress_percentage=75, expected_completions=4)

    def test_weekly_under_a_week_expects_one(self):
        goal = make_goal(frequency="weekly", week_day="Monday", created_date=_days_ago(6), completed=0)
        assert calculate_progress(goal, TODAY) == Progress(progress_percentage=0, expected_completions=1)


class TestCalculateStreak:
    def test_one_time_always_zero(self):
        goal = make_goal(frequency="one-time", target_date=_days_ago(1), last_completed=_days_ago(1), streak=4)
        assert calculate_streak(goal, TODAY) == 0

    def test_first_completion(self):
        assert calculate_streak(make_goal(streak=0), TODAY) == 1

    def test_daily_consecutive_day_continues(self):
        goal = make_goal(streak=4, last_completed=_days_ago(1))
        assert calculate_streak(goal, TODAY) == 5

    def test_daily_two_days_resets(self):
        goal = make_goal(streak=4, last_completed=_days_ago(2))
        assert calculate_streak(goal, TODAY) == 1

    def test_daily_same_day_continues(self):
        goal = make_goal(streak=2, last_completed=TODAY)
        assert calculate_streak(goal, TODAY) == 3

    def test_weekly_one_week_continues(self):
        goal = make_goal(frequency="weekly", week_day="Monday", streak=2, last_completed=_days_ago(7))
        assert calculate_streak(goal, TODAY) == 3

    def test_weekly_grace_period(self):
        goal = make_goal(frequency="weekly", week_day="Monday", streak=2, last_completed=_days_ago(13))
        assert calculate_streak(goal, TODAY) == 3

    def test_weekly_two_weeks_resets(self):
        goal = make_goal(frequency="weekly", week_day="Monday", streak=2, last_completed=_days_ago(14))
        assert calculate_streak(goal, TODAY) == 1

    def test_three_day_sequence_with_gap(self):
        day1 = date(2026, 2, 10)
        goal = apply_completion(make_goal(created_date=date(2026, 2, 1)), day1, datetime(2026, 2, 10, 9))
        assert goal.metric.streak == 1
        # day 2 missed, day 3 completed: two days since the last completion
        goal = apply_completion(goal, day1 + timedelta(days=2), datetime(2026, 2, 12, 9))
        assert goal.metric.streak == 1


class TestApplyCompletion:
    def test_updates_metric(self):
        goal = make_goal(created_date=_days_ago(8), completed=2, streak=2, last_completed=_days_ago(1))
        updated = apply_completion(goal, TODAY, NOW, score=75, reason="Tired")

        m = updated.metric
        assert m.completed == 3
        assert m.last_completed == TODAY
        assert m.streak == 3
        assert m.expected_completions == 8
        assert m.progress_percentage == 38  # 37.5 rounds up
        assert len(updated.history) == 1
        entry = updated.history[0]
        assert entry.type == HistoryType.completion
        assert entry.day == TODAY
        assert entry.score == 75
        assert entry.reason == "Tired"

    def test_input_goal_untouched(self):
        goal = make_goal(completed=1)
        apply_completion(goal, TODAY, NOW)
        assert goal.metric.completed == 1
        assert goal.history == []

    def test_one_time_scenario(self):
        goal = make_goal(frequency="one-time", target_date=_days_ago(1))
        assert should_generate_task_today(goal, TODAY)

        updated = apply_completion(goal, TODAY, NOW)
        assert updated.metric.progress_percentage == 100
        assert updated.metric.expected_completions == 1
        assert updated.metric.streak == 0
        assert not should_generate_task_today(updated, TODAY)

    def test_completed_strictly_increases_and_progress_holds(self):
        goal = make_goal(created_date=_days_ago(10), completed=4, progress_percentage=40, last_completed=_days_ago(1))
        updated = apply_completion(goal, TODAY, NOW)
        assert updated.metric.completed == goal.metric.completed + 1
        assert updated.metric.progress_percentage >= goal.metric.progress_percentage

    def test_same_day_repeat_blocked_by_eligibility(self):
        updated = apply_completion(make_goal(), TODAY, NOW)
        assert not should_generate_task_today(updated, TODAY)


class TestApplySkip:
    def test_records_history_only(self):
        goal = make_goal(completed=2, streak=2, last_completed=_days_ago(1))
        skipped = apply_skip(goal, TODAY, NOW, reason="Sick")
        assert skipped.metric == goal.metric
        assert [h.type for h in skipped.history] == [HistoryType.skip]
        assert skipped.history[0].reason == "Sick"
        assert skipped.history[0].score is None

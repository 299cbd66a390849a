"""Progress and streak recalculation on task completion.

Pure functions over Goal models. `apply_completion` / `apply_skip` return new
Goal instances; persisting them is the caller's job.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime

from jarvis.planner.models import Frequency, Goal, HistoryEntry, HistoryType


@dataclass(frozen=True, slots=True)
class Progress:
    progress_percentage: int
    expected_completions: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_progress(goal: Goal, day: date) -> Progress:
    """Percentage of expected completions achieved, capped at 100.

    One-time goals are either 0% or 100%. Recurring goals expect one
    completion per elapsed day (daily) or week (weekly), never fewer than one.
    """
    if goal.frequency == Frequency.one_time:
        return Progress(
            progress_percentage=100 if goal.metric.completed > 0 else 0,
            expected_completions=1,
        )

    days_since_created = (day - goal.created_date).days
    if goal.frequency == Frequency.weekly:
        expected = max(1, days_since_created // 7)
    else:
        expected = max(1, days_since_created)

    percentage = _round_half_up(100 * goal.metric.completed / expected)
    return Progress(progress_percentage=min(percentage, 100), expected_completions=expected)


def calculate_streak(goal: Goal, day: date) -> int:
    """Streak after completing `goal` on `day`.

    One missed period is tolerated: a daily goal continues when the previous
    completion was at most 1 day ago, a weekly goal when at most 1 whole week
    ago. Otherwise the streak restarts at 1.
    """
    if goal.frequency == Frequency.one_time:
        return 0

    last = goal.metric.last_completed
    if last is None:
        return 1

    days_since = (day - last).days

    if goal.frequency == Frequency.daily:
        return goal.metric.streak + 1 if days_since <= 1 else 1

    if goal.frequency == Frequency.weekly:
        return goal.metric.streak + 1 if days_since // 7 <= 1 else 1

    return 1


def apply_completion(
    goal: Goal,
    day: date,
    now: datetime,
    score: int | None = None,
    reason: str | None = None,
) -> Goal:
    """Return `goal` with one more completion recorded on `day`."""
    streak = calculate_streak(goal, day)

    metric = goal.metric.model_copy(update={"completed": goal.metric.completed + 1})
    progress = calculate_progress(goal.model_copy(update={"metric": metric}), day)
    metric = metric.model_copy(
        update={
            "last_completed": day,
            "streak": streak,
            "progress_percentage": progress.progress_percentage,
            "expected_completions": progress.expected_completions,
        }
    )

    entry = HistoryEntry(type=HistoryType.completion, day=day, timestamp=now, score=score, reason=reason)
    return goal.model_copy(update={"metric": metric, "history": [*goal.history, entry]})


def apply_skip(goal: Goal, day: date, now: datetime, reason: str | None = None) -> Goal:
    """Return `goal` with a skip recorded. Progress and streak are untouched."""
    entry = HistoryEntry(type=HistoryType.skip, day=day, timestamp=now, reason=reason)
    return goal.model_copy(update={"history": [*goal.history, entry]})

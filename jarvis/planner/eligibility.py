"""Decide whether a goal produces a task on a given day."""

from __future__ import annotations

from datetime import date

from jarvis.planner.models import Frequency, Goal, weekday_name


def should_generate_task_today(goal: Goal, day: date) -> bool:
    """True when `goal` should be scheduled on `day`.

    Already completed on `day` -> never. Daily goals run until their target
    date (inclusive), weekly goals on their week day until the target date,
    one-time goals from their target date on.

    A one-time goal completed on an earlier day is eligible again; only a
    same-day completion hides it.
    """
    if goal.metric.last_completed == day:
        return False

    if goal.frequency == Frequency.daily:
        return day <= goal.target_date
    if goal.frequency == Frequency.weekly:
        return goal.week_day == weekday_name(day) and day <= goal.target_date
    if goal.frequency == Frequency.one_time:
        return day >= goal.target_date
    return False


def eligible_goals(goals: list[Goal], day: date) -> list[Goal]:
    return [g for g in goals if should_generate_task_today(g, day)]

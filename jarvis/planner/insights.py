"""Daily progress summary and history-based insights - pure, never raises."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from typing import Sequence

from jarvis.planner.models import Goal, HistoryType

MIN_SKIPS_FOR_INSIGHT = 2
MIN_COMPLETIONS_FOR_INSIGHT = 3
CONSISTENT_HOUR_SPREAD = 2
STREAK_HIGHLIGHT_THRESHOLD = 3


def daily_progress(goals: Sequence[Goal], day: date) -> dict:
    """Completed-today vs remaining counts across all goals."""
    done = [g for g in goals if g.metric.last_completed == day]
    return {
        "date": day.isoformat(),
        "completed": len(done),
        "remaining": len(goals) - len(done),
        "completedToday": [g.description for g in done],
    }


def _hour_label(hour: int) -> str:
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12} {suffix}"


def _local_hour(ts: datetime) -> int:
    # Aware timestamps (e.g. "...Z" from the dashboard) are read in host local time.
    return ts.astimezone().hour if ts.tzinfo is not None else ts.hour


def skip_insight(goal: Goal) -> str | None:
    skips = [h for h in goal.history if h.type == HistoryType.skip]
    if len(skips) < MIN_SKIPS_FOR_INSIGHT:
        return None
    reasons = Counter(s.reason or "No reason given" for s in skips)
    top_reason, _ = reasons.most_common(1)[0]
    return f'You\'ve skipped "{goal.description}" {len(skips)} times recently. Main reason: "{top_reason}"'


def timing_insight(goal: Goal) -> str | None:
    completions = [h for h in goal.history if h.type == HistoryType.completion]
    if len(completions) < MIN_COMPLETIONS_FOR_INSIGHT:
        return None
    hours = [_local_hour(c.timestamp) for c in completions]
    avg_hour = int(sum(hours) / len(hours) + 0.5)
    if all(abs(h - avg_hour) <= CONSISTENT_HOUR_SPREAD for h in hours):
        return f'You consistently crush "{goal.description}" around {_hour_label(avg_hour)}.'
    return None


def streak_insight(goals: Sequence[Goal]) -> str | None:
    if not goals:
        return None
    top = max(goals, key=lambda g: g.metric.streak)
    if top.metric.streak > STREAK_HIGHLIGHT_THRESHOLD:
        return f"{top.description} is on fire! {top.metric.streak} day streak."
    return None


def generate_insights(goals: Sequence[Goal]) -> list[str]:
    """Skip patterns first, then consistent completion times, then the top streak."""
    insights: list[str] = []
    for goal in goals:
        msg = skip_insight(goal)
        if msg:
            insights.append(msg)
    for goal in goals:
        msg = timing_insight(goal)
        if msg:
            insights.append(msg)
    msg = streak_insight(goals)
    if msg:
        insights.append(msg)
    return insights

"""Plain-text renderers for the CLI and the REPL.

Each function returns a string; printing is left to the caller.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from jarvis.planner.models import Frequency, Goal, PlannerConfig, Recurrence, Schedule, weekday_name
from jarvis.planner.timeutils import format_duration

RULE_WIDTH = 70
HEADER_WIDTH = 43


def format_long_date(day: date) -> str:
    """2026-10-18 -> "Sunday, October 18, 2026" (English, locale independent)."""
    months = (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    )
    return f"{weekday_name(day)}, {months[day.month - 1]} {day.day}, {day.year}"


def render_header(day: date) -> str:
    bar = "═" * HEADER_WIDTH
    return "\n".join(
        [
            f"╔{bar}╗",
            f"║{'JARVIS - Goal Architect'.center(HEADER_WIDTH)}║",
            f"║{format_long_date(day).center(HEADER_WIDTH)}║",
            f"╚{bar}╝",
        ]
    )


def render_schedule(schedule: Schedule, compact: bool = False) -> str:
    """Timeline table. Completable tasks are numbered from 1; fixed blocks get a lock."""
    if not any(not t.is_fixed for t in schedule.tasks):
        return "🎉 No tasks scheduled for today! All caught up!"

    lines: list[str] = []
    if compact:
        lines.append("📋 TODAY'S SCHEDULE:")
    else:
        lines.append(f"TODAY'S SCHEDULE - {format_long_date(schedule.day)}")
        lines.append(f"Start: {schedule.start_time} | End: {schedule.end_time}")

    if schedule.overcommitted:
        needed = schedule.total_minutes / 60
        available = schedule.available_minutes / 60
        lines.append(f"⚠️  WARNING: {needed:.1f}h of tasks, only {available:.1f}h available!")

    lines.append("=" * RULE_WIDTH)
    number = 1
    for entry in schedule.tasks:
        span = f"{entry.start_time} - {entry.end_time}".ljust(20)
        desc = entry.description.ljust(30)
        duration = format_duration(entry.duration)
        if entry.is_fixed:
            lines.append(f" 🔒| {span} | {desc} | [{duration}]")
            continue
        priority = "" if compact or entry.priority is None else f" | {entry.priority.value.upper()}"
        lines.append(f" {number} | {span} | {desc} | [{duration}]{priority}")
        number += 1
    lines.append("=" * RULE_WIDTH)

    if compact:
        lines.append(f"End time: {schedule.end_time}")
    return "\n".join(lines)


def render_goals(goals: Sequence[Goal], compact: bool = False) -> str:
    if not goals:
        return "📊 No goals yet! Add one with: jarvis add"

    lines = ["=== YOUR GOALS ===", ""]
    for i, goal in enumerate(goals, start=1):
        lines.append(f"{i}. {goal.description}")
        if compact:
            freq = "once" if goal.frequency == Frequency.one_time else goal.frequency.value
            lines.append(f"   {freq} | Priority: {goal.priority.value}")
        else:
            lines.append(f"   Frequency: {goal.frequency.value}")
            if goal.week_day:
                lines.append(f"   Day: {goal.week_day}")
            lines.append(f"   Priority: {goal.priority.value}")
            lines.append(f"   Target: {goal.target_date.isoformat()}")
            lines.append(f"   Daily minutes: {goal.metric.daily_minutes}")

        m = goal.metric
        if goal.frequency == Frequency.one_time:
            lines.append(f"   Status: {'✓ Complete' if m.completed > 0 else '○ Incomplete'}")
        else:
            lines.append(f"   Progress: {m.progress_percentage}% | Streak: {m.streak} 🔥")
            if not compact:
                lines.append(f"   Completions: {m.completed}/{m.expected_completions} expected")
        lines.append("")
    return "\n".join(lines).rstrip()


def render_progress(summary: dict) -> str:
    lines = [
        "📈 TODAY'S PROGRESS:",
        "",
        f"Completed: {summary['completed']}",
        f"Remaining: {summary['remaining']}",
    ]
    done = summary.get("completedToday") or []
    if done:
        lines.append("")
        lines.append("✓ Completed Today:")
        lines.extend(f"  • {desc}" for desc in done)
    return "\n".join(lines)


def render_insights(insights: Sequence[str]) -> str:
    if not insights:
        return "No patterns detected yet. Keep tracking!"
    return "\n".join(["💡 INSIGHTS:", ""] + [f"  • {msg}" for msg in insights])


def _recurrence_label(block) -> str:
    if block.recurrence == Recurrence.weekly:
        return f"(Every {block.week_day})"
    if block.recurrence == Recurrence.one_time:
        return f"(On {block.on_date.isoformat()})"
    return "(Daily)"


def render_config(config: PlannerConfig) -> str:
    lines = [
        "=== JARVIS CONFIG ===",
        "",
        f"Start Time: {config.start_time}",
        f"Available Hours: {config.available_hours}",
        "",
        f"Fixed Blocks: {len(config.fixed_blocks)}",
    ]
    for i, block in enumerate(config.fixed_blocks, start=1):
        lines.append(f"  {i}. {block.name}: {block.start_time} - {block.end_time} {_recurrence_label(block)}")
    return "\n".join(lines)


INTERACTIVE_HELP = """\
COMMANDS
 c <N> / complete <N>  Complete task number N
 s / schedule          Show today's schedule
 g / goals             List all goals
 p / progress          Show today's progress
 h / help              Show this help
 q / quit              Exit Jarvis"""

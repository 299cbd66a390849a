"""Daily schedule generator.

Walks a time cursor forward from the configured start time, placing eligible
goals in priority order and splitting a goal around any fixed block it would
run into. A 10-minute buffer follows every task part that finishes a goal;
nothing follows a fixed block.

Pure: reads goals and config, returns a Schedule, never raises on valid input.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from jarvis.planner.blocks import BlockInterval, select_blocks_for_day
from jarvis.planner.eligibility import eligible_goals
from jarvis.planner.models import (
    PRIORITY_RANK,
    Goal,
    PlannerConfig,
    Schedule,
    ScheduleEntry,
)
from jarvis.planner.timeutils import format_time, time_to_minutes

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_MINUTES = 10


def order_goals(goals: Sequence[Goal]) -> list[Goal]:
    """High priority first, then longest first. Stable for exact ties."""
    return sorted(goals, key=lambda g: (-PRIORITY_RANK[g.priority], -g.metric.daily_minutes))


def _task_entry(goal: Goal, start: int, end: int, part: int) -> ScheduleEntry:
    description = goal.description if part == 1 else f"{goal.description} (Part {part})"
    return ScheduleEntry(
        goal_id=goal.id,
        description=description,
        start_time=format_time(start),
        end_time=format_time(end),
        start_minutes=start,
        end_minutes=end,
        duration=end - start,
        priority=goal.priority,
    )


def _block_entry(block: BlockInterval, start: int) -> ScheduleEntry:
    return ScheduleEntry(
        description=block.name,
        start_time=format_time(start),
        end_time=format_time(block.end),
        start_minutes=start,
        end_minutes=block.end,
        duration=block.end - start,
        is_fixed=True,
    )


def _first_overlap(blocks: Sequence[BlockInterval], cursor: int, proposed_end: int) -> BlockInterval | None:
    # A task ending exactly where a block starts still counts as touching it.
    for block in blocks:
        if cursor < block.end and proposed_end >= block.start:
            return block
    return None


def generate_schedule(
    goals: Sequence[Goal],
    config: PlannerConfig,
    day: date,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> Schedule:
    """Build the ordered timeline for `day`.

    Every task part is appended in cursor order. The duration of all parts of
    one goal always adds up to its dailyMinutes; only the second and later
    parts are labelled "(Part N)".
    """
    start = time_to_minutes(config.start_time)
    blocks = select_blocks_for_day(config.fixed_blocks, day)

    cursor = start
    entries: list[ScheduleEntry] = []
    total_minutes = 0
    trailing_buffer = 0
    last_end: int | None = None

    for goal in order_goals(eligible_goals(list(goals), day)):
        remaining = goal.metric.daily_minutes
        part = 1

        while remaining > 0:
            block = _first_overlap(blocks, cursor, cursor + remaining)

            if block is not None:
                before = block.start - cursor
                if before > 0:
                    entries.append(_task_entry(goal, cursor, block.start, part))
                    total_minutes += before
                    remaining -= before
                    part += 1
                    last_end = block.start

                # Overlapping blocks in the config: clip so entries never overlap.
                block_start = block.start if last_end is None else max(block.start, last_end)
                entries.append(_block_entry(block, block_start))
                cursor = block.end
                last_end = block.end
                trailing_buffer = 0
            else:
                entries.append(_task_entry(goal, cursor, cursor + remaining, part))
                total_minutes += remaining
                last_end = cursor + remaining
                cursor += remaining + buffer_minutes
                trailing_buffer = buffer_minutes
                remaining = 0

    entries.sort(key=lambda e: e.start_minutes)

    available_minutes = config.available_hours * 60
    end = cursor - trailing_buffer
    logger.debug(
        "schedule for %s: %d entries, %d/%d minutes",
        day.isoformat(),
        len(entries),
        total_minutes,
        available_minutes,
    )
    return Schedule(
        day=day,
        tasks=entries,
        start_time=format_time(start),
        end_time=format_time(end),
        total_minutes=total_minutes,
        available_minutes=available_minutes,
        overcommitted=total_minutes > available_minutes,
    )

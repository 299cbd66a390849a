"""Fixed-block selection: which configured blocks apply on a given day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from jarvis.planner.models import FixedBlock, Recurrence, upgrade_legacy_block, weekday_name
from jarvis.planner.timeutils import time_to_minutes


@dataclass(frozen=True, slots=True)
class BlockInterval:
    name: str
    start: int  # minutes since midnight
    end: int


def normalize_block(raw: Any) -> FixedBlock | None:
    """Build a canonical FixedBlock from stored data, upgrading legacy shapes.

    Legacy ``recurring: false`` blocks carry no date and are dropped (None).
    Raises pydantic.ValidationError for blocks that are invalid in any shape.
    """
    upgraded = upgrade_legacy_block(raw)
    if upgraded is None:
        return None
    return FixedBlock.model_validate(upgraded)


def is_active_on(block: FixedBlock, day: date) -> bool:
    if block.recurrence == Recurrence.daily:
        return True
    if block.recurrence == Recurrence.weekly:
        return block.week_day == weekday_name(day)
    if block.recurrence == Recurrence.one_time:
        return block.on_date == day
    return False


def select_blocks_for_day(blocks: Iterable[FixedBlock], day: date) -> list[BlockInterval]:
    """Blocks active on `day` as minute intervals, sorted by start."""
    active = [
        BlockInterval(
            name=b.name,
            start=time_to_minutes(b.start_time),
            end=time_to_minutes(b.end_time),
        )
        for b in blocks
        if is_active_on(b, day)
    ]
    active.sort(key=lambda b: b.start)
    return active

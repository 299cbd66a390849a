"""Planner data contract - Pydantic v2 models.

Field names are snake_case in Python and camelCase on the wire, so the JSON
files and the HTTP API keep the shape the dashboard reads
(``dailyMinutes``, ``lastCompleted``, ``isFixed``...).
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from jarvis.planner.timeutils import is_valid_time, time_to_minutes

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_name(day: date) -> str:
    """English weekday name, independent of the host locale."""
    return WEEKDAYS[day.weekday()]


def _check_weekday(value: str | None) -> str | None:
    if value is None:
        return None
    name = value.strip().title()
    if name not in WEEKDAYS:
        raise ValueError(f"Unknown week day {value!r}; expected one of {', '.join(WEEKDAYS)}")
    return name


def _lower(value: Any) -> Any:
    """Enum values are stored lower-case; accept "High", " Daily " and the like."""
    return value.strip().lower() if isinstance(value, str) else value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Frequency(str, Enum):
    daily = "daily"
    weekly = "weekly"
    one_time = "one-time"


class Recurrence(str, Enum):
    daily = "daily"
    weekly = "weekly"
    one_time = "one-time"


class Priority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


PRIORITY_RANK: dict[Priority, int] = {Priority.high: 3, Priority.medium: 2, Priority.low: 1}


class HistoryType(str, Enum):
    completion = "COMPLETION"
    skip = "SKIP"


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


class HistoryEntry(CamelModel):
    type: HistoryType
    day: date = Field(alias="date")
    timestamp: datetime
    score: int | None = Field(default=None, ge=0, le=100)
    reason: str | None = None


class Metric(CamelModel):
    daily_minutes: int = Field(gt=0)
    completed: int = Field(default=0, ge=0)
    expected_completions: int = Field(default=0, ge=0)
    progress_percentage: int = Field(default=0, ge=0, le=100)
    streak: int = Field(default=0, ge=0)
    last_completed: date | None = None


class Goal(CamelModel):
    id: int
    description: str = Field(min_length=1)
    frequency: Frequency
    week_day: str | None = None
    target_date: date
    priority: Priority = Priority.medium
    created_date: date
    metric: Metric
    history: list[HistoryEntry] = Field(default_factory=list)

    @field_validator("frequency", "priority", mode="before")
    @classmethod
    def _lower_enums(cls, value: Any) -> Any:
        return _lower(value)

    @field_validator("week_day")
    @classmethod
    def _normalize_week_day(cls, value: str | None) -> str | None:
        return _check_weekday(value)

    @model_validator(mode="after")
    def _week_day_matches_frequency(self) -> "Goal":
        if self.frequency == Frequency.weekly:
            if self.week_day is None:
                raise ValueError("weekly goals need a weekDay")
        else:
            self.week_day = None
        return self


class GoalCreate(CamelModel):
    """Payload for creating a goal; ids and metrics are assigned by the service."""

    description: str = Field(min_length=1)
    frequency: Frequency = Frequency.daily
    week_day: str | None = None
    target_date: date
    priority: Priority = Priority.medium
    daily_minutes: int = Field(default=60, gt=0)

    @field_validator("frequency", "priority", mode="before")
    @classmethod
    def _lower_enums(cls, value: Any) -> Any:
        return _lower(value)

    @field_validator("week_day")
    @classmethod
    def _normalize_week_day(cls, value: str | None) -> str | None:
        return _check_weekday(value)

    @model_validator(mode="after")
    def _week_day_required(self) -> "GoalCreate":
        if self.frequency == Frequency.weekly and self.week_day is None:
            raise ValueError("weekly goals need a weekDay")
        return self


class CompleteRequest(CamelModel):
    score: int | None = Field(default=None, ge=0, le=100)
    reason: str | None = None


class SkipRequest(CamelModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class FixedBlock(CamelModel):
    name: str = Field(min_length=1)
    start_time: str
    end_time: str
    recurrence: Recurrence = Recurrence.daily
    week_day: str | None = None
    on_date: date | None = Field(default=None, alias="date")

    @field_validator("recurrence", mode="before")
    @classmethod
    def _lower_recurrence(cls, value: Any) -> Any:
        return _lower(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError(f"Invalid time {value!r}: use HH:MM (24-hour)")
        return value

    @field_validator("week_day")
    @classmethod
    def _normalize_week_day(cls, value: str | None) -> str | None:
        return _check_weekday(value)

    @model_validator(mode="after")
    def _check_shape(self) -> "FixedBlock":
        if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
            raise ValueError(f"Block {self.name!r} must start before it ends")
        if self.recurrence == Recurrence.weekly:
            if self.week_day is None:
                raise ValueError(f"Weekly block {self.name!r} needs a weekDay")
            if self.on_date is not None:
                raise ValueError(f"Weekly block {self.name!r} cannot carry a date")
        elif self.recurrence == Recurrence.one_time:
            if self.on_date is None:
                raise ValueError(f"One-time block {self.name!r} needs a date")
            if self.week_day is not None:
                raise ValueError(f"One-time block {self.name!r} cannot carry a weekDay")
        elif self.week_day is not None or self.on_date is not None:
            raise ValueError(f"Daily block {self.name!r} takes neither weekDay nor date")
        return self


def upgrade_legacy_block(raw: Any) -> Any:
    """Map the old ``recurring: bool`` block shape onto ``recurrence``.

    Returns None for legacy blocks that can no longer be placed (non-recurring
    blocks were stored without a date). Anything that already has a
    ``recurrence`` is passed through untouched.
    """
    if not isinstance(raw, dict) or "recurrence" in raw or "recurring" not in raw:
        return raw
    upgraded = {k: v for k, v in raw.items() if k != "recurring"}
    if raw.get("recurring") is True:
        upgraded["recurrence"] = Recurrence.daily.value
        return upgraded
    logger.warning("dropping legacy one-time block %r: it has no date", raw.get("name"))
    return None


class PlannerConfig(CamelModel):
    start_time: str = "09:00"
    available_hours: int = Field(default=8, ge=1, le=24)
    fixed_blocks: list[FixedBlock] = Field(default_factory=list)

    @field_validator("start_time")
    @classmethod
    def _valid_start(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError(f"Invalid start time {value!r}: use HH:MM (24-hour)")
        return value

    @field_validator("fixed_blocks", mode="before")
    @classmethod
    def _coerce_blocks(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        blocks: list[FixedBlock] = []
        for raw in value:
            if isinstance(raw, FixedBlock):
                blocks.append(raw)
                continue
            upgraded = upgrade_legacy_block(raw)
            if upgraded is None:
                continue
            try:
                blocks.append(FixedBlock.model_validate(upgraded))
            except PydanticValidationError as exc:
                name = upgraded.get("name") if isinstance(upgraded, dict) else None
                logger.warning("dropping invalid fixed block %r: %s", name, exc.errors()[0]["msg"])
        return blocks


# ---------------------------------------------------------------------------
# Schedule (derived, never persisted)
# ---------------------------------------------------------------------------


class ScheduleEntry(CamelModel):
    goal_id: int | None = None
    description: str
    start_time: str
    end_time: str
    start_minutes: int
    end_minutes: int
    duration: int
    priority: Priority | None = None
    is_fixed: bool = False


class Schedule(CamelModel):
    day: date = Field(alias="date")
    tasks: list[ScheduleEntry] = Field(default_factory=list)
    start_time: str
    end_time: str
    total_minutes: int = 0
    available_minutes: int = 0
    overcommitted: bool = False

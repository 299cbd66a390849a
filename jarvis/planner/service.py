"""Planner use cases over the goal and config repositories.

Each mutating call is one whole-snapshot read-modify-write. Input is
validated before anything is written, so a rejected call leaves the stored
state unchanged.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jarvis.planner import insights, progress
from jarvis.planner.errors import NotFoundError, ValidationError
from jarvis.planner.models import (
    FixedBlock,
    Goal,
    GoalCreate,
    Metric,
    PlannerConfig,
    Recurrence,
    Schedule,
)
from jarvis.planner.scheduler import DEFAULT_BUFFER_MINUTES, generate_schedule
from jarvis.planner.timeutils import is_valid_time
from jarvis.store import ConfigRepository, GoalRepository

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _describe(err: dict) -> str:
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}" if field else err["msg"]


def _validated(model: type[M], data: Any) -> M:
    """Validate `data` as `model`, turning pydantic errors into ValidationError."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        details = "; ".join(_describe(err) for err in exc.errors())
        raise ValidationError(details) from exc


class PlannerService:
    def __init__(
        self,
        goals: GoalRepository,
        config: ConfigRepository,
        clock: Callable[[], datetime] = datetime.now,
        buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
    ):
        self.goals = goals
        self.config = config
        self.clock = clock
        self.buffer_minutes = buffer_minutes

    def today(self) -> date:
        return self.clock().date()

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def list_goals(self) -> list[Goal]:
        return self.goals.load_all()

    def get_goal(self, goal_id: int) -> Goal:
        for goal in self.goals.load_all():
            if goal.id == goal_id:
                return goal
        raise NotFoundError(f"Goal {goal_id} not found")

    def add_goal(self, payload: GoalCreate | dict) -> Goal:
        data = _validated(GoalCreate, payload)
        now = self.clock()
        goals = self.goals.load_all()

        # Millisecond timestamp ids, bumped past any existing id.
        new_id = int(now.timestamp() * 1000)
        if goals:
            new_id = max(new_id, max(g.id for g in goals) + 1)

        goal = Goal(
            id=new_id,
            description=data.description,
            frequency=data.frequency,
            week_day=data.week_day,
            target_date=data.target_date,
            priority=data.priority,
            created_date=now.date(),
            metric=Metric(daily_minutes=data.daily_minutes),
        )
        goals.append(goal)
        self.goals.save_all(goals)
        logger.info("added goal %d: %s", goal.id, goal.description, extra={"_json_goal_id": goal.id})
        return goal

    def delete_goal(self, goal_id: int) -> Goal:
        goals = self.goals.load_all()
        kept = [g for g in goals if g.id != goal_id]
        if len(kept) == len(goals):
            raise NotFoundError(f"Goal {goal_id} not found")
        deleted = next(g for g in goals if g.id == goal_id)
        self.goals.save_all(kept)
        logger.info("deleted goal %d", goal_id, extra={"_json_goal_id": goal_id})
        return deleted

    def _replace_goal(self, goal_id: int, update: Callable[[Goal], Goal]) -> Goal:
        goals = self.goals.load_all()
        for i, goal in enumerate(goals):
            if goal.id == goal_id:
                goals[i] = update(goal)
                self.goals.save_all(goals)
                return goals[i]
        raise NotFoundError(f"Goal {goal_id} not found")

    def complete_task(self, goal_id: int, score: int | None = None, reason: str | None = None) -> Goal:
        if score is not None and not 0 <= score <= 100:
            raise ValidationError(f"Score must be between 0 and 100, got {score}")
        now = self.clock()
        updated = self._replace_goal(
            goal_id,
            lambda g: progress.apply_completion(g, now.date(), now, score=score, reason=reason),
        )
        logger.info(
            "completed goal %d (streak %d, %d%%)",
            goal_id,
            updated.metric.streak,
            updated.metric.progress_percentage,
            extra={"_json_goal_id": goal_id},
        )
        return updated

    def skip_task(self, goal_id: int, reason: str | None = None) -> Goal:
        now = self.clock()
        updated = self._replace_goal(goal_id, lambda g: progress.apply_skip(g, now.date(), now, reason=reason))
        logger.info("skipped goal %d: %s", goal_id, reason or "no reason", extra={"_json_goal_id": goal_id})
        return updated

    # ------------------------------------------------------------------
    # Schedule, progress, insights
    # ------------------------------------------------------------------

    def todays_schedule(self, day: date | None = None) -> Schedule:
        return generate_schedule(
            self.goals.load_all(),
            self.config.load(),
            day or self.today(),
            buffer_minutes=self.buffer_minutes,
        )

    def progress_summary(self) -> dict:
        return insights.daily_progress(self.goals.load_all(), self.today())

    def insights(self) -> list[str]:
        return insights.generate_insights(self.goals.load_all())

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def get_config(self) -> PlannerConfig:
        return self.config.load()

    def set_start_time(self, value: str) -> PlannerConfig:
        if not is_valid_time(value):
            raise ValidationError(f"Invalid time format {value!r}. Use HH:MM (24-hour), e.g. 08:00 or 14:30")
        config = self.config.load().model_copy(update={"start_time": value})
        self.config.save(config)
        return config

    def set_available_hours(self, value: int | str) -> PlannerConfig:
        try:
            hours = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid hours {value!r}. Must be between 1 and 24.")
        if not 1 <= hours <= 24:
            raise ValidationError(f"Invalid hours {hours}. Must be between 1 and 24.")
        config = self.config.load().model_copy(update={"available_hours": hours})
        self.config.save(config)
        return config

    def add_fixed_block(
        self,
        name: str,
        start_time: str,
        end_time: str,
        recurrence: Recurrence | str = Recurrence.daily,
        week_day: str | None = None,
        on_date: date | str | None = None,
    ) -> FixedBlock:
        block = _validated(
            FixedBlock,
            {
                "name": name,
                "startTime": start_time,
                "endTime": end_time,
                "recurrence": recurrence,
                "weekDay": week_day,
                "date": on_date,
            },
        )
        config = self.config.load()
        config = config.model_copy(update={"fixed_blocks": [*config.fixed_blocks, block]})
        self.config.save(config)
        logger.info("added fixed block %s (%s-%s)", block.name, block.start_time, block.end_time)
        return block

    def remove_fixed_block(self, index: int) -> FixedBlock:
        """Remove the block at zero-based `index`."""
        config = self.config.load()
        if not 0 <= index < len(config.fixed_blocks):
            raise NotFoundError(f"No fixed block at position {index + 1}")
        blocks = list(config.fixed_blocks)
        removed = blocks.pop(index)
        self.config.save(config.model_copy(update={"fixed_blocks": blocks}))
        logger.info("removed fixed block %s", removed.name)
        return removed

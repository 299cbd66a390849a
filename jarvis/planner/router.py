"""Planner HTTP router - goals, schedule, config, progress."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from jarvis.config import settings
from jarvis.planner.errors import NotFoundError, ValidationError
from jarvis.planner.models import (
    CompleteRequest,
    Goal,
    GoalCreate,
    PlannerConfig,
    Schedule,
    SkipRequest,
)
from jarvis.planner.service import PlannerService
from jarvis.store import (
    ConfigRepository,
    GoalRepository,
    get_config_repository,
    get_goal_repository,
)

router = APIRouter(prefix="/api", tags=["planner"])


def get_service(
    goals: GoalRepository = Depends(get_goal_repository),
    config: ConfigRepository = Depends(get_config_repository),
) -> PlannerService:
    return PlannerService(goals, config, buffer_minutes=settings.buffer_minutes)


def _parse_date(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date for '{name}': {value}")


def _dump(goal: Goal) -> dict:
    return goal.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# /api/goals
# ---------------------------------------------------------------------------


@router.get("/goals", response_model=list[Goal])
def list_goals(service: PlannerService = Depends(get_service)) -> list[Goal]:
    return service.list_goals()


@router.get("/goals/{goal_id}", response_model=Goal)
def get_goal(goal_id: int, service: PlannerService = Depends(get_service)) -> Goal:
    try:
        return service.get_goal(goal_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/goals")
def add_goal(payload: GoalCreate, service: PlannerService = Depends(get_service)) -> dict:
    goal = service.add_goal(payload)
    return {"success": True, "message": "Goal added", "goal": _dump(goal)}


@router.delete("/goals/{goal_id}")
def delete_goal(goal_id: int, service: PlannerService = Depends(get_service)) -> dict:
    try:
        goal = service.delete_goal(goal_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {"success": True, "message": f"Goal deleted: {goal.description}"}


@router.post("/goals/{goal_id}/complete")
def complete_goal(
    goal_id: int,
    body: CompleteRequest | None = None,
    service: PlannerService = Depends(get_service),
) -> dict:
    body = body or CompleteRequest()
    try:
        goal = service.complete_task(goal_id, score=body.score, reason=body.reason)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Goal not found or failed to update")
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {"success": True, "message": "Task completed", "goal": _dump(goal)}


@router.post("/goals/{goal_id}/skip")
def skip_goal(
    goal_id: int,
    body: SkipRequest | None = None,
    service: PlannerService = Depends(get_service),
) -> dict:
    body = body or SkipRequest()
    try:
        goal = service.skip_task(goal_id, reason=body.reason)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Goal not found or failed to update")
    return {"success": True, "message": "Task skipped", "goal": _dump(goal)}


# ---------------------------------------------------------------------------
# /api/schedule, /api/progress, /api/insights, /api/config
# ---------------------------------------------------------------------------


@router.get("/schedule", response_model=Schedule)
def get_schedule(
    service: PlannerService = Depends(get_service),
    day: str | None = Query(default=None, alias="date", description="Day to plan (YYYY-MM-DD, default: today)"),
) -> Schedule:
    target = _parse_date(day, "date") if day is not None else None
    return service.todays_schedule(target)


@router.get("/progress")
def get_progress(service: PlannerService = Depends(get_service)) -> dict:
    return service.progress_summary()


@router.get("/insights")
def get_insights(service: PlannerService = Depends(get_service)) -> dict:
    return {"insights": service.insights()}


@router.get("/config", response_model=PlannerConfig)
def get_config(service: PlannerService = Depends(get_service)) -> PlannerConfig:
    return service.get_config()

"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from jarvis.main import app
from jarvis.planner.models import FixedBlock, Goal, Metric, PlannerConfig
from jarvis.planner.router import get_service
from jarvis.planner.service import PlannerService
from jarvis.store import ConfigRepository, GoalRepository

TODAY = date(2026, 2, 16)  # a Monday
NOW = datetime(2026, 2, 16, 18, 30)


# ---------------------------------------------------------------------------
# In-memory repositories (no JSON files needed)
# ---------------------------------------------------------------------------

class InMemoryGoalRepository(GoalRepository):
    """Minimal stand-in for JsonGoalRepository used in service and endpoint tests."""

    def __init__(self, goals: list[Goal] | None = None):
        self.goals = list(goals or [])
        self.saves = 0

    def load_all(self) -> list[Goal]:
        return [g.model_copy(deep=True) for g in self.goals]

    def save_all(self, goals: list[Goal]) -> None:
        self.goals = list(goals)
        self.saves += 1


class InMemoryConfigRepository(ConfigRepository):
    def __init__(self, config: PlannerConfig | None = None):
        self.config = config or PlannerConfig()
        self.saves = 0

    def load(self) -> PlannerConfig:
        return self.config.model_copy(deep=True)

    def save(self, config: PlannerConfig) -> None:
        self.config = config
        self.saves += 1


def make_goal(
    goal_id: int = 1,
    description: str = "Read",
    frequency: str = "daily",
    minutes: int = 60,
    priority: str = "medium",
    week_day: str | None = None,
    target_date: date = date(2026, 12, 31),
    created_date: date = date(2026, 2, 1),
    **metric: Any,
) -> Goal:
    """Helper to build a Goal with sensible defaults."""
    return Goal(
        id=goal_id,
        description=description,
        frequency=frequency,
        week_day=week_day,
        target_date=target_date,
        priority=priority,
        created_date=created_date,
        metric=Metric(daily_minutes=minutes, **metric),
    )


def make_config(start: str = "09:00", hours: int = 8, blocks: list[dict] | None = None) -> PlannerConfig:
    return PlannerConfig(
        start_time=start,
        available_hours=hours,
        fixed_blocks=[FixedBlock.model_validate(b) for b in (blocks or [])],
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def goal_repo():
    return InMemoryGoalRepository()


@pytest.fixture()
def config_repo():
    return InMemoryConfigRepository()


@pytest.fixture()
def service(goal_repo, config_repo):
    """PlannerService over in-memory repos with the clock pinned to NOW."""
    return PlannerService(goal_repo, config_repo, clock=lambda: NOW)


@pytest.fixture()
def override_service(service):
    """Override the FastAPI dependency so no JSON files are touched."""
    app.dependency_overrides[get_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_service):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

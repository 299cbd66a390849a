"""Goal and config repositories backed by whole-file JSON snapshots.

Every call reads or writes the complete file. There is no locking: two
writers racing (e.g. concurrent HTTP requests) can lose an update. That is
accepted for a single local user.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from jarvis.config import settings
from jarvis.planner.errors import StoreError
from jarvis.planner.models import Goal, PlannerConfig

logger = logging.getLogger(__name__)


class GoalRepository(ABC):
    @abstractmethod
    def load_all(self) -> list[Goal]:
        pass

    @abstractmethod
    def save_all(self, goals: list[Goal]) -> None:
        """Replace the stored goal list with `goals`."""
        pass


class ConfigRepository(ABC):
    @abstractmethod
    def load(self) -> PlannerConfig:
        """Stored config merged with defaults for any missing key."""
        pass

    @abstractmethod
    def save(self, config: PlannerConfig) -> None:
        pass


# ---------------------------------------------------------------------------
# JSON file helpers
# ---------------------------------------------------------------------------


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        logger.debug("%s does not exist yet, using defaults", path)
        return default
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StoreError(f"Could not read {path}: {exc}") from exc
    if not text.strip():
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreError(f"{path} is not valid JSON: {exc}") from exc


def _write_json(path: Path, data: Any) -> None:
    """Write via a per-call temp file in the same directory, then swap it in."""
    tmp: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=path.name + ".", suffix=".tmp", delete=False
        ) as fh:
            tmp = Path(fh.name)
            fh.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        os.replace(tmp, path)
    except OSError as exc:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        raise StoreError(f"Could not write {path}: {exc}") from exc
    logger.debug("wrote %s", path)


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class JsonGoalRepository(GoalRepository):
    def __init__(self, path: Path):
        self.path = path

    def load_all(self) -> list[Goal]:
        raw = _read_json(self.path, [])
        if not isinstance(raw, list):
            raise StoreError(f"{self.path} must hold a JSON array of goals")
        try:
            return [Goal.model_validate(item) for item in raw]
        except PydanticValidationError as exc:
            raise StoreError(f"{self.path} holds an invalid goal: {exc}") from exc

    def save_all(self, goals: list[Goal]) -> None:
        _write_json(self.path, [g.model_dump(mode="json", by_alias=True) for g in goals])


class JsonConfigRepository(ConfigRepository):
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> PlannerConfig:
        raw = _read_json(self.path, {})
        if not isinstance(raw, dict):
            logger.warning("%s is not a JSON object, falling back to defaults", self.path)
            raw = {}
        try:
            return PlannerConfig.model_validate(raw)
        except PydanticValidationError as exc:
            raise StoreError(f"{self.path} holds an invalid config: {exc}") from exc

    def save(self, config: PlannerConfig) -> None:
        _write_json(self.path, config.model_dump(mode="json", by_alias=True))


def get_goal_repository() -> GoalRepository:
    return JsonGoalRepository(settings.goals_path)


def get_config_repository() -> ConfigRepository:
    return JsonConfigRepository(settings.config_path)

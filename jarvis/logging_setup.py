"""Central logging configuration: console output plus a rotating JSON log file."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "jarvis.log"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # extra={"_json_goal_id": 1} -> "goal_id": 1
        for k, v in record.__dict__.items():
            if k.startswith("_json_"):
                payload[k[6:]] = v
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    level: int | str = logging.INFO,
    base_dir: Path | None = None,
    json_console: bool = False,
    console_level: int | str | None = None,
) -> Path | None:
    """Install root handlers. Returns the log file path when one is used."""
    root = logging.getLogger()
    root.setLevel(level)
    # Clear existing handlers (avoid duplicates when called twice, e.g. uvicorn reload)
    root.handlers.clear()

    console = logging.StreamHandler()
    if console_level is not None:
        console.setLevel(console_level)
    console.setFormatter(JsonFormatter() if json_console else logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console)

    logfile: Path | None = None
    if base_dir is not None:
        log_dir = base_dir / LOG_DIR_NAME
        log_dir.mkdir(parents=True, exist_ok=True)
        logfile = log_dir / LOG_FILE_BASENAME
        handler = RotatingFileHandler(logfile, maxBytes=512_000, backupCount=5, encoding="utf-8")
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)

    logging.getLogger(__name__).debug("logging initialised", extra={"_json_phase": "startup"})
    return logfile


__all__ = ["configure_logging", "JsonFormatter"]

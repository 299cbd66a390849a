"""Command-line entry point: `jarvis <command>`."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from jarvis import display
from jarvis.config import settings
from jarvis.logging_setup import configure_logging
from jarvis.planner.errors import PlannerError, ValidationError
from jarvis.planner.models import Frequency, Recurrence
from jarvis.planner.service import PlannerService
from jarvis.repl import complete_numbered_task, run_repl
from jarvis.store import JsonConfigRepository, JsonGoalRepository

logger = logging.getLogger(__name__)


def build_service(data_dir: Path | None = None) -> PlannerService:
    base = (data_dir or settings.data_dir).expanduser()
    return PlannerService(
        JsonGoalRepository(base / settings.goals_file),
        JsonConfigRepository(base / settings.config_file),
        buffer_minutes=settings.buffer_minutes,
    )


def _goal_number(service: PlannerService, raw: str) -> int:
    goals = service.list_goals()
    try:
        index = int(raw) - 1
    except ValueError:
        raise ValidationError(f"Goal number must be an integer, got {raw!r}")
    if not 0 <= index < len(goals):
        raise ValidationError(f"Invalid goal number. You have {len(goals)} goals.")
    return goals[index].id


def _prompt_goal(ask: Callable[[str], str]) -> dict:
    """Collect a new goal interactively, the way `jarvis add` does without flags."""
    data: dict = {"description": ask("What's your goal? ").strip()}
    data["frequency"] = ask("Frequency (daily/weekly/one-time)? ").strip() or "daily"
    if data["frequency"] == Frequency.weekly.value:
        data["weekDay"] = ask("Which day (Monday/Tuesday/Wednesday/...)? ").strip()
    minutes = ask("Daily minutes? [60] ").strip()
    data["dailyMinutes"] = minutes or 60
    data["targetDate"] = ask("What is your target date? (YYYY-MM-DD) ").strip()
    data["priority"] = ask("What is the priority of this goal? (high/medium/low) [medium] ").strip() or "medium"
    return data


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_add(service: PlannerService, args: argparse.Namespace) -> str:
    if args.description is None:
        payload = _prompt_goal(input)
    else:
        payload = {
            "description": args.description,
            "frequency": args.frequency,
            "weekDay": args.day,
            "dailyMinutes": args.minutes,
            "targetDate": args.target,
            "priority": args.priority,
        }
    goal = service.add_goal(payload)
    return f"✓ Goal added successfully! ({goal.description}, id {goal.id})"


def cmd_schedule(service: PlannerService, args: argparse.Namespace) -> str:
    if not service.list_goals():
        return "No goals yet! Add one with: jarvis add"
    return display.render_schedule(service.todays_schedule(), compact=args.compact)


def cmd_complete(service: PlannerService, args: argparse.Namespace) -> str:
    return complete_numbered_task(service, args.number)


def cmd_goals(service: PlannerService, args: argparse.Namespace) -> str:
    return display.render_goals(service.list_goals(), compact=args.compact)


def cmd_delete(service: PlannerService, args: argparse.Namespace) -> str:
    goal = service.delete_goal(_goal_number(service, args.number))
    return f"✓ Goal deleted: {goal.description}"


def cmd_progress(service: PlannerService, args: argparse.Namespace) -> str:
    return display.render_progress(service.progress_summary())


def cmd_insights(service: PlannerService, args: argparse.Namespace) -> str:
    return display.render_insights(service.insights())


def cmd_config(service: PlannerService, args: argparse.Namespace) -> str:
    action = args.config_action
    if action is None:
        return display.render_config(service.get_config())
    if action == "start-time":
        service.set_start_time(args.value)
        return f"✓ Start time set to {args.value}"
    if action == "available-hours":
        config = service.set_available_hours(args.value)
        return f"✓ Available hours set to {config.available_hours}"
    if action == "add-block":
        recurrence = Recurrence.daily
        if args.weekly:
            recurrence = Recurrence.weekly
        elif args.on:
            recurrence = Recurrence.one_time
        block = service.add_fixed_block(
            args.name, args.start, args.end, recurrence=recurrence, week_day=args.weekly, on_date=args.on
        )
        return f"✓ Fixed block added: {block.name} ({block.start_time} - {block.end_time})"
    if action == "remove-block":
        try:
            index = int(args.number) - 1
        except ValueError:
            raise ValidationError(f"Block number must be an integer, got {args.number!r}")
        block = service.remove_fixed_block(index)
        return f"✓ Fixed block removed: {block.name}"
    raise ValidationError(f"Unknown config command {action!r}")


def cmd_serve(service: PlannerService, args: argparse.Namespace) -> str:
    import uvicorn

    if args.data_dir is not None:
        settings.data_dir = args.data_dir  # the app resolves its JSON files through settings
    uvicorn.run("jarvis.main:app", host=args.host or settings.host, port=args.port or settings.port)
    return ""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jarvis", description="JARVIS - your adaptive goal architect")
    p.add_argument("--data-dir", type=Path, default=None, help="Directory holding goals.json and config.json")
    sub = p.add_subparsers(dest="command")

    sub.add_parser("interactive", aliases=["i"], help="Start interactive mode (default)")

    add = sub.add_parser("add", help="Add a new goal (prompts when no description is given)")
    add.add_argument("description", nargs="?")
    add.add_argument("--frequency", default="daily", choices=[f.value for f in Frequency])
    add.add_argument("--day", default=None, help="Week day for weekly goals")
    add.add_argument("--minutes", type=int, default=60)
    add.add_argument("--target", default=None, help="Target date (YYYY-MM-DD)")
    add.add_argument("--priority", default="medium", choices=["high", "medium", "low"])

    sched = sub.add_parser("schedule", help="Show today's schedule")
    sched.add_argument("--compact", action="store_true")

    complete = sub.add_parser("complete", help="Complete task number N")
    complete.add_argument("number", nargs="?")

    goals = sub.add_parser("goals", help="List all goals")
    goals.add_argument("--compact", action="store_true")

    delete = sub.add_parser("delete", help="Delete goal number N")
    delete.add_argument("number")

    sub.add_parser("progress", help="Show today's progress")
    sub.add_parser("insights", help="Show patterns from your completion history")

    serve = sub.add_parser("serve", help="Run the HTTP API for the web dashboard")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    config = sub.add_parser("config", help="Show or change configuration")
    csub = config.add_subparsers(dest="config_action")
    st = csub.add_parser("start-time", help="Set start time (HH:MM)")
    st.add_argument("value")
    ah = csub.add_parser("available-hours", help="Set available hours (1-24)")
    ah.add_argument("value")
    ab = csub.add_parser("add-block", help="Add a fixed time block")
    ab.add_argument("name")
    ab.add_argument("start")
    ab.add_argument("end")
    when = ab.add_mutually_exclusive_group()
    when.add_argument("--weekly", metavar="DAY", default=None, help="Repeat every DAY instead of daily")
    when.add_argument("--on", metavar="YYYY-MM-DD", default=None, help="Only on this date")
    rb = csub.add_parser("remove-block", help="Remove fixed block number N")
    rb.add_argument("number")

    return p


COMMANDS: dict[str, Callable[[PlannerService, argparse.Namespace], str]] = {
    "add": cmd_add,
    "schedule": cmd_schedule,
    "complete": cmd_complete,
    "goals": cmd_goals,
    "delete": cmd_delete,
    "progress": cmd_progress,
    "insights": cmd_insights,
    "config": cmd_config,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    data_dir = (args.data_dir or settings.data_dir).expanduser()
    configure_logging(
        settings.log_level,
        base_dir=data_dir if settings.log_to_file else None,
        json_console=settings.log_json,
        console_level=settings.console_log_level,
    )
    service = build_service(data_dir)

    if args.command in (None, "interactive", "i"):
        run_repl(service)
        return 0

    try:
        output = COMMANDS[args.command](service, args)
    except PlannerError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    if output:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

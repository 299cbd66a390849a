"""Interactive mode: a read-eval-print loop over the planner service."""

from __future__ import annotations

from typing import Callable

from jarvis.display import (
    INTERACTIVE_HELP,
    render_goals,
    render_header,
    render_progress,
    render_schedule,
)
from jarvis.planner.errors import NotFoundError, PlannerError, ValidationError
from jarvis.planner.service import PlannerService

QUIT_COMMANDS = {"q", "quit", "exit"}


def complete_numbered_task(service: PlannerService, raw: str | None) -> str:
    """Complete the N-th (1-based) non-fixed entry of today's schedule.

    Raises ValidationError for a missing or out-of-range number.
    """
    if not raw:
        raise ValidationError("Please specify a task number, e.g. complete 1")
    try:
        index = int(raw) - 1
    except ValueError:
        raise ValidationError(f"Task number must be an integer, got {raw!r}")

    tasks = [t for t in service.todays_schedule().tasks if not t.is_fixed]
    if not 0 <= index < len(tasks):
        raise ValidationError(f"Invalid task number. You have {len(tasks)} tasks today.")

    task = tasks[index]
    service.complete_task(task.goal_id)
    return f"✓ Task completed: {task.description}\nGoal progress updated!"


def handle_command(service: PlannerService, line: str) -> tuple[str, bool]:
    """Run one REPL line. Returns (output, keep_running)."""
    parts = line.strip().split()
    if not parts:
        return "", True

    cmd, args = parts[0].lower(), parts[1:]
    if cmd in QUIT_COMMANDS:
        return "👋 Great work today! See you tomorrow!", False

    try:
        if cmd in ("c", "complete"):
            message = complete_numbered_task(service, args[0] if args else None)
            return f"{message}\n\n{render_schedule(service.todays_schedule())}", True
        if cmd in ("s", "schedule"):
            return render_schedule(service.todays_schedule()), True
        if cmd in ("g", "goals"):
            return render_goals(service.list_goals()), True
        if cmd in ("p", "progress"):
            return render_progress(service.progress_summary()), True
        if cmd in ("h", "help"):
            return INTERACTIVE_HELP, True
    except (ValidationError, NotFoundError) as exc:
        return f"❌ {exc}", True

    return f"❌ Unknown command: \"{cmd}\". Type 'h' for help.", True


def run_repl(
    service: PlannerService,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    write(render_header(service.today()))
    write(render_schedule(service.todays_schedule()))
    while True:
        try:
            line = read("\n> ")
        except (EOFError, KeyboardInterrupt):
            write("")
            break
        try:
            output, keep_running = handle_command(service, line)
        except PlannerError as exc:
            output, keep_running = f"❌ {exc}", True
        if output:
            write(output)
        if not keep_running:
            break

# src/taskflow/cli/commands.py

"""
Slash commands: the boundary between user input and the engine.

Input validation lives here (non-empty text, parseable times, known priority).
The engine assumes pre-validated input and never sees a bad create/edit.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_api import (
    parse_priority,
    parse_when,
    render_active,
    render_completed,
)
from ..tasks.task_models import TaskPriority, TaskUpdate

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

ADD_USAGE = (
    "Usage: /add <start> <end> [priority] -- <text>\n"
    "  times: YYYY-MM-DDTHH:MM | now | +30m | +2h | +1d\n"
    "  priority: very-important | important | normal | less-important"
)
EDIT_USAGE = (
    "Usage: /edit <id> field=value ...\n"
    "  fields: text, start, end, priority (quote values with spaces: text=\"buy milk\")"
)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._max_split: dict[str, int] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        max_split: int = -1,
    ) -> None:
        """max_split >= 0 keeps the tail of the line as one unsplit argument."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._max_split[key] = max_split
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._max_split[alias.lower()] = max_split

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, rest.split(maxsplit=self._max_split[name]))

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    eng = state.engine
    return (
        "Status:\n"
        f"  Active tasks: {len(eng.active_tasks)}\n"
        f"  Completed tasks: {len(eng.completed_tasks)}\n"
        f"  Retention: {float(s.retention_days):g} days\n"
        f"  Auto-complete every: {float(s.auto_complete_interval_seconds):g}s\n"
        f"  Retention sweep every: {float(s.retention_sweep_interval_seconds):g}s\n"
        f"  Storage: {s.tasks_db_path} [{eng.storage_key}]"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add 2025-01-10T09:00 2025-01-10T12:00 important -- write report
    /add now +2h -- call the bank
    """
    if "--" not in args:
        return ADD_USAGE

    sep = args.index("--")
    head, tail = args[:sep], args[sep + 1:]
    text = " ".join(tail).strip()

    if not text:
        return "Task text must not be empty.\n" + ADD_USAGE
    if len(head) not in (2, 3):
        return "Both start and end time are required.\n" + ADD_USAGE

    now = state.engine.now()
    try:
        start_time = parse_when(head[0], now)
        end_time = parse_when(head[1], now)
    except ValueError as e:
        return f"Bad date/time: {e}\n" + ADD_USAGE

    priority = TaskPriority.NORMAL
    if len(head) == 3:
        try:
            priority = parse_priority(head[2])
        except ValueError:
            return f"Unknown priority: {head[2]}\n" + ADD_USAGE

    task = state.engine.create(text, priority, start_time, end_time)
    return f"Added #{task.id}: {task.text}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id = _parse_id(args[0])
    if task_id is None:
        return f"Not a task id: {args[0]}"

    task = state.engine.toggle_complete(task_id)
    if task is None:
        return f"No active task #{task_id}."
    verdict = "on time" if task.is_on_time else "late"
    return f"Completed #{task.id} ({verdict})."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id>"
    task_id = _parse_id(args[0])
    if task_id is None:
        return f"Not a task id: {args[0]}"

    if state.engine.delete(task_id):
        return f"Deleted #{task_id}."
    return f"No task #{task_id}."


def cmd_clear(state: AppState, args: list[str]) -> str:
    n = state.engine.delete_all_completed()
    return f"Deleted {n} completed task(s)."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit 17 text="buy oat milk" end=+3h priority=important
    """
    if len(args) < 2:
        return EDIT_USAGE
    task_id = _parse_id(args[0])
    if task_id is None:
        return f"Not a task id: {args[0]}"

    try:
        pairs = shlex.split(args[1])
    except ValueError as e:
        return f"Cannot parse edit: {e}\n" + EDIT_USAGE

    now = state.engine.now()
    fields: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip().lower()
        if not sep:
            return f"Expected field=value, got: {pair}\n" + EDIT_USAGE

        try:
            if key == "text":
                value = value.strip()
                if not value:
                    return "Task text must not be empty."
                fields["text"] = value
            elif key == "start":
                fields["start_time"] = parse_when(value, now)
            elif key == "end":
                fields["end_time"] = parse_when(value, now)
            elif key == "priority":
                fields["priority"] = parse_priority(value)
            else:
                return f"Unknown field: {key}\n" + EDIT_USAGE
        except ValueError as e:
            return f"Bad value for {key}: {e}"

    task = state.engine.edit(task_id, TaskUpdate(**fields))
    if task is None:
        return f"No task #{task_id}."
    return f"Updated #{task.id}: {task.text}"


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.engine.active_tasks
    if not tasks:
        return "No active tasks."
    now = state.engine.now()
    lines = [f"Active tasks ({len(tasks)}):"]
    lines.extend(f"  {render_active(t, now)}" for t in tasks)
    return "\n".join(lines)


def cmd_history(state: AppState, args: list[str]) -> str:
    tasks = state.engine.completed_tasks
    if not tasks:
        return "No completed tasks."
    now = state.engine.now()
    lines = [f"Completed tasks ({len(tasks)}):"]
    lines.extend(f"  {render_completed(t, now)}" for t in tasks)
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <start> <end> [priority] -- <text>.")
registry.register("done", cmd_done, help_text="Mark an active task complete: /done <id>.")
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> text=... start=... end=... priority=...",
    max_split=1,
)
registry.register("list", cmd_list, help_text="Show active tasks.", aliases=["ls"])
registry.register("history", cmd_history, help_text="Show completed tasks.")
registry.register("status", cmd_status, help_text="Show counts, timings and storage location.")

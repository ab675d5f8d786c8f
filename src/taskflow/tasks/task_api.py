# src/taskflow/tasks/task_api.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .task_models import Task, TaskPriority, check_ts

_PRIORITY_LABELS = {
    TaskPriority.VERY_IMPORTANT: "Very Important",
    TaskPriority.IMPORTANT: "Important",
    TaskPriority.NORMAL: "Normal",
    TaskPriority.LESS_IMPORTANT: "Less Important",
}

_PRIORITY_ALIASES = {
    "vi": TaskPriority.VERY_IMPORTANT,
    "i": TaskPriority.IMPORTANT,
    "n": TaskPriority.NORMAL,
    "li": TaskPriority.LESS_IMPORTANT,
    "low": TaskPriority.LESS_IMPORTANT,
}

_OFFSET_UNITS = {"m": 60.0, "h": 3600.0, "d": 86400.0}

_INPUT_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")


@dataclass(slots=True, frozen=True)
class TimeRemaining:
    text: str
    is_overdue: bool
    is_urgent: bool


def format_time_remaining(end_time: float, now: float) -> TimeRemaining:
    """
    Countdown shown next to active tasks.

    - at or past the deadline: "Overdue"
    - an hour or more left: "{h}h {m}m remaining" (never urgent)
    - less than an hour: "{m}m remaining", urgent under 30 minutes
    """
    diff = end_time - now
    if diff <= 0:
        return TimeRemaining(text="Overdue", is_overdue=True, is_urgent=False)

    hours = int(diff // 3600)
    minutes = int((diff % 3600) // 60)

    if hours > 0:
        return TimeRemaining(text=f"{hours}h {minutes}m remaining", is_overdue=False, is_urgent=False)
    return TimeRemaining(text=f"{minutes}m remaining", is_overdue=False, is_urgent=minutes < 30)


def time_ago(ts: float, now: float) -> str:
    diff = int(now - ts)
    if diff < 60:
        return f"{diff} seconds ago"
    if diff < 3600:
        return f"{diff // 60} minutes ago"
    if diff < 86400:
        return f"{diff // 3600} hours ago"
    return f"{diff // 86400} days ago"


def priority_label(priority: TaskPriority | str | None) -> str:
    return _PRIORITY_LABELS[TaskPriority.from_raw(priority)]


def completion_label(task: Task) -> str:
    if task.was_auto_completed:
        return "Incomplete"
    return "Completed on time" if task.is_on_time else "Completed late"


def completion_info(task: Task, now: float) -> str:
    if task.completed_at is None:
        return ""
    ago = time_ago(task.completed_at, now)
    return f"Marked incomplete {ago}" if task.was_auto_completed else f"Completed {ago}"


def parse_datetime(raw: str) -> float:
    """
    Parse user-entered date/time into POSIX seconds.

    Accepts "YYYY-MM-DDTHH:MM" / "YYYY-MM-DD HH:MM" (local time) or full ISO-8601
    with an offset. Raises ValueError on anything else, including instants that
    cannot be stored (NaN, infinities, years outside 1..9999).
    """
    s = (raw or "").strip()
    if not s:
        raise ValueError("empty date/time")

    dt: datetime | None = None
    for fmt in _INPUT_FORMATS:
        try:
            dt = datetime.strptime(s, fmt)
            break
        except ValueError:
            continue

    if dt is None:
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        # Naive values are local wall-clock time, like a datetime-local input.
        dt = datetime.fromisoformat(s)

    try:
        ts = dt.timestamp()
    except (OverflowError, OSError) as e:
        raise ValueError(f"date/time out of range: {raw!r}") from e
    return check_ts(ts)


def parse_when(raw: str, now: float) -> float:
    """
    Like parse_datetime, plus "now" and offsets from now: "+45m", "+2h", "+1d".
    """
    s = (raw or "").strip().lower()
    if s == "now":
        return now

    if s.startswith("+") and len(s) > 2 and s[-1] in _OFFSET_UNITS:
        try:
            amount = float(s[1:-1])
        except ValueError:
            raise ValueError(f"bad offset: {raw!r}") from None
        return check_ts(now + amount * _OFFSET_UNITS[s[-1]])

    return parse_datetime(raw)


def parse_priority(raw: str) -> TaskPriority:
    """Strict variant of TaskPriority.from_raw for user input: unknown values raise ValueError."""
    key = (raw or "").strip().lower()
    if key in _PRIORITY_ALIASES:
        return _PRIORITY_ALIASES[key]
    return TaskPriority(key)


def format_datetime(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def render_active(task: Task, now: float) -> str:
    remaining = format_time_remaining(task.end_time, now)
    flag = " !" if remaining.is_urgent else ""
    return (
        f"#{task.id} [{priority_label(task.priority)}] {task.text} "
        f"({format_datetime(task.start_time)} -> {format_datetime(task.end_time)}, "
        f"{remaining.text}{flag})"
    )


def render_completed(task: Task, now: float) -> str:
    done_at = format_datetime(task.completed_at) if task.completed_at is not None else "-"
    return (
        f"#{task.id} {task.text} [{completion_label(task)}] "
        f"completed {done_at}, due {format_datetime(task.end_time)}; {completion_info(task, now)}"
    )

# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
import math
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        # Unknown status cannot be recovered safely (completion fields would be guesswork).
        return cls(str(raw))


class TaskPriority(StrEnum):
    """Display/sort hint only; has no effect on lifecycle rules."""

    VERY_IMPORTANT = "very-important"
    IMPORTANT = "important"
    NORMAL = "normal"
    LESS_IMPORTANT = "less-important"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskPriority:
        if not raw:
            return cls.NORMAL
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.NORMAL


@dataclass(slots=True)
class Task:
    """
    A single tracked task.

    All timestamps are POSIX seconds (float).

    Notes:
    - completed is True only for user-driven completion; auto-completed tasks keep it False.
    - completed_at / is_on_time are None while the task is active.
    """

    id: int
    text: str
    priority: TaskPriority
    status: TaskStatus
    start_time: float
    end_time: float
    created_at: float

    completed: bool = False
    completed_at: float | None = None
    is_on_time: bool | None = None
    was_auto_completed: bool = False

    def __post_init__(self) -> None:
        # Snapshots keep microsecond precision; hold the same value in memory.
        self.start_time = round_ts(self.start_time)
        self.end_time = round_ts(self.end_time)
        self.created_at = round_ts(self.created_at)
        if self.completed_at is not None:
            self.completed_at = round_ts(self.completed_at)

    def to_record(self) -> dict[str, Any]:
        """Snapshot record (JSON-ready, camelCase keys, ISO-8601 UTC timestamps)."""
        return {
            "id": self.id,
            "text": self.text,
            "priority": self.priority.value,
            "status": self.status.value,
            "startTime": ts_to_iso(self.start_time),
            "endTime": ts_to_iso(self.end_time),
            "createdAt": ts_to_iso(self.created_at),
            "completed": self.completed,
            "completedAt": ts_to_iso(self.completed_at) if self.completed_at is not None else None,
            "isOnTime": self.is_on_time,
            "wasAutoCompleted": self.was_auto_completed,
        }

    @classmethod
    def from_record(cls, rec: Any) -> Task:
        """
        Build a Task from a snapshot record.

        Raises ValueError if the record is unusable (missing id/text/times, bad status).
        Completion fields are normalised so the status invariants hold after load.
        """
        if not isinstance(rec, dict):
            raise ValueError(f"task record must be an object, got {type(rec).__name__}")
        if isinstance(rec.get("id"), bool):
            raise ValueError("task id must be a number")

        try:
            task_id = int(rec["id"])
            text = str(rec["text"])
            status = TaskStatus.from_raw(rec.get("status"))
            start_time = parse_ts(rec["startTime"])
            end_time = parse_ts(rec["endTime"])
            created_at = parse_ts(rec["createdAt"])
        except (KeyError, TypeError, OverflowError) as e:
            raise ValueError(f"incomplete task record: {e}") from e

        if status == TaskStatus.ACTIVE:
            return cls(
                id=task_id,
                text=text,
                priority=TaskPriority.from_raw(rec.get("priority")),
                status=status,
                start_time=start_time,
                end_time=end_time,
                created_at=created_at,
            )

        raw_done = rec.get("completedAt")
        if raw_done is None:
            raise ValueError(f"completed task {task_id} has no completedAt")

        was_auto = bool(rec.get("wasAutoCompleted", False))
        is_on_time = rec.get("isOnTime")
        return cls(
            id=task_id,
            text=text,
            priority=TaskPriority.from_raw(rec.get("priority")),
            status=status,
            start_time=start_time,
            end_time=end_time,
            created_at=created_at,
            completed=bool(rec.get("completed", False)),
            completed_at=parse_ts(raw_done),
            is_on_time=False if was_auto else bool(is_on_time),
            was_auto_completed=was_auto,
        )


@dataclass(slots=True, frozen=True)
class TaskUpdate:
    """
    Allowed edit fields.

    None means "leave unchanged". Status and completion fields are deliberately
    absent: an edit can never complete, reopen or reclassify a task.
    """

    text: str | None = None
    priority: TaskPriority | None = None
    start_time: float | None = None
    end_time: float | None = None

    def is_empty(self) -> bool:
        return (
            self.text is None
            and self.priority is None
            and self.start_time is None
            and self.end_time is None
        )


def round_ts(ts: float) -> float:
    """Round to whole microseconds, the resolution an ISO-8601 timestamp carries."""
    return round(float(ts), 6)


def check_ts(ts: float) -> float:
    """
    Return ts if it can be written to a snapshot, else raise ValueError.

    Rejects NaN, infinities and instants outside the years 1..9999.
    """
    val = float(ts)
    if not math.isfinite(val):
        raise ValueError(f"timestamp is not finite: {ts!r}")
    try:
        datetime.fromtimestamp(val, tz=timezone.utc)
        datetime.fromtimestamp(val)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"timestamp out of range: {ts!r}") from e
    return val


def ts_to_iso(ts: float) -> str:
    return datetime.fromtimestamp(float(ts), tz=timezone.utc).isoformat()


def parse_ts(raw: Any) -> float:
    """
    Accept ISO-8601 strings or numeric epoch values.

    Naive strings are local wall-clock time, the way a browser reads datetime-local values.

    Numbers above 1e11 are treated as milliseconds (older snapshots stored Date.now()).
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError(f"not a timestamp: {raw!r}")

    if isinstance(raw, (int, float)):
        val = float(raw)
        return check_ts(val / 1000.0 if abs(val) > 1e11 else val)

    s = str(raw).strip()
    if not s:
        raise ValueError("empty timestamp")
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    return check_ts(datetime.fromisoformat(s).timestamp())

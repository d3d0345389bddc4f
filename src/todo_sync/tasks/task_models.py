# src/todo_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a 'Z' suffix."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def next_timestamp(now: datetime, *previous: str | None) -> str:
    """
    Timestamp for a mutation: `now`, or one millisecond after the latest of
    `previous` when the clock has not moved past it.
    """
    floors = [dt for dt in map(parse_timestamp, previous) if dt is not None]
    if floors and now <= max(floors):
        now = max(floors) + timedelta(milliseconds=1)
    return format_timestamp(now)


@dataclass(slots=True)
class Task:
    """
    One todo item.

    `id` is assigned by the document store and is None until the first successful create.
    Timestamps are ISO-8601 strings exactly as stored remotely.
    """

    text: str
    completed: bool = False
    created_at: str | None = None
    updated_at: str | None = None
    id: str | None = None


@dataclass(slots=True, frozen=True)
class TaskUpdate:
    """
    Partial update sent to the store.

    Only non-None fields are written; updated_at is always written.
    """

    updated_at: str
    text: str | None = None
    completed: bool | None = None


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int

    @property
    def pending(self) -> int:
        return self.total - self.completed

    @property
    def completion_rate(self) -> int:
        """Percentage completed, rounded half-up; 0 for an empty list."""
        if self.total <= 0:
            return 0
        # Integer form of floor(100 * completed / total + 0.5).
        return (200 * self.completed + self.total) // (2 * self.total)

    @classmethod
    def from_tasks(cls, tasks) -> TaskStats:
        items = list(tasks)
        return cls(total=len(items), completed=sum(1 for t in items if t.completed))

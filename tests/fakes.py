# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from todo_sync.errors import RemoteError
from todo_sync.tasks.task_models import Task, TaskUpdate


class FakeClock:
    """Deterministic clock; advances by `step` on every call (zero = frozen)."""

    def __init__(
        self,
        start: datetime = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(0),
    ) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class FakeTaskRepo:
    """
    In-memory TaskRepo for store tests.

    - Captures calls for assertions
    - `fail_with` makes every subsequent call raise that error
    - create() assigns ids "1", "2", ... unless `next_id` is set
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in (tasks or []) if t.id}
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None
        self.next_id: str | None = None
        self._counter = 0

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def list(self) -> list[Task]:
        self.calls.append(("list",))
        self._maybe_fail()
        return [replace(t) for t in self.tasks.values()]

    async def create(self, task: Task) -> Task:
        self.calls.append(("create", task))
        self._maybe_fail()
        self._counter += 1
        task_id = self.next_id or str(self._counter)
        saved = replace(task, id=task_id)
        self.tasks[task_id] = saved
        return replace(saved)

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        self.calls.append(("update", task_id, updates))
        self._maybe_fail()
        current = self.tasks.get(task_id)
        if current is None:
            raise RemoteError(404)
        updated = replace(
            current,
            text=current.text if updates.text is None else updates.text,
            completed=current.completed if updates.completed is None else updates.completed,
            updated_at=updates.updated_at,
        )
        self.tasks[task_id] = updated
        return replace(updated)

    async def delete(self, task_id: str) -> None:
        self.calls.append(("delete", task_id))
        self._maybe_fail()
        self.tasks.pop(task_id, None)


@dataclass(slots=True)
class FakeSummarizer:
    next_text: str = "All good."
    fail_with: Exception | None = None
    calls: list[tuple[Task, ...]] = field(default_factory=list)

    async def summarize(self, tasks: Sequence[Task]) -> str:
        self.calls.append(tuple(tasks))
        if self.fail_with is not None:
            raise self.fail_with
        return self.next_text


@dataclass(slots=True)
class FakeNotifier:
    fail_with: Exception | None = None
    sent: list[tuple[str, tuple[Task, ...]]] = field(default_factory=list)

    async def dispatch(self, summary: str, tasks: Sequence[Task]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((summary, tuple(tasks)))

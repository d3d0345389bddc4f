# src/todo_sync/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone

from ..core.ports import TaskRepo
from ..errors import NotFoundError, StoreBusyError, ValidationError
from .task_models import Task, TaskStats, TaskUpdate, format_timestamp, next_timestamp

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _clean_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Task text must not be empty.")
    return cleaned


class TaskStore:
    """
    Authoritative in-memory task list, kept in sync with a TaskRepo.

    Write-through:
    - every mutation calls the repository first
    - the local list changes only after that call succeeds
    - a failed call leaves the list exactly as it was

    Serialization:
    - one lock guards load() and all mutations
    - a call that arrives while another is in flight is rejected with StoreBusyError
      (no queueing, the caller decides whether to retry)
    """

    def __init__(self, repository: TaskRepo, *, clock: Clock = utc_now) -> None:
        self._repo = repository
        self._clock = clock
        self._tasks: list[Task] = []
        self._lock = asyncio.Lock()

    # ---- read side ----

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Point-in-time snapshot (copies, safe to hand to other components)."""
        return tuple(replace(t) for t in self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else replace(self._tasks[idx])

    def stats(self) -> TaskStats:
        return TaskStats.from_tasks(self._tasks)

    # ---- helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _require_index(self, task_id: str) -> int:
        idx = self._index_of(task_id)
        if idx is None:
            raise NotFoundError(task_id)
        return idx

    @asynccontextmanager
    async def _exclusive(self, op: str) -> AsyncIterator[None]:
        if self._lock.locked():
            logger.info("TaskStore busy, rejecting %s", op)
            raise StoreBusyError()
        async with self._lock:
            yield

    # ---- operations ----

    async def load(self) -> tuple[Task, ...]:
        async with self._exclusive("load"):
            try:
                tasks = await self._repo.list()
            except Exception:
                self._tasks = []
                logger.exception("Loading tasks failed; local list reset to empty")
                raise
            self._tasks = list(tasks)
            logger.info("Loaded %d task(s)", len(self._tasks))
            return self.tasks

    async def add(self, text: str) -> Task:
        cleaned = _clean_text(text)
        async with self._exclusive("add"):
            now = format_timestamp(self._clock())
            draft = Task(text=cleaned, completed=False, created_at=now, updated_at=now)

            saved = await self._repo.create(draft)

            self._tasks.append(replace(saved))
            logger.info("Task added id=%s", saved.id)
            return replace(saved)

    async def toggle(self, task_id: str) -> Task:
        async with self._exclusive("toggle"):
            idx = self._require_index(task_id)
            current = self._tasks[idx]
            updates = TaskUpdate(
                completed=not current.completed,
                updated_at=next_timestamp(self._clock(), current.created_at, current.updated_at),
            )

            await self._repo.update(task_id, updates)

            updated = replace(self._tasks[idx], completed=updates.completed, updated_at=updates.updated_at)
            self._tasks[idx] = updated
            logger.info("Task toggled id=%s completed=%s", task_id, updated.completed)
            return replace(updated)

    async def edit(self, task_id: str, new_text: str) -> Task:
        cleaned = _clean_text(new_text)
        async with self._exclusive("edit"):
            idx = self._require_index(task_id)
            current = self._tasks[idx]
            updates = TaskUpdate(
                text=cleaned,
                updated_at=next_timestamp(self._clock(), current.created_at, current.updated_at),
            )

            await self._repo.update(task_id, updates)

            updated = replace(self._tasks[idx], text=cleaned, updated_at=updates.updated_at)
            self._tasks[idx] = updated
            logger.info("Task edited id=%s", task_id)
            return replace(updated)

    async def remove(self, task_id: str) -> None:
        async with self._exclusive("remove"):
            self._require_index(task_id)

            await self._repo.delete(task_id)

            self._tasks = [t for t in self._tasks if t.id != task_id]
            logger.info("Task removed id=%s", task_id)

# src/todo_sync/core/ports.py

"""
Ports (interfaces) used by the core.

TaskStore and the reporting flow depend on Protocols instead of concrete clients.
The three outbound services share no behaviour, so there is no common base type;
each one can be swapped for a test double on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..tasks.task_models import Task, TaskUpdate


class TaskRepo(Protocol):
    """Document store client (list/create/update/delete)."""

    async def list(self) -> list[Task]: ...
    async def create(self, task: Task) -> Task: ...
    async def update(self, task_id: str, updates: TaskUpdate) -> Task: ...
    async def delete(self, task_id: str) -> None: ...


class Summarizer(Protocol):
    """Turns a task snapshot into a natural-language summary."""

    async def summarize(self, tasks: Sequence[Task]) -> str: ...


class Notifier(Protocol):
    """Publishes a summary (plus list statistics) somewhere outside the app."""

    async def dispatch(self, summary: str, tasks: Sequence[Task]) -> None: ...

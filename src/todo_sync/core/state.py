# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .ports import Notifier, Summarizer, TaskRepo


@dataclass
class AppState:
    # Settings are kept on the state so command handlers can read them.
    settings: Any

    repository: TaskRepo
    store: TaskStore
    summarizer: Summarizer
    notifier: Notifier

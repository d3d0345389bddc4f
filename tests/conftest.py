# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_sync.core.state import AppState
from todo_sync.tasks.task_models import Task
from todo_sync.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeNotifier, FakeSummarizer, FakeTaskRepo

COLLECTION_URL = "https://store.test/v1/projects/p/databases/(default)/documents/TodoTable"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the from_settings() constructors.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-sync-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        collection_url=COLLECTION_URL,
        store_token=None,
        list_failure_policy="degrade",
        http_timeout_seconds=None,
        openai_api_key="sk-test",
        openai_base_url="https://llm.test/v1",
        openai_model="gpt-3.5-turbo",
        summary_max_tokens=300,
        summary_temperature=0.7,
        webhook_url="https://hooks.test/services/T/B/X",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sample_tasks() -> list[Task]:
    return [
        Task(
            id="a1",
            text="buy milk",
            completed=False,
            created_at="2024-05-01T09:00:00.000Z",
            updated_at="2024-05-01T09:00:00.000Z",
        ),
        Task(
            id="b2",
            text="write report",
            completed=True,
            created_at="2024-05-01T09:05:00.000Z",
            updated_at="2024-05-01T09:30:00.000Z",
        ),
    ]


@pytest.fixture()
def repo(sample_tasks: list[Task]) -> FakeTaskRepo:
    return FakeTaskRepo(sample_tasks)


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeTaskRepo, clock: FakeClock) -> AppState:
    """AppState wired with deterministic fakes (no network)."""
    return AppState(
        settings=settings,
        repository=repo,
        store=TaskStore(repo, clock=clock),
        summarizer=FakeSummarizer(),
        notifier=FakeNotifier(),
    )

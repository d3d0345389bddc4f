# tests/test_bootstrap.py

from __future__ import annotations

import pytest

from todo_sync.cli.bootstrap import create_initial_state, shutdown_state
from todo_sync.llm.summarizer import SummaryGenerator
from todo_sync.notify.webhook import NotificationDispatcher
from todo_sync.tasks.task_repository import ListFailurePolicy, TaskRepository


@pytest.mark.asyncio
async def test_create_initial_state_wires_concrete_components(settings) -> None:
    settings.list_failure_policy = "raise"

    state = create_initial_state(settings=settings)

    assert settings.data_dir.is_dir()
    assert isinstance(state.repository, TaskRepository)
    assert state.repository.list_failure_policy is ListFailurePolicy.RAISE
    assert isinstance(state.summarizer, SummaryGenerator)
    assert isinstance(state.notifier, NotificationDispatcher)
    assert state.store.tasks == ()

    await shutdown_state(state)

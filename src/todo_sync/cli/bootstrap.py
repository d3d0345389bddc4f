# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data dir exists,
- wires the concrete repository/summarizer/dispatcher into AppState,
- closes their HTTP clients on shutdown.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..llm.summarizer import SummaryGenerator
from ..notify.webhook import NotificationDispatcher
from ..tasks.task_repository import TaskRepository
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Nothing here talks to the network; missing credentials surface later,
    when the component that needs them is first used.
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    repository = TaskRepository.from_settings(settings)
    logger.info(
        "Document store configured=%s list_failure_policy=%s",
        bool(getattr(settings, "collection_url", None)),
        repository.list_failure_policy.value,
    )

    return AppState(
        settings=settings,
        repository=repository,
        store=TaskStore(repository),
        summarizer=SummaryGenerator.from_settings(settings),
        notifier=NotificationDispatcher.from_settings(settings),
    )


async def shutdown_state(state: AppState) -> None:
    """Best-effort: close whatever HTTP clients were opened."""
    for component in (state.repository, state.summarizer, state.notifier):
        aclose = getattr(component, "aclose", None)
        if aclose is None:
            continue
        try:
            await aclose()
        except Exception:
            logger.debug("Closing %s failed.", component.__class__.__name__, exc_info=True)

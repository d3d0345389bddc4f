# src/todo_sync/core/reporting.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import Task
from .ports import Notifier, Summarizer

logger = logging.getLogger(__name__)


class ReportStatus(StrEnum):
    NOTHING_TO_SUMMARIZE = "nothing_to_summarize"
    SENT = "sent"


@dataclass(slots=True, frozen=True)
class ReportOutcome:
    status: ReportStatus
    summary: str | None = None


async def summarize_and_notify(
    tasks: Sequence[Task],
    summarizer: Summarizer,
    notifier: Notifier,
) -> ReportOutcome:
    """
    Summarize a task snapshot and publish it.

    An empty snapshot is a no-op: neither service is called.
    Errors from either service propagate unchanged; nothing is retried.
    """
    snapshot = tuple(tasks)
    if not snapshot:
        logger.info("Nothing to summarize (empty task list)")
        return ReportOutcome(ReportStatus.NOTHING_TO_SUMMARIZE)

    summary = await summarizer.summarize(snapshot)
    await notifier.dispatch(summary, snapshot)
    return ReportOutcome(ReportStatus.SENT, summary=summary)

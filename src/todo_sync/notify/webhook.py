# src/todo_sync/notify/webhook.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

import httpx

from ..config import is_configured
from ..errors import ConfigurationError, ServiceError, TransportError
from ..tasks.task_models import Task, TaskStats

logger = logging.getLogger(__name__)

SERVICE = "webhook"

SUMMARY_TITLE = "📋 Todo List Summary"


def _ts_local(now: datetime) -> str:
    return now.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def build_summary_message(summary: str, stats: TaskStats, generated_at: datetime) -> dict[str, Any]:
    """Block Kit payload: header, statistics fields, summary section, footer."""
    return {
        "text": SUMMARY_TITLE,
        "blocks": [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": SUMMARY_TITLE},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Total Tasks:* {stats.total}"},
                    {"type": "mrkdwn", "text": f"*Completed:* {stats.completed}"},
                    {"type": "mrkdwn", "text": f"*Pending:* {stats.pending}"},
                    {"type": "mrkdwn", "text": f"*Progress:* {stats.completion_rate}%"},
                ],
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*AI Summary:*\n{summary}"},
            },
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"Generated on {_ts_local(generated_at)}"},
                ],
            },
        ],
    }


class NotificationDispatcher:
    """Posts a task-list summary to an incoming webhook (Slack-compatible)."""

    def __init__(
        self,
        webhook_url: str | None,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._clock = clock

    @classmethod
    def from_settings(cls, settings, *, client: httpx.AsyncClient | None = None) -> NotificationDispatcher:
        return cls(
            getattr(settings, "webhook_url", None),
            timeout=getattr(settings, "http_timeout_seconds", None),
            client=client,
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def dispatch(self, summary: str, tasks: Sequence[Task]) -> None:
        if not is_configured(self._webhook_url):
            raise ConfigurationError(
                "Slack webhook URL not configured. Set TODO_WEBHOOK_URL in your .env.", service=SERVICE
            )

        stats = TaskStats.from_tasks(tasks)
        message = build_summary_message(summary, stats, self._clock())

        client = self._get_client()
        try:
            resp = await client.post(str(self._webhook_url).strip(), json=message)
        except httpx.RequestError as e:
            raise TransportError(f"Webhook unreachable: {e.__class__.__name__}") from e

        if not resp.is_success:
            logger.warning("Webhook returned HTTP %s", resp.status_code)
            raise ServiceError(resp.status_code, f"Slack webhook error: {resp.status_code}", service=SERVICE)

        logger.info(
            "Summary posted to webhook (total=%d completed=%d rate=%d%%)",
            stats.total,
            stats.completed,
            stats.completion_rate,
        )

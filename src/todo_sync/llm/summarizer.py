# src/todo_sync/llm/summarizer.py

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..config import is_configured
from ..errors import ConfigurationError, ServiceError, TransportError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

SERVICE = "openai"

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful productivity assistant that provides concise, "
    "actionable summaries of todo lists."
)

SUMMARY_INSTRUCTIONS = """
Please provide a concise and insightful summary of this todo list. Include:
1. Overall progress assessment
2. Key themes or categories of tasks
3. Priority recommendations
4. Brief motivational insight
""".strip()


def build_summary_prompt(tasks: Sequence[Task]) -> str:
    """
    Deterministic user prompt for a task snapshot.

    Task lines keep collection order; the statistics come from a stable
    completed/pending partition of the same snapshot.
    """
    completed = [t for t in tasks if t.completed]
    pending = [t for t in tasks if not t.completed]

    todo_lines = "\n".join(
        f"- {t.text} ({'completed' if t.completed else 'pending'})" for t in tasks
    )

    return (
        f"{SUMMARY_INSTRUCTIONS}\n"
        "\n"
        "Todo List:\n"
        f"{todo_lines}\n"
        "\n"
        "Statistics:\n"
        f"- Total tasks: {len(tasks)}\n"
        f"- Completed: {len(completed)}\n"
        f"- Pending: {len(pending)}"
    )


class SummaryGenerator:
    """
    One-shot chat-completion summarizer (OpenAI-compatible API).

    IMPORTANT:
    - No secrets required at construction time; the key is checked on each call.
    - Automatic SDK retries are disabled: a failed call surfaces immediately.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 300,
        temperature: float = 0.7,
        timeout: float | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings, *, client: AsyncOpenAI | None = None) -> SummaryGenerator:
        return cls(
            api_key=getattr(settings, "openai_api_key", None),
            base_url=getattr(settings, "openai_base_url", "https://api.openai.com/v1"),
            model=getattr(settings, "openai_model", "gpt-3.5-turbo"),
            max_tokens=int(getattr(settings, "summary_max_tokens", 300)),
            temperature=float(getattr(settings, "summary_temperature", 0.7)),
            timeout=getattr(settings, "http_timeout_seconds", None),
            client=client,
        )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=str(self._api_key),
                base_url=self._base_url,
                max_retries=0,
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.close()
        self._client = None

    def build_request(self, tasks: Sequence[Task]) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": build_summary_prompt(tasks)},
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }

    async def summarize(self, tasks: Sequence[Task]) -> str:
        if not is_configured(self._api_key):
            raise ConfigurationError(
                "OpenAI API key not configured. Set TODO_OPENAI_API_KEY in your .env.", service=SERVICE
            )

        client = self._get_client()
        request = self.build_request(tasks)
        logger.info("Summary: requesting model=%s tasks=%d", self._model, len(tasks))

        try:
            completion = await client.chat.completions.create(**request)
            content = completion.choices[0].message.content if completion.choices else None
        except openai.APIStatusError as e:
            logger.warning("Summary: service returned HTTP %s", e.status_code)
            raise ServiceError(e.status_code, f"OpenAI API error: {e.status_code}", service=SERVICE) from e
        except openai.APIConnectionError as e:
            # APITimeoutError is a subclass.
            raise TransportError(f"OpenAI API unreachable: {e.__class__.__name__}") from e
        except (openai.APIError, ValueError, AttributeError, TypeError) as e:
            # 2xx with a body that is not a chat completion (gateway page, bad JSON, wrong shape).
            logger.warning("Summary: malformed response (%s)", e.__class__.__name__)
            raise ServiceError(200, "OpenAI API returned a malformed response", service=SERVICE) from e

        if not isinstance(content, str) or not content:
            raise ServiceError(200, "OpenAI API returned no completion text", service=SERVICE)

        logger.debug("Summary produced len=%d", len(content))
        return content

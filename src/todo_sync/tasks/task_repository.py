# src/todo_sync/tasks/task_repository.py

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

import httpx

from ..config import is_configured
from ..errors import ConfigurationError, RemoteError, TransportError
from .task_models import Task, TaskUpdate
from .wire_codec import decode, decode_document, decode_update_response, encode, encode_partial

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class ListFailurePolicy(StrEnum):
    """
    What list() does when the fetch itself fails.

    DEGRADE_TO_EMPTY: log and return [] (callers cannot tell "empty" from "failed").
    RAISE: propagate TransportError / RemoteError like every other call.
    """

    DEGRADE_TO_EMPTY = "degrade"
    RAISE = "raise"

    @classmethod
    def from_config(cls, raw: str | None) -> ListFailurePolicy:
        if not raw:
            return cls.DEGRADE_TO_EMPTY
        try:
            return cls(raw.strip().lower())
        except ValueError:
            logger.warning("Unknown list failure policy %r; using %s", raw, cls.DEGRADE_TO_EMPTY.value)
            return cls.DEGRADE_TO_EMPTY


class TaskRepository:
    """
    Stateless client for the document store's REST collection.

    One collection URL addresses the whole list; `{collection_url}/{id}` addresses
    a single task. The repository owns no task state.

    The httpx client is created lazily and reused; pass one in to share a
    connection pool or to plug in a test transport.
    """

    def __init__(
        self,
        collection_url: str | None,
        *,
        token: str | None = None,
        list_failure_policy: ListFailurePolicy = ListFailurePolicy.DEGRADE_TO_EMPTY,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._collection_url = (collection_url or "").strip().rstrip("/")
        self._token = token
        self._list_failure_policy = list_failure_policy
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings, *, client: httpx.AsyncClient | None = None) -> TaskRepository:
        return cls(
            getattr(settings, "collection_url", None),
            token=getattr(settings, "store_token", None),
            list_failure_policy=ListFailurePolicy.from_config(
                getattr(settings, "list_failure_policy", None)
            ),
            timeout=getattr(settings, "http_timeout_seconds", None),
            client=client,
        )

    @property
    def list_failure_policy(self) -> ListFailurePolicy:
        return self._list_failure_policy

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    # ---- low-level helpers ----

    def _base_url(self) -> str:
        if not is_configured(self._collection_url):
            raise ConfigurationError(
                "Document store collection URL is not set. Set TODO_COLLECTION_URL in your .env.",
                service="store",
            )
        return self._collection_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = dict(_JSON_HEADERS) if with_body else {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> httpx.Response:
        client = self._get_client()
        try:
            resp = await client.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=self._headers(json_body is not None),
            )
        except httpx.RequestError as e:
            raise TransportError(f"{method} {url} failed: {e.__class__.__name__}") from e

        if not resp.is_success:
            raise RemoteError(resp.status_code, f"{method} {url} -> HTTP {resp.status_code}")
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return None

    # ---- public API ----

    async def list(self) -> list[Task]:
        url = self._base_url()
        logger.debug("Fetching tasks from %s", url)
        try:
            resp = await self._request("GET", url)
        except (TransportError, RemoteError) as e:
            if self._list_failure_policy == ListFailurePolicy.RAISE:
                raise
            logger.warning("Fetching tasks failed (%s); treating the list as empty", e)
            return []

        payload = self._json(resp)
        raw_docs = payload.get("documents") if isinstance(payload, dict) else None
        if not isinstance(raw_docs, list):
            raw_docs = []

        tasks: list[Task] = []
        for raw in raw_docs:
            doc = decode_document(raw)
            task = decode(doc) if doc is not None else None
            if task is None or task.id is None:
                logger.warning("Skipping invalid document: %r", raw)
                continue
            tasks.append(task)

        logger.info("Fetched %d task(s) (%d skipped)", len(tasks), len(raw_docs) - len(tasks))
        return tasks

    async def create(self, task: Task) -> Task:
        url = self._base_url()
        body = encode(task).to_json()
        logger.debug("Creating task text=%r", task.text)

        resp = await self._request("POST", url, json_body=body)

        doc = decode_document(self._json(resp))
        task_id = doc.doc_id if doc is not None else None
        if task_id is None:
            raise RemoteError(resp.status_code, "Document store did not return a resource name")

        logger.info("Task created id=%s", task_id)
        return Task(
            id=task_id,
            text=task.text,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        url = f"{self._base_url()}/{task_id}"
        doc = encode_partial(updates)
        # The mask is built from the body, so they always name the same fields.
        params = [("updateMask.fieldPaths", name) for name in doc.fields]
        logger.debug("Updating task id=%s fields=%s", task_id, list(doc.fields))

        resp = await self._request("PATCH", url, json_body=doc.to_json(), params=params)

        updated = decode_update_response(task_id, decode_document(self._json(resp)))
        logger.info("Task updated id=%s", task_id)
        return updated

    async def delete(self, task_id: str) -> None:
        url = f"{self._base_url()}/{task_id}"
        await self._request("DELETE", url)
        logger.info("Task deleted id=%s", task_id)

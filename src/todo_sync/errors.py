# src/todo_sync/errors.py

"""
Error taxonomy shared by the store client, the summarizer and the webhook dispatcher.

Library exceptions (httpx, openai) never leak past the component that caught them:
they are translated into one of these types and chained with `raise ... from`.
"""

from __future__ import annotations


class TodoSyncError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(TodoSyncError):
    """A required credential or URL is missing or still a placeholder."""

    def __init__(self, message: str, *, service: str | None = None) -> None:
        # Which collaborator is unconfigured ("store", "openai", "webhook").
        self.service = service
        super().__init__(message)


class ValidationError(TodoSyncError):
    """Caller input rejected before any remote call (e.g. blank task text)."""


class TransportError(TodoSyncError):
    """Network-level failure: DNS, connect, reset, protocol error."""


class RemoteError(TodoSyncError):
    """The document store answered with a non-2xx status."""

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = int(status)
        super().__init__(message or f"Document store error: HTTP {self.status}")


class ServiceError(TodoSyncError):
    """The text-generation service or the webhook answered with a non-2xx status."""

    def __init__(self, status: int, message: str | None = None, *, service: str | None = None) -> None:
        self.status = int(status)
        self.service = service
        super().__init__(message or f"Service error: HTTP {self.status}")


class NotFoundError(TodoSyncError):
    """A mutation targets an id that is not in the local collection."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class StoreBusyError(TodoSyncError):
    """Another mutation (or load) is still in flight."""

    def __init__(self) -> None:
        super().__init__("Another change is still being synced. Try again in a moment.")


def friendly_error_message(err: Exception) -> str:
    """Short user-facing text for an error raised by any component."""
    if isinstance(err, ConfigurationError):
        return f"Not configured: {err}"
    if isinstance(err, ValidationError):
        return str(err) or "Invalid input."
    if isinstance(err, NotFoundError):
        return f"No task with id {err.task_id}."
    if isinstance(err, StoreBusyError):
        return str(err)
    if isinstance(err, TransportError):
        return "Network error. Check your connection and try again."
    if isinstance(err, RemoteError):
        return f"The task store rejected the request (HTTP {err.status}). Please try again."
    if isinstance(err, ServiceError):
        return f"{err} Please check your configuration and try again."
    msg = str(err).strip()
    return msg or "Unexpected error."

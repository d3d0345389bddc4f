# src/todo_sync/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.reporting import ReportStatus, summarize_and_notify
from ..core.state import AppState
from ..errors import (
    ConfigurationError,
    NotFoundError,
    ServiceError,
    StoreBusyError,
    TodoSyncError,
    ValidationError,
    friendly_error_message,
)
from ..tasks.task_models import Task, parse_timestamp

CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
# Text-taking commands also get the unsplit argument string, so spacing inside task text survives.
CommandHandler3 = Callable[[AppState, list[str], str], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        raw = parts[1] if len(parts) > 1 else ""
        args = raw.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 2

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, raw)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_date(raw: str | None) -> str:
    dt = parse_timestamp(raw)
    if dt is None:
        return "unknown"
    return dt.astimezone().strftime("%b %d, %Y %H:%M")


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.text}\n      Created: {_format_date(task.created_at)}"
    if task.updated_at and task.updated_at != task.created_at:
        line += f" • Updated: {_format_date(task.updated_at)}"
    return line


def format_stats(state: AppState) -> str:
    stats = state.store.stats()
    return (
        f"Total: {stats.total} tasks  "
        f"Completed: {stats.completed}  "
        f"Remaining: {stats.pending}  "
        f"Progress: {stats.completion_rate}%"
    )


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    if not tasks:
        return "No tasks yet. Add your first task with /add <text>."
    return "\n".join(format_task(t) for t in tasks) + "\n" + format_stats(state)


async def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(state)


async def cmd_reload(state: AppState, args: list[str]) -> str:
    try:
        tasks = await state.store.load()
    except TodoSyncError as e:
        return f"Failed to load todos. {friendly_error_message(e)}"
    return f"Loaded {len(tasks)} task(s)."


async def cmd_add(state: AppState, args: list[str], raw: str) -> str:
    try:
        task = await state.store.add(raw)
    except (ValidationError, StoreBusyError) as e:
        return friendly_error_message(e)
    except TodoSyncError as e:
        logger.info("Add failed: %s", e)
        return "Failed to add todo. Please try again."
    return f"Added: {format_task(task)}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    try:
        task = await state.store.toggle(args[0])
    except (NotFoundError, StoreBusyError) as e:
        return friendly_error_message(e)
    except TodoSyncError as e:
        logger.info("Toggle failed: %s", e)
        return "Failed to update todo. Please try again."
    return f"{'Completed' if task.completed else 'Reopened'}: {task.text}"


async def cmd_edit(state: AppState, args: list[str], raw: str) -> str:
    parts = raw.split(maxsplit=1)
    if len(parts) < 2:
        return "Usage: /edit <id> <new text>"
    try:
        task = await state.store.edit(parts[0], parts[1])
    except (ValidationError, NotFoundError, StoreBusyError) as e:
        return friendly_error_message(e)
    except TodoSyncError as e:
        logger.info("Edit failed: %s", e)
        return "Failed to update todo. Please try again."
    return f"Updated: {format_task(task)}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    try:
        await state.store.remove(args[0])
    except (NotFoundError, StoreBusyError) as e:
        return friendly_error_message(e)
    except TodoSyncError as e:
        logger.info("Delete failed: %s", e)
        return "Failed to delete todo. Please try again."
    return f"Deleted {args[0]}."


async def cmd_summary(state: AppState, args: list[str]) -> str:
    try:
        outcome = await summarize_and_notify(state.store.tasks, state.summarizer, state.notifier)
    except ConfigurationError as e:
        logger.info("Summary not configured: %s", e)
        if e.service == "openai":
            return "Please configure your OpenAI API key (TODO_OPENAI_API_KEY)."
        return "Please configure your Slack webhook URL (TODO_WEBHOOK_URL)."
    except ServiceError as e:
        logger.info("Summary service error: %s", e)
        if e.service == "openai":
            return "OpenAI API error. Please check your API key and try again."
        return "Failed to generate summary and send to Slack."
    except TodoSyncError as e:
        logger.info("Summary failed: %s", e)
        return "Failed to generate summary and send to Slack."

    if outcome.status == ReportStatus.NOTHING_TO_SUMMARIZE:
        return "No todos to summarize!"
    return f"Summary sent to Slack successfully!\n\n{outcome.summary}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Change a task's text: /edit <id> <text>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("reload", cmd_reload, help_text="Reload tasks from the document store.")
registry.register("stats", cmd_stats, help_text="Show completion statistics.")
registry.register("summary", cmd_summary, help_text="Summarize the list with AI and post it to Slack.")

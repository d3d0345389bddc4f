# src/todo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time: each component checks only the values it needs.
- Placeholder values copied from .env.example count as "not configured".
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TODO"

# Values shipped in .env.example; treated the same as an empty value.
PLACEHOLDER_VALUES = frozenset(
    {
        "your-openai-api-key-here",
        "your-slack-webhook-url-here",
        "your-collection-url-here",
    }
)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def is_configured(value: str | None) -> bool:
    """True when value is a real setting (non-empty and not a known placeholder)."""
    if value is None:
        return False
    v = value.strip()
    return bool(v) and v not in PLACEHOLDER_VALUES


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Document store ----
    collection_url: Optional[str]
    store_token: Optional[str]
    list_failure_policy: str
    # None means "wait forever" (no client-side timeout).
    http_timeout_seconds: Optional[float]

    # ---- Text generation (OpenAI-compatible) ----
    openai_api_key: Optional[str]
    openai_base_url: str
    openai_model: str
    summary_max_tokens: int
    summary_temperature: float

    # ---- Webhook ----
    webhook_url: Optional[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-sync") or "todo-sync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo-sync"))

        collection_url = _first_env(_k("COLLECTION_URL"), default=None)
        store_token = _first_env(_k("STORE_TOKEN"), default=None)
        list_failure_policy = _env(_k("LIST_FAILURE_POLICY"), "degrade").strip().lower()

        timeout = _env_float(_k("HTTP_TIMEOUT_SECONDS"), None)
        if timeout is not None and timeout <= 0:
            timeout = None

        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        openai_model = _env(_k("OPENAI_MODEL"), "gpt-3.5-turbo")
        summary_max_tokens = _env_int(_k("SUMMARY_MAX_TOKENS"), 300)
        summary_temperature = _env_float(_k("SUMMARY_TEMPERATURE"), 0.7)

        webhook_url = _first_env(_k("WEBHOOK_URL"), "SLACK_WEBHOOK_URL", default=None)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            collection_url=collection_url,
            store_token=store_token,
            list_failure_policy=list_failure_policy,
            http_timeout_seconds=timeout,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            openai_model=openai_model,
            summary_max_tokens=summary_max_tokens,
            summary_temperature=0.7 if summary_temperature is None else summary_temperature,
            webhook_url=webhook_url,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS

# src/quote_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the quote API key is optional;
  without it the startup seeding is simply skipped).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TODO"

DEFAULT_QUOTE_API_HOST = "andruxnet-random-famous-quotes.p.rapidapi.com"
DEFAULT_QUOTE_API_URL = f"https://{DEFAULT_QUOTE_API_HOST}/"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
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


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
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


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    storage_key: str

    # ---- Startup seeding / quote API ----
    seed_on_startup: bool
    quote_api_url: str
    quote_api_key: Optional[str]
    quote_api_host: str
    quote_category: str
    quote_count: int
    quote_timeout_seconds: float

    @property
    def quote_api_configured(self) -> bool:
        return bool(self.quote_api_key and self.quote_api_key.strip() and self.quote_api_url.strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "quote-todo").strip() or "quote-todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/quote-todo"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        seed_on_startup = _env_bool(_k("SEED_ON_STARTUP"), True)

        # RAPIDAPI_KEY is accepted so one key can be shared across local tools.
        quote_api_key = _first_env(_k("QUOTE_API_KEY"), "RAPIDAPI_KEY", default=None)
        quote_api_url = _env(_k("QUOTE_API_URL"), DEFAULT_QUOTE_API_URL).strip()
        quote_api_host = _env(_k("QUOTE_API_HOST"), DEFAULT_QUOTE_API_HOST).strip()
        quote_category = _env(_k("QUOTE_CATEGORY"), "famous").strip() or "famous"
        quote_count = max(1, _env_int(_k("QUOTE_COUNT"), 10))
        quote_timeout_seconds = max(0.1, _env_float(_k("QUOTE_TIMEOUT_SECONDS"), 10.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            storage_key=storage_key,
            seed_on_startup=seed_on_startup,
            quote_api_url=quote_api_url,
            quote_api_key=quote_api_key,
            quote_api_host=quote_api_host,
            quote_category=quote_category,
            quote_count=quote_count,
            quote_timeout_seconds=quote_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

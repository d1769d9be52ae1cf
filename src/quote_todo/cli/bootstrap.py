# src/quote_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task store and the task list manager into AppState,
- loads the persisted list and kicks off the startup quote seeding.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import QuoteSource
from ..core.state import AppState
from ..quotes.seeder import start_seeder_in_background
from ..tasks.task_list import TaskListManager
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState with an empty in-memory list (nothing loaded yet).

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path, key=getattr(settings, "storage_key", "tasks"))
    return AppState(
        settings=settings,
        task_store=store,
        task_list=TaskListManager(store),
    )


def start_app(state: AppState, *, quote_source: QuoteSource | None = None) -> AppState:
    """
    Startup sequence: load persisted tasks, then start seeding in the background.

    Returns without waiting for the network.
    """
    state.task_list.load()
    state.seeder = start_seeder_in_background(state.task_list, state.settings, source=quote_source)
    return state

# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from quote_todo.core.state import AppState
from quote_todo.tasks.task_list import TaskListManager
from quote_todo.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="quote-todo-test",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        storage_key="tasks",
        seed_on_startup=True,
        quote_api_configured=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path, key=settings.storage_key)


@pytest.fixture()
def manager(store: TaskStore) -> TaskListManager:
    return TaskListManager(store)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, manager: TaskListManager) -> AppState:
    """
    AppState wired with the real SQLite store.

    The store is part of the behavior under test, so it is not faked here.
    """
    return AppState(settings=settings, task_store=store, task_list=manager)

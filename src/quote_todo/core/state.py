# src/quote_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..tasks.task_list import TaskListManager
from ..tasks.task_store import TaskStore

if TYPE_CHECKING:
    from ..quotes.seeder import SeederRunner


@dataclass
class AppState:
    # Settings object (real Settings or a test double with the same attributes).
    settings: object

    task_store: TaskStore
    task_list: TaskListManager

    # View state owned by the presentation side: positions shown to the user
    # always refer to task_list.query(search_text).
    search_text: str = ""

    seeder: SeederRunner | None = None

# src/quote_todo/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    `id` is generated at creation and never changes; it is the only key used
    for lookup, update and delete. Stored records use the labels
    `id`, `title`, `isCompleted`.
    """

    title: str
    is_completed: bool = False
    id: str = field(default_factory=new_task_id)

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "isCompleted": self.is_completed}

    @classmethod
    def from_record(cls, record: Any) -> Task:
        """
        Strict decode of a stored record.

        Raises ValueError/TypeError on anything that is not a well-formed record;
        the store turns those into a decode failure of the whole collection.
        """
        if not isinstance(record, dict):
            raise TypeError(f"task record must be an object, got {type(record).__name__}")

        task_id = record["id"]
        title = record["title"]
        done = record["isCompleted"]

        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task id must be a non-empty string")
        if not isinstance(title, str):
            raise TypeError("task title must be a string")
        if not isinstance(done, bool):
            raise TypeError("isCompleted must be a boolean")

        return cls(title=title, is_completed=done, id=task_id)


@dataclass(frozen=True, slots=True)
class Quote:
    """A record from the remote quote service. Only `quote` is ever used."""

    quote: str
    author: str
    category: str

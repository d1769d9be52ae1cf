# src/quote_todo/tasks/errors.py

from __future__ import annotations


class TodoError(Exception):
    """Base class for every error raised by quote_todo."""


class PersistenceError(TodoError):
    pass


class PersistenceEncodeError(PersistenceError):
    """The task collection could not be serialized."""


class PersistenceDecodeError(PersistenceError):
    """Stored data is present but is not a valid task collection."""


class TaskNotFoundError(TodoError, LookupError):
    """No task with the given id (usually a stale reference held by the caller)."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"No task with id={task_id}")
        self.task_id = task_id


class PositionOutOfRangeError(TodoError, IndexError):
    """A delete position does not exist in the view it was taken from."""

    def __init__(self, position: int, size: int) -> None:
        super().__init__(f"Position {position} is out of range (view has {size} task(s))")
        self.position = position
        self.size = size

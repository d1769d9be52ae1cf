# src/quote_todo/tasks/task_list.py

from __future__ import annotations

"""
Task list manager.

Owns the single in-memory, insertion-ordered task collection. Every mutation:
- runs on a working copy under one lock,
- replaces the collection only if the mutation succeeded,
- saves the whole collection before the lock is released.

Readers (query, get, tasks) get copies, so nothing outside this class can
change the collection without going through an operation.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import TypeVar

from ..core.ports import TaskRepo
from .errors import PositionOutOfRangeError, TaskNotFoundError
from .task_models import Task, new_task_id

logger = logging.getLogger(__name__)

T = TypeVar("T")
TaskMutator = Callable[[Task], None]


def _matches(task: Task, needle: str) -> bool:
    return needle in task.title.casefold()


class TaskListManager:
    def __init__(self, store: TaskRepo) -> None:
        self._store = store
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

    # ---- internals ----

    @staticmethod
    def _index_of(tasks: list[Task], task_id: str) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    @staticmethod
    def _view(tasks: list[Task], filter_text: str) -> list[Task]:
        if not filter_text:
            return list(tasks)
        needle = filter_text.casefold()
        return [t for t in tasks if _matches(t, needle)]

    def _mutate_and_persist(self, mutation: Callable[[list[Task]], T]) -> T:
        with self._lock:
            working = [replace(t) for t in self._tasks]
            result = mutation(working)
            # A store that raises leaves the collection as it was.
            persisted = self._store.save(working)
            self._tasks = working
            if not persisted:
                logger.warning("Task list changed but could not be persisted (%d task(s) in memory).", len(working))
            return result

    # ---- lifecycle ----

    def load(self) -> int:
        """Replace the in-memory collection with whatever the store holds."""
        loaded = self._store.load()
        with self._lock:
            self._tasks = loaded
        logger.info("Task list loaded: %d task(s)", len(loaded))
        return len(loaded)

    # ---- reads ----

    @property
    def tasks(self) -> list[Task]:
        with self._lock:
            return [replace(t) for t in self._tasks]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get(self, task_id: str) -> Task:
        with self._lock:
            return replace(self._tasks[self._index_of(self._tasks, task_id)])

    def query(self, filter_text: str = "") -> list[Task]:
        """
        Tasks whose title contains `filter_text`, ignoring case.
        An empty filter returns the whole collection. Order is preserved.
        """
        with self._lock:
            return [replace(t) for t in self._view(self._tasks, filter_text)]

    # ---- mutations ----

    def create(self, title: str) -> Task:
        """Append a new, not-completed task. Any string is accepted as a title."""
        if not isinstance(title, str):
            raise TypeError("title must be a string")
        task = Task(title=title)

        def apply(tasks: list[Task]) -> Task:
            # Ids must stay unique within the collection.
            while any(t.id == task.id for t in tasks):
                task.id = new_task_id()
            tasks.append(task)
            return replace(task)

        created = self._mutate_and_persist(apply)
        logger.info("Task created id=%s", created.id)
        return created

    def update(self, task_id: str, mutator: TaskMutator) -> Task:
        """
        Apply `mutator` to the task with `task_id` and persist.

        The mutator may change `title` and `is_completed`. Raises
        TaskNotFoundError for an unknown id; ValueError if the mutator
        touched the id (the collection is left unchanged in both cases).
        """

        def apply(tasks: list[Task]) -> Task:
            target = tasks[self._index_of(tasks, task_id)]
            mutator(target)
            if target.id != task_id:
                raise ValueError("task id is immutable")
            return replace(target)

        updated = self._mutate_and_persist(apply)
        logger.debug("Task updated id=%s completed=%s", task_id, updated.is_completed)
        return updated

    def rename(self, task_id: str, title: str) -> Task:
        def set_title(task: Task) -> None:
            task.title = title

        return self.update(task_id, set_title)

    def set_completed(self, task_id: str, done: bool = True) -> Task:
        def set_done(task: Task) -> None:
            task.is_completed = bool(done)

        return self.update(task_id, set_done)

    def toggle(self, task_id: str) -> Task:
        def flip(task: Task) -> None:
            task.is_completed = not task.is_completed

        return self.update(task_id, flip)

    def delete(self, task_id: str) -> Task:
        def apply(tasks: list[Task]) -> Task:
            return tasks.pop(self._index_of(tasks, task_id))

        removed = self._mutate_and_persist(apply)
        logger.info("Task deleted id=%s", task_id)
        return removed

    def delete_at(self, positions: Iterable[int], filter_text: str = "") -> list[Task]:
        """
        Delete by position in the view produced by `query(filter_text)`.

        Positions are resolved to ids before anything is removed, so deleting
        from a filtered view removes exactly the tasks the caller saw. Any
        invalid position rejects the whole call.
        """
        requested = list(positions)

        with self._lock:
            view = self._view(self._tasks, filter_text)
            for pos in requested:
                if isinstance(pos, bool) or not isinstance(pos, int) or not 0 <= pos < len(view):
                    raise PositionOutOfRangeError(pos, len(view))
            wanted = sorted(set(requested))
            if not wanted:
                return []
            doomed = {view[pos].id for pos in wanted}

            def apply(tasks: list[Task]) -> list[Task]:
                removed = [t for t in tasks if t.id in doomed]
                tasks[:] = [t for t in tasks if t.id not in doomed]
                return removed

            removed = self._mutate_and_persist(apply)

        logger.info("Deleted %d task(s) (filter=%r)", len(removed), filter_text)
        return removed

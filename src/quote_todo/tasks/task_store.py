# src/quote_todo/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from .errors import PersistenceDecodeError, PersistenceEncodeError
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def encode_tasks(tasks: Iterable[Task]) -> str:
    """
    Serialize the whole collection as a JSON array of labeled records.

    The result is guaranteed to be valid UTF-8 text (titles with lone
    surrogates are rejected here, not by the database driver).
    """
    try:
        payload = json.dumps([t.to_record() for t in tasks], ensure_ascii=False)
        payload.encode("utf-8")
    except (TypeError, ValueError, AttributeError) as e:
        raise PersistenceEncodeError(str(e)) from e
    return payload


def decode_tasks(raw: str | bytes) -> list[Task]:
    """
    Decode a stored collection.

    All-or-nothing: one bad record (or a duplicated id) rejects the whole payload.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise PersistenceDecodeError(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceDecodeError(f"expected a JSON array, got {type(data).__name__}")

    tasks: list[Task] = []
    seen: set[str] = set()
    for i, rec in enumerate(data):
        try:
            task = Task.from_record(rec)
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceDecodeError(f"bad record at index {i}: {e!r}") from e
        if task.id in seen:
            raise PersistenceDecodeError(f"duplicate task id {task.id!r} at index {i}")
        seen.add(task.id)
        tasks.append(task)
    return tasks


class TaskStore:
    """
    Durable key-value slot holding the whole task collection.

    Backed by a single SQLite table (key -> JSON text). The collection is always
    written and read as a unit; there is no per-task storage.

    Failure policy:
    - save() never raises; failures are logged and reported via the return value
    - load() never raises; missing or undecodable data yields an empty list

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, key: str = DEFAULT_STORAGE_KEY) -> None:
        if not key or not key.strip():
            raise ValueError("storage key is required")
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key.strip()
        self._ensure_schema()
        logger.info("TaskStore ready db=%s key=%s", self._db_path, self._key)

    @property
    def key(self) -> str:
        return self._key

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read_raw(self) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
            return None if row is None else row[0]
        finally:
            conn.close()

    def _write_raw(self, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (self._key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def save(self, tasks: Iterable[Task]) -> bool:
        """
        Replace the stored collection with `tasks`.

        Returns True when the data reached storage. On failure the in-memory
        collection is still correct but not persisted; the caller decides
        whether to surface that.
        """
        try:
            payload = encode_tasks(tasks)
        except PersistenceEncodeError:
            logger.exception("Failed to encode tasks; nothing saved.")
            return False

        try:
            self._write_raw(payload)
        except (sqlite3.Error, UnicodeError):
            logger.exception("Failed to write tasks to %s", self._db_path)
            return False

        logger.debug("Saved tasks key=%s bytes=%d", self._key, len(payload.encode("utf-8")))
        return True

    def load(self) -> list[Task]:
        try:
            raw = self._read_raw()
        except sqlite3.Error:
            logger.exception("Failed to read tasks from %s; starting empty.", self._db_path)
            return []

        if raw is None:
            logger.info("No stored tasks under key=%s; starting empty.", self._key)
            return []

        try:
            tasks = decode_tasks(raw)
        except PersistenceDecodeError as e:
            logger.warning("Stored tasks are unreadable (%s); starting empty.", e)
            return []

        logger.info("Loaded %d task(s) from key=%s", len(tasks), self._key)
        return tasks

    def clear(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (self._key,))
            conn.commit()
        finally:
            conn.close()

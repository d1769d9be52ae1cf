# src/quote_todo/quotes/seeder.py

from __future__ import annotations

"""
Startup seeding.

One best-effort fetch from the quote service; if it yields at least one quote,
the first one becomes a new task. Every failure is logged and dropped: seeding
is enrichment, not a feature the app depends on.

The fetch runs in a background thread with its own event loop so that loading
and showing the persisted list never waits on the network. Its result reaches
the collection only through TaskListManager.create, which serializes all
mutations behind the manager's lock.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.ports import QuoteSource
from ..logging_setup import SEEDER_THREAD_NAME
from ..tasks.task_list import TaskListManager
from ..tasks.task_models import Task
from .client import QuoteClient, QuoteError

logger = logging.getLogger(__name__)


async def seed_from_quotes(manager: TaskListManager, source: QuoteSource) -> Task | None:
    """
    Fetch quotes once and add the first one as a task.

    Returns the created task, or None if nothing was added. Never raises
    (cancellation excepted).
    """
    try:
        quotes = await source.fetch_quotes()
    except QuoteError as e:
        logger.info("Quote seeding skipped: %s", e)
        return None
    except Exception:
        logger.exception("Quote seeding failed unexpectedly.")
        return None

    if not quotes:
        logger.info("Quote service returned no quotes; nothing to seed.")
        return None

    try:
        task = manager.create(quotes[0].quote)
    except Exception:
        logger.exception("Failed to add seeded quote as a task.")
        return None

    logger.info("Seeded task id=%s from quote by %s", task.id, quotes[0].author or "unknown")
    return task


@dataclass
class SeederRunner:
    thread: threading.Thread
    result: dict[str, Task | None]

    @property
    def done(self) -> bool:
        return not self.thread.is_alive()

    @property
    def seeded_task(self) -> Task | None:
        return self.result.get("task")

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_seeder_in_background(
    manager: TaskListManager,
    settings,
    *,
    source: QuoteSource | None = None,
) -> SeederRunner | None:
    """
    Fire-and-forget: start the seeding in a daemon thread and return at once.

    Returns None when seeding is disabled or the quote API is not configured.
    """
    if not getattr(settings, "seed_on_startup", True):
        logger.info("Quote seeding disabled via settings.")
        return None

    if source is None:
        if not getattr(settings, "quote_api_configured", False):
            logger.info("Quote API key is not set; skipping startup seeding.")
            return None
        source = QuoteClient.from_settings(settings)

    result: dict[str, Task | None] = {"task": None}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            result["task"] = loop.run_until_complete(seed_from_quotes(manager, source))
        except Exception:
            logger.exception("Quote seeder thread crashed.")
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_asyncgens())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=SEEDER_THREAD_NAME, daemon=True)
    t.start()
    logger.debug("Quote seeder thread started.")
    return SeederRunner(thread=t, result=result)

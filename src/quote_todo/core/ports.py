# src/quote_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and the quote provider swappable and makes testing easier.
"""

from typing import Iterable, Protocol

from ..tasks.task_models import Quote, Task


class TaskRepo(Protocol):
    """Durable slot for the whole task collection (see TaskStore)."""

    def save(self, tasks: Iterable[Task]) -> bool: ...
    def load(self) -> list[Task]: ...


class QuoteSource(Protocol):
    """
    Remote quote provider.

    Raises QuoteError subclasses on failure; the seeder decides what to do with them.
    """

    async def fetch_quotes(self) -> list[Quote]: ...

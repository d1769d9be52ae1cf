# src/quote_todo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.state import AppState
from ..tasks.errors import TodoError
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    handler: CommandHandler
    summary: str
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def usage_line(self) -> str:
        names = " | ".join(f"/{n}" for n in (self.name, *self.aliases))
        return f"  {names} - {self.summary}"


class CommandRegistry:
    """Slash commands understood by the console (/add, /rm, ...), in help order."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._by_name: dict[str, Command] = {}

    def register(self, cmd: Command) -> Command:
        keys = [k.lower() for k in (cmd.name, *cmd.aliases)]
        taken = [k for k in keys if k in self._by_name]
        if taken:
            raise ValueError(f"command /{taken[0]} is already registered")
        for key in keys:
            self._by_name[key] = cmd
        self._commands.append(cmd)
        return cmd

    def command(self, name: str, summary: str, *aliases: str) -> Callable[[CommandHandler], CommandHandler]:
        def deco(handler: CommandHandler) -> CommandHandler:
            self.register(Command(name=name, handler=handler, summary=summary, aliases=aliases))
            return handler

        return deco

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Run "/name args..." and return its reply; None if `line` is not a command.

        Task list errors (stale ids, bad positions) become an "Error: ..." reply.
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        cmd = self._by_name.get(name.lower())
        if cmd is None:
            return f"Unknown command: /{name.lower()}. Use /help to list available commands."

        try:
            return cmd.handler(state, rest.split())
        except TodoError as e:
            logger.info("/%s rejected: %s", cmd.name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        return "\n".join(["Commands (positions refer to the list as shown):", *(c.usage_line for c in self._commands)])


registry = CommandRegistry()


def render_task(position: int, task: Task) -> str:
    mark = "x" if task.is_completed else " "
    return f"{position}. [{mark}] {task.title}"


def render_view(state: AppState) -> str:
    view = state.task_list.query(state.search_text)
    if state.search_text:
        header = f"Tasks matching {state.search_text!r} ({len(view)}):"
    else:
        header = f"Tasks ({len(view)}):"
    if not view:
        return header + "\n  (empty)"
    return "\n".join([header, *(f"  {render_task(i, t)}" for i, t in enumerate(view, start=1))])


def _parse_positions(args: list[str]) -> list[int] | None:
    """1-based positions as typed by the user -> 0-based view positions."""
    out: list[int] = []
    for a in args:
        for piece in a.split(","):
            if not piece:
                continue
            try:
                out.append(int(piece) - 1)
            except ValueError:
                return None
    return out


def _task_at(state: AppState, arg: str) -> Task | str:
    """Resolve a 1-based position in the current view to a task, or an error reply."""
    try:
        pos = int(arg) - 1
    except ValueError:
        return f"Not a position: {arg!r}."
    view = state.task_list.query(state.search_text)
    if not 0 <= pos < len(view):
        return f"No task at position {arg} (view has {len(view)})."
    return view[pos]


@registry.command("help", "Show available commands.", "h", "?")
def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


@registry.command("add", "Add a task: /add <title>.", "new")
def cmd_add(state: AppState, args: list[str]) -> str:
    title = " ".join(args).strip()
    if not title:
        return "Usage: /add <title>"
    task = state.task_list.create(title)
    return f"Added: {task.title}"


@registry.command("list", "Show the current view.", "ls")
def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state)


@registry.command("search", "Filter by title: /search <text> (no text clears).")
def cmd_search(state: AppState, args: list[str]) -> str:
    """
    /search         -> clear the filter
    /search <text>  -> show only tasks whose title contains <text>
    """
    state.search_text = " ".join(args)
    return render_view(state)


def _set_done(state: AppState, args: list[str], done: bool | None) -> str:
    if len(args) != 1:
        return "Usage: /done <n> | /undone <n> | /toggle <n>"
    found = _task_at(state, args[0])
    if isinstance(found, str):
        return found
    if done is None:
        task = state.task_list.toggle(found.id)
    else:
        task = state.task_list.set_completed(found.id, done)
    return f"{'Completed' if task.is_completed else 'Reopened'}: {task.title}"


@registry.command("done", "Mark task <n> completed.")
def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_done(state, args, True)


@registry.command("undone", "Mark task <n> not completed.")
def cmd_undone(state: AppState, args: list[str]) -> str:
    return _set_done(state, args, False)


@registry.command("toggle", "Flip completion of task <n>.")
def cmd_toggle(state: AppState, args: list[str]) -> str:
    return _set_done(state, args, None)


@registry.command("rename", "Change a title: /rename <n> <title>.")
def cmd_rename(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /rename <n> <new title>"
    found = _task_at(state, args[0])
    if isinstance(found, str):
        return found
    task = state.task_list.rename(found.id, " ".join(args[1:]))
    return f"Renamed: {task.title}"


@registry.command("rm", "Delete tasks: /rm <n> [n ...].", "del")
def cmd_rm(state: AppState, args: list[str]) -> str:
    """
    /rm 2        -> delete the second task of the current view
    /rm 1 3,4    -> delete several at once
    """
    positions = _parse_positions(args)
    if not positions:
        return "Usage: /rm <n> [n ...]"
    removed = state.task_list.delete_at(positions, state.search_text)
    return "Deleted: " + ", ".join(t.title for t in removed)


@registry.command("status", "Show counts, filter, storage and seeding state.")
def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.task_list.tasks
    done = sum(1 for t in tasks if t.is_completed)
    if state.seeder is None:
        seeding = "off"
    elif not state.seeder.done:
        seeding = "running"
    else:
        seeding = "added a task" if state.seeder.seeded_task else "nothing added"
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} completed)\n"
        f"  Filter: {state.search_text or '(none)'}\n"
        f"  Storage: {state.task_store.db_path} [{state.task_store.key}]\n"
        f"  Quote seeding: {seeding}"
    )

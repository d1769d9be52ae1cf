# src/quote_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState, *, read_line: Callable[[str], str] = input) -> None:
    """
    Line-oriented front end.

    Slash commands go to the command registry; any other non-empty line is
    added as a new task. `read_line` is injectable for tests.
    """
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "quote-todo"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.")
    print(render_view(state))

    while True:
        try:
            user_input = read_line("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/add " + user_input

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")

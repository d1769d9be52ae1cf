# src/quote_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the persisted list, starts the
quote seeder in the background, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state, start_app
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Give an in-flight seed a moment to land; the task list saves on every change."""
    seeder = getattr(state, "seeder", None)
    if seeder is None:
        return
    try:
        seeder.join(timeout=2.0)
        if not seeder.done:
            logger.info("Quote seeder still running at exit; abandoning it.")
    except Exception:
        logger.debug("Seeder join failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    setup_logging(settings)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    start_app(state)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Not available on every platform / outside the main thread.
        pass

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()

# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from quote_todo.logging_setup import (
    SEEDER_THREAD_NAME,
    _PromptFriendlyFilter,
    console_level_for,
    log_file_for,
    setup_logging,
)


def _record(name: str, level: int, thread: str = "MainThread") -> logging.LogRecord:
    rec = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    rec.threadName = thread
    return rec


def test_console_filter_quiets_seeder_thread_and_libraries() -> None:
    f = _PromptFriendlyFilter()

    assert f.filter(_record("quote_todo.cli.commands", logging.INFO))
    assert not f.filter(_record("quote_todo.quotes.seeder", logging.INFO, SEEDER_THREAD_NAME))
    # Records emitted by the manager on behalf of the seeder are quiet too.
    assert not f.filter(_record("quote_todo.tasks.task_list", logging.INFO, SEEDER_THREAD_NAME))
    assert f.filter(_record("quote_todo.quotes.seeder", logging.WARNING, SEEDER_THREAD_NAME))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))


@pytest.mark.parametrize(
    "raw, expected",
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("nonsense", logging.INFO)],
)
def test_console_level_from_settings(raw: str, expected: int) -> None:
    assert console_level_for(SimpleNamespace(log_level=raw)) == expected


def test_setup_logging_writes_to_settings_data_dir(tmp_path: Path) -> None:
    settings = SimpleNamespace(app_name="todo-test", data_dir=tmp_path / "data", log_level="INFO")
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level

    try:
        log_file = setup_logging(settings)
        logging.getLogger("quote_todo.test").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == log_file_for(settings) == tmp_path / "data" / "todo-test.log"
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)

# tests/test_task_list.py

from __future__ import annotations

import threading

import pytest

from quote_todo.tasks.errors import PositionOutOfRangeError, TaskNotFoundError
from quote_todo.tasks.task_list import TaskListManager
from quote_todo.tasks.task_models import Task
from quote_todo.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo


def _snapshot(tasks: list[Task]) -> list[tuple[str, str, bool]]:
    return [(t.id, t.title, t.is_completed) for t in tasks]


def test_buy_milk_scenario(manager: TaskListManager) -> None:
    task = manager.create("Buy milk")
    assert [(t.title, t.is_completed) for t in manager.tasks] == [("Buy milk", False)]

    manager.update(task.id, lambda t: setattr(t, "is_completed", True))
    assert [(t.title, t.is_completed) for t in manager.tasks] == [("Buy milk", True)]

    assert len(manager.query("milk")) == 1
    assert manager.query("bread") == []


def test_every_mutation_is_visible_to_a_fresh_store(manager: TaskListManager, store: TaskStore) -> None:
    def reloaded() -> list[tuple[str, str, bool]]:
        return _snapshot(TaskStore(store.db_path, key=store.key).load())

    a = manager.create("a")
    assert reloaded() == _snapshot(manager.tasks)

    b = manager.create("b")
    manager.create("c")
    assert reloaded() == _snapshot(manager.tasks)

    manager.rename(a.id, "a2")
    assert reloaded() == _snapshot(manager.tasks)

    manager.toggle(b.id)
    assert reloaded() == _snapshot(manager.tasks)

    manager.delete_at([0])
    assert reloaded() == _snapshot(manager.tasks)

    manager.delete(b.id)
    assert reloaded() == _snapshot(manager.tasks)
    assert [t.title for t in manager.tasks] == ["c"]


def test_create_defaults_and_unique_ids(manager: TaskListManager) -> None:
    created = [manager.create(f"t{i}") for i in range(50)]
    ids = [t.id for t in manager.tasks]

    assert len(set(ids)) == 50
    assert ids == [t.id for t in created]
    assert all(not t.is_completed for t in created)


def test_create_places_no_constraint_on_title(manager: TaskListManager) -> None:
    assert manager.create("").title == ""


def test_query_is_case_insensitive_and_ordered(manager: TaskListManager) -> None:
    manager.create("Buy MILK")
    manager.create("walk dog")
    manager.create("milkshake")

    assert [t.title for t in manager.query("")] == ["Buy MILK", "walk dog", "milkshake"]
    assert [t.title for t in manager.query("Milk")] == ["Buy MILK", "milkshake"]
    assert manager.query("cat") == []


def test_returned_tasks_are_copies(manager: TaskListManager) -> None:
    task = manager.create("original")
    task.title = "hacked"
    manager.query()[0].title = "hacked too"

    assert manager.get(task.id).title == "original"


def test_update_unknown_id_raises_and_changes_nothing(manager: TaskListManager) -> None:
    manager.create("only")

    with pytest.raises(TaskNotFoundError) as exc:
        manager.update("no-such-id", lambda t: setattr(t, "title", "x"))

    assert exc.value.task_id == "no-such-id"
    assert [t.title for t in manager.tasks] == ["only"]

    with pytest.raises(LookupError):
        manager.delete("no-such-id")


def test_update_cannot_change_id(manager: TaskListManager) -> None:
    task = manager.create("x")

    with pytest.raises(ValueError):
        manager.update(task.id, lambda t: setattr(t, "id", "other"))

    assert [t.id for t in manager.tasks] == [task.id]


def test_failed_mutator_leaves_collection_untouched() -> None:
    repo = FakeTaskRepo()
    manager = TaskListManager(repo)
    task = manager.create("x")

    def boom(t: Task) -> None:
        t.title = "half-done"
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        manager.update(task.id, boom)

    assert manager.get(task.id).title == "x"
    assert len(repo.saves) == 1


def test_delete_all_positions_empties_list(manager: TaskListManager) -> None:
    for title in ("a", "b", "c"):
        manager.create(title)

    removed = manager.delete_at(range(3))

    assert [t.title for t in removed] == ["a", "b", "c"]
    assert manager.tasks == []


@pytest.mark.parametrize("bad", [[3], [-1], [0, 7], [0, "x"], [1.0], [True]])
def test_delete_out_of_range_rejects_whole_call(manager: TaskListManager, bad: list) -> None:
    for title in ("a", "b", "c"):
        manager.create(title)

    with pytest.raises(PositionOutOfRangeError):
        manager.delete_at(bad)

    assert [t.title for t in manager.tasks] == ["a", "b", "c"]


def test_delete_at_filtered_view_removes_what_was_shown(manager: TaskListManager) -> None:
    manager.create("walk dog")
    manager.create("buy milk")
    manager.create("feed cat")
    manager.create("milk the cow")

    # The view for "milk" is ["buy milk", "milk the cow"]; position 1 is the cow.
    removed = manager.delete_at({1}, filter_text="milk")

    assert [t.title for t in removed] == ["milk the cow"]
    assert [t.title for t in manager.tasks] == ["walk dog", "buy milk", "feed cat"]


def test_delete_at_nothing_is_a_noop() -> None:
    repo = FakeTaskRepo()
    manager = TaskListManager(repo)
    manager.create("x")

    assert manager.delete_at([]) == []
    assert len(repo.saves) == 1


def test_save_failure_keeps_memory_state() -> None:
    repo = FakeTaskRepo()
    manager = TaskListManager(repo)
    manager.create("persisted")

    repo.fail_save = True
    manager.create("memory only")

    assert [t.title for t in manager.tasks] == ["persisted", "memory only"]
    assert [t.title for t in repo.load()] == ["persisted"]


def test_load_replaces_collection() -> None:
    repo = FakeTaskRepo([Task(title="from disk", id="1")])
    manager = TaskListManager(repo)
    manager.create("will be dropped")

    assert manager.load() == 1
    assert _snapshot(manager.tasks) == [("1", "from disk", False)]


def test_concurrent_creates_are_serialized(manager: TaskListManager, store: TaskStore) -> None:
    def worker(n: int) -> None:
        for i in range(10):
            manager.create(f"w{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    tasks = manager.tasks
    assert len(tasks) == 40
    assert len({t.id for t in tasks}) == 40
    assert len(TaskStore(store.db_path).load()) == 40


def test_create_rejects_non_string_title(manager: TaskListManager) -> None:
    with pytest.raises(TypeError):
        manager.create(123)  # type: ignore[arg-type]
    assert manager.tasks == []


def test_unencodable_title_stays_in_memory_without_raising(manager: TaskListManager, store: TaskStore) -> None:
    manager.create("fine")

    task = manager.create("bad \udcff byte")

    assert [t.title for t in manager.tasks] == ["fine", "bad \udcff byte"]
    assert task.title == "bad \udcff byte"
    assert [t.title for t in TaskStore(store.db_path).load()] == ["fine"]


def test_store_that_raises_leaves_collection_unchanged() -> None:
    repo = FakeTaskRepo()
    manager = TaskListManager(repo)
    manager.create("before")

    repo.raise_on_save = OSError("disk gone")
    with pytest.raises(OSError):
        manager.create("after")

    assert [t.title for t in manager.tasks] == ["before"]

# tests/test_task_store.py

from __future__ import annotations

import json
import random
import threading
import time
from pathlib import Path

import pytest

from taskminder.errors import CorruptState, InvalidInput, IOFailure, NotFoundInStore, StateNotFound
from taskminder.tasks.task_models import Task
from taskminder.tasks.task_store import TaskStore


def test_list_sorted_by_priority_ties_in_insertion_order(store: TaskStore) -> None:
    store.add_task(Task("c", 3))
    store.add_task(Task("a1", 1))
    store.add_task(Task("b", 2))
    store.add_task(Task("a2", 1))

    assert [t.title for t in store.list_tasks()] == ["a1", "a2", "b", "c"]
    # No mutation -> same sequence.
    assert store.list_tasks() == store.list_tasks()


def test_random_add_remove_matches_reference_model(store: TaskStore) -> None:
    rng = random.Random(1234)
    reference: list[Task] = []

    for _ in range(300):
        if reference and rng.random() < 0.4:
            victim = rng.choice(reference)
            store.remove_task(victim)
            # Store removes the first equal task in listed order; equal tasks are
            # indistinguishable, so removing any equal one from the model is the same.
            reference.remove(victim)
        else:
            task = Task(f"t{rng.randint(0, 5)}", rng.randint(-2, 4), None)
            store.add_task(task)
            reference.append(task)

        listed = store.list_tasks()
        assert sorted(listed, key=lambda t: (t.priority, t.title)) == sorted(
            reference, key=lambda t: (t.priority, t.title)
        )
        assert [t.priority for t in listed] == sorted(t.priority for t in listed)


def test_remove_duplicate_leaves_one(store: TaskStore) -> None:
    dup = Task("same", 1, 100.0)
    store.add_task(dup)
    store.add_task(dup)
    assert store.count() == 2

    store.remove_task(dup)

    assert store.list_tasks() == [dup]


def test_remove_missing_raises(store: TaskStore) -> None:
    store.add_task(Task("a", 1))
    with pytest.raises(NotFoundInStore):
        store.remove_task(Task("a", 2))
    assert len(store) == 1


def test_remove_at_uses_listed_position(store: TaskStore) -> None:
    store.add_task(Task("low", 5))
    store.add_task(Task("high", 1))

    assert store.remove_at(0) == Task("high", 1)
    assert [t.title for t in store.list_tasks()] == ["low"]

    with pytest.raises(NotFoundInStore):
        store.remove_at(1)
    with pytest.raises(NotFoundInStore):
        store.remove_at(-1)


def test_save_then_load_on_fresh_store(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tasks.json"
    src = TaskStore(path)
    tasks = [Task("ü-title", 2, 1_700_000_000.5), Task("b", 1, None), Task("b", 1, None)]
    for t in tasks:
        src.add_task(t)

    assert src.save() == 3
    assert not (tmp_path / "nested" / "tasks.json.tmp").exists()

    fresh = TaskStore(path)
    assert fresh.load() == 3
    assert fresh.list_tasks() == src.list_tasks()

    doc = json.loads(path.read_text("utf-8"))
    assert doc["format"] == "taskminder.tasks"
    assert doc["version"] == 1
    assert doc["tasks"][0] == {"title": "b", "priority": 1, "deadline": None}


def test_load_without_save_raises_not_found_and_stays_empty(store: TaskStore) -> None:
    with pytest.raises(StateNotFound):
        store.load()
    assert store.list_tasks() == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1, 2]),
        json.dumps({"format": "other", "version": 1, "tasks": []}),
        json.dumps({"format": "taskminder.tasks", "version": 99, "tasks": []}),
        json.dumps({"format": "taskminder.tasks", "version": 1, "tasks": {}}),
        json.dumps({"format": "taskminder.tasks", "version": 1, "tasks": [{"title": "x", "priority": "1"}]}),
        json.dumps({"format": "taskminder.tasks", "version": 1, "tasks": [{"title": "x", "priority": True}]}),
        json.dumps(
            {"format": "taskminder.tasks", "version": 1, "tasks": [{"title": "x", "priority": 1, "deadline": "soon"}]}
        ),
    ],
)
def test_corrupt_file_raises_and_keeps_previous_state(store: TaskStore, content: str) -> None:
    store.add_task(Task("keep", 1))
    store.path.write_text(content, "utf-8")

    with pytest.raises(CorruptState):
        store.load()

    assert store.list_tasks() == [Task("keep", 1)]


def test_non_utf8_file_is_corrupt(store: TaskStore) -> None:
    store.path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(CorruptState):
        store.load()


def test_save_failure_raises_io_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", "utf-8")
    store = TaskStore(blocker / "tasks.json")
    store.add_task(Task("a", 1))

    with pytest.raises(IOFailure) as e:
        store.save()
    assert e.value.path == blocker / "tasks.json"


def test_load_replaces_contents(store: TaskStore) -> None:
    store.add_task(Task("saved", 1))
    store.save()
    store.add_task(Task("unsaved", 2))

    assert store.load() == 1
    assert store.list_tasks() == [Task("saved", 1)]


def test_concurrent_add_and_list(store: TaskStore) -> None:
    stop = threading.Event()
    errors: list[AssertionError] = []

    def reader() -> None:
        try:
            while not stop.is_set():
                listed = store.list_tasks()
                assert [t.priority for t in listed] == sorted(t.priority for t in listed)
        except AssertionError as e:
            errors.append(e)

    def writer(offset: int) -> None:
        for i in range(200):
            store.add_task(Task(f"w{offset}-{i}", (i * 7 + offset) % 11))

    r = threading.Thread(target=reader)
    r.start()
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for w in writers:
        w.start()
    for w in writers:
        w.join()
    time.sleep(0.01)
    stop.set()
    r.join()

    assert errors == []
    assert store.count() == 800


@pytest.mark.parametrize("bad", [float("inf"), float("nan")])
def test_save_refuses_non_finite_deadline_and_keeps_file(store: TaskStore, bad: float) -> None:
    store.add_task(Task("keep", 1, None))
    store.save()
    before = store.path.read_text("utf-8")

    store.add_task(Task("x", 2, bad))
    with pytest.raises(InvalidInput):
        store.save()

    assert store.path.read_text("utf-8") == before
    fresh = TaskStore(store.path)
    assert fresh.load() == 1
    assert fresh.list_tasks() == [Task("keep", 1, None)]


def test_concurrent_saves_all_succeed(store: TaskStore) -> None:
    for i in range(20):
        store.add_task(Task(f"t{i}", i % 3, float(i)))

    errors: list[Exception] = []

    def saver() -> None:
        for _ in range(20):
            try:
                store.save()
            except Exception as e:
                errors.append(e)

    threads = [threading.Thread(target=saver) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    fresh = TaskStore(store.path)
    assert fresh.load() == 20
    assert fresh.list_tasks() == store.list_tasks()

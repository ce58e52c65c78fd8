# src/taskminder/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import CorruptState, InvalidInput, IOFailure, NotFoundInStore, StateNotFound
from .task_models import Task

logger = logging.getLogger(__name__)

FILE_FORMAT = "taskminder.tasks"
SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class _Entry:
    seq: int
    task: Task


class TaskStore:
    """
    In-memory task store with explicit JSON persistence.

    Ordering:
    - list_tasks() sorts by priority ascending
    - ties keep insertion order (entries are kept in insertion order and the sort is stable)

    Persistence:
    - nothing is written until save() is called
    - load() replaces the contents only when the whole file is valid

    Thread-safety:
    - every public method holds one re-entrant lock
    - list_tasks() returns a copy, so callers can iterate while others mutate
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        # Serializes the write + os.replace of concurrent save() calls.
        self._save_lock = threading.Lock()
        self._entries: list[_Entry] = []
        self._next_seq = 0

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _new_entry(self, task: Task) -> _Entry:
        entry = _Entry(seq=self._next_seq, task=task)
        self._next_seq += 1
        return entry

    def _ordered(self) -> list[_Entry]:
        return sorted(self._entries, key=lambda e: e.task.priority)

    @staticmethod
    def _task_to_dict(task: Task) -> dict[str, Any]:
        return {"title": task.title, "priority": task.priority, "deadline": task.deadline}

    def _dict_to_task(self, raw: Any, index: int) -> Task:
        if not isinstance(raw, dict):
            raise CorruptState(f"task #{index} is not an object", path=self._path)

        title = raw.get("title")
        priority = raw.get("priority")
        deadline = raw.get("deadline")

        if not isinstance(title, str):
            raise CorruptState(f"task #{index}: title must be a string", path=self._path)
        # bool is an int subclass; reject it explicitly.
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise CorruptState(f"task #{index}: priority must be an integer", path=self._path)
        if deadline is not None:
            if isinstance(deadline, bool) or not isinstance(deadline, (int, float)) or not math.isfinite(deadline):
                raise CorruptState(f"task #{index}: deadline must be a number or null", path=self._path)
            deadline = float(deadline)

        return Task(title=title, priority=priority, deadline=deadline)

    def _decode(self, text: str) -> list[Task]:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptState(f"not valid JSON ({e.msg} at line {e.lineno})", path=self._path) from e

        if not isinstance(doc, dict) or doc.get("format") != FILE_FORMAT:
            raise CorruptState("not a taskminder task file", path=self._path)

        version = doc.get("version")
        if version != SCHEMA_VERSION:
            raise CorruptState(f"unsupported schema version {version!r}", path=self._path)

        raw_tasks = doc.get("tasks")
        if not isinstance(raw_tasks, list):
            raise CorruptState("'tasks' must be a list", path=self._path)

        return [self._dict_to_task(raw, i) for i, raw in enumerate(raw_tasks)]

    # ---- public API ----

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.count()

    def add_task(self, task: Task) -> None:
        """Insert a task. No uniqueness or validation check."""
        with self._lock:
            self._entries.append(self._new_entry(task))
            total = len(self._entries)
        logger.debug("Task added title=%r priority=%s deadline=%s total=%s", task.title, task.priority, task.deadline, total)

    def remove_task(self, task: Task) -> None:
        """
        Remove one task equal to `task` by value.

        With duplicates present, the one listed first (earliest inserted) goes.
        Raises NotFoundInStore if no equal task exists.
        """
        with self._lock:
            for entry in self._ordered():
                if entry.task == task:
                    self._entries.remove(entry)
                    break
            else:
                raise NotFoundInStore(task.describe())
        logger.debug("Task removed title=%r priority=%s", task.title, task.priority)

    def remove_at(self, position: int) -> Task:
        """Remove and return the task at 0-based `position` of list_tasks()."""
        with self._lock:
            ordered = self._ordered()
            if position < 0 or position >= len(ordered):
                raise NotFoundInStore(f"no task at position {position + 1} (have {len(ordered)})")
            entry = ordered[position]
            self._entries.remove(entry)
        logger.debug("Task removed at position=%s title=%r", position, entry.task.title)
        return entry.task

    def list_tasks(self) -> list[Task]:
        """All tasks, priority ascending, ties in insertion order."""
        with self._lock:
            return [e.task for e in self._ordered()]

    def save(self) -> int:
        """
        Write every task to the store path. Returns the number of tasks written.

        The file is written to a sibling .tmp file and moved into place with
        os.replace, so a failed save never leaves a half-written task file.

        Raises:
        - InvalidInput: a task has a non-finite deadline (inf/nan), which the
          file format cannot hold; nothing is written
        - IOFailure: any OS error while writing
        """
        tasks = self.list_tasks()
        for i, t in enumerate(tasks):
            if t.deadline is not None and not math.isfinite(t.deadline):
                raise InvalidInput(f"task #{i} {t.title!r} has a non-finite deadline; not saved", field="deadline")

        doc = {
            "format": FILE_FORMAT,
            "version": SCHEMA_VERSION,
            "tasks": [self._task_to_dict(t) for t in tasks],
        }
        payload = json.dumps(doc, ensure_ascii=False, indent=2, allow_nan=False)

        tmp = self._path.with_name(self._path.name + ".tmp")
        with self._save_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp, self._path)
            except OSError as e:
                with contextlib.suppress(OSError):
                    tmp.unlink()
                logger.error("Failed to save tasks to %s: %s", self._path, e)
                raise IOFailure(f"cannot write {self._path}: {e.strerror or e}", path=self._path) from e

        logger.info("Saved %d tasks to %s", len(tasks), self._path)
        return len(tasks)

    def load(self) -> int:
        """
        Replace the contents with the tasks stored at the store path.

        Returns the number of tasks loaded.

        Raises:
        - StateNotFound: no file yet; contents untouched
        - CorruptState: file is unreadable or has an unknown schema; contents untouched
        - IOFailure: the file exists but cannot be read
        """
        try:
            with open(self._path, encoding="utf-8") as fh:
                text = fh.read()
        except FileNotFoundError as e:
            raise StateNotFound(self._path) from e
        except UnicodeDecodeError as e:
            raise CorruptState("file is not UTF-8 text", path=self._path) from e
        except OSError as e:
            raise IOFailure(f"cannot read {self._path}: {e.strerror or e}", path=self._path) from e

        tasks = self._decode(text)

        with self._lock:
            self._entries = []
            for task in tasks:
                self._entries.append(self._new_entry(task))

        logger.info("Loaded %d tasks from %s", len(tasks), self._path)
        return len(tasks)

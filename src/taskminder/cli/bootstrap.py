# src/taskminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- builds the TaskStore and restores saved tasks,
- wires the ReminderScheduler to the store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..errors import CorruptState, IOFailure, StateNotFound
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def restore_tasks(store: TaskStore) -> int:
    """
    Startup load. A missing or broken file means "start empty", never a crash.

    Returns the number of tasks restored.
    """
    try:
        return store.load()
    except StateNotFound:
        logger.info("No saved tasks at %s; starting empty.", store.path)
    except CorruptState as e:
        logger.warning("Saved tasks at %s are unreadable (%s); starting empty.", store.path, e)
    except IOFailure as e:
        logger.warning("Could not read saved tasks (%s); starting empty.", e)
    return 0


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_path)
    restored = restore_tasks(store)

    reminders = ReminderScheduler(
        store,
        interval_seconds=settings.reminder_interval_seconds,
        lookahead_seconds=settings.reminder_lookahead_seconds,
    )

    logger.info("TaskStore ready path=%s total=%s", store.path, restored)
    return AppState(settings=settings, task_store=store, reminders=reminders)

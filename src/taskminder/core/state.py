# src/taskminder/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are kept on the state so commands can read them.
    settings: object

    task_store: TaskStore
    reminders: ReminderScheduler

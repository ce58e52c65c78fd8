# src/taskminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the console depend on Protocols instead of concrete classes.
This keeps the store swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Reminder, Task


class TaskRepo(Protocol):
    # Console API
    def add_task(self, task: Task) -> None: ...
    def remove_task(self, task: Task) -> None: ...
    def remove_at(self, position: int) -> Task: ...
    def count(self) -> int: ...

    # Persistence
    def save(self) -> int: ...
    def load(self) -> int: ...

    # Scheduler API (the only call the reminder loop makes)
    def list_tasks(self) -> list[Task]: ...


class ReminderListener(Protocol):
    """
    Presentation-side port: how the scheduler hands reminders outward.

    The listener decides how to show them (print, popup, log, ...).
    """

    def __call__(self, reminder: Reminder) -> None: ...

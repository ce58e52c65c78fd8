# src/taskminder/errors.py

"""
Error taxonomy for the task core.

Every failure of the core is raised to the caller as one of these types.
None of them is fatal; the caller (console, bootstrap) decides how to report it.
"""

from __future__ import annotations

from pathlib import Path


class TaskminderError(Exception):
    """Base class for all task-core errors."""


class IOFailure(TaskminderError):
    """Reading or writing the persisted task file failed at the OS level."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class StateNotFound(TaskminderError):
    """No persisted task file exists yet (first run)."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"No saved tasks at {path}")
        self.path = Path(path)


class CorruptState(TaskminderError):
    """The persisted task file exists but is unreadable or has an unknown schema."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class InvalidInput(TaskminderError, ValueError):
    """Caller supplied malformed task fields (bad priority, unparsable deadline, ...)."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundInStore(TaskminderError, LookupError):
    """Remove target is not present in the store."""


def friendly_error_message(err: Exception) -> str:
    """Short user-facing text for a core error (used by the console)."""
    if isinstance(err, StateNotFound):
        return "Nothing saved yet. Use /save first."
    if isinstance(err, CorruptState):
        return f"Saved tasks are unreadable: {err}. Current tasks were kept."
    if isinstance(err, IOFailure):
        return f"File error: {err}"
    if isinstance(err, InvalidInput):
        return f"Invalid input. {err}"
    if isinstance(err, NotFoundInStore):
        return f"Task not found: {err}"
    msg = str(err).strip()
    return msg or err.__class__.__name__

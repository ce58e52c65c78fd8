# src/taskminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..errors import InvalidInput

# Accepted deadline formats for user input, tried in order (local time).
DEADLINE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

# Placeholders meaning "no deadline".
NO_DEADLINE = {"", "-", "none", "no"}


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single task.

    Notes:
    - value object: equality compares all fields, there is no id
    - priority is unbounded; lower means more urgent
    - deadline is epoch seconds, or None for "no deadline"
    """

    title: str
    priority: int
    deadline: float | None = None

    def has_deadline(self) -> bool:
        return self.deadline is not None

    def describe(self) -> str:
        return f"{self.title} (Priority: {self.priority}, Deadline: {format_deadline(self.deadline)})"


@dataclass(frozen=True, slots=True)
class Reminder:
    """Outbound "due soon" event. task_title is the payload; the rest is context."""

    task_title: str
    deadline: float | None
    fired_at: float

    def text(self) -> str:
        return f"Reminder: {self.task_title} is due soon!"


def format_deadline(deadline: float | None) -> str:
    if deadline is None:
        return "none"
    try:
        return datetime.fromtimestamp(deadline).astimezone().strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        # Outside the platform time_t range (or not finite): show the raw epoch value.
        return f"@{deadline:g}"


def parse_deadline(raw: str | None) -> float | None:
    """
    Parse a user-entered deadline into epoch seconds (local time).

    Returns None for an empty value or a "no deadline" placeholder.
    Raises InvalidInput if no known format matches.
    """
    text = (raw or "").strip()
    if text.lower() in NO_DEADLINE:
        return None

    for fmt in DEADLINE_FORMATS:
        try:
            return datetime.strptime(text, fmt).timestamp()
        except ValueError:
            continue

    raise InvalidInput(f"Deadline must look like YYYY-MM-DD or YYYY-MM-DDTHH:MM, got {text!r}.", field="deadline")


def parse_priority(raw: str | int) -> int:
    if isinstance(raw, bool):
        raise InvalidInput("Priority must be an integer.", field="priority")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise InvalidInput(f"Priority must be an integer, got {raw!r}.", field="priority") from None


def parse_task(title: str, priority: str | int, deadline: str | None = None) -> Task:
    """Build a Task from raw user input (console fields)."""
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidInput("Title is required.", field="title")
    return Task(title=clean_title, priority=parse_priority(priority), deadline=parse_deadline(deadline))

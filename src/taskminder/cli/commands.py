# src/taskminder/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import InvalidInput, TaskminderError, friendly_error_message
from ..tasks.task_models import format_deadline, parse_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ADD_USAGE = "Usage: /add <priority> <YYYY-MM-DD | YYYY-MM-DDTHH:MM | -> <title...>"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task-core errors become a user-facing message; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskminderError as e:
            logger.info("/%s failed: %s: %s", name, e.__class__.__name__, e)
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_task_list(state: AppState) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks."
    lines = [f"Tasks ({len(tasks)}):"]
    for i, t in enumerate(tasks, start=1):
        lines.append(f"{i}. {t.describe()}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add 1 2026-05-01 Pay rent
    /add 2 2026-05-01T18:30 Call mom
    /add 3 - Read a book
    """
    if len(args) < 3:
        return ADD_USAGE

    task = parse_task(" ".join(args[2:]), args[0], args[1])
    state.task_store.add_task(task)
    return f"Added: {task.describe()}"


def cmd_remove(state: AppState, args: list[str]) -> str:
    """/remove <n> where n is the 1-based position shown by /list."""
    if len(args) != 1:
        return "Usage: /remove <n> (see /list for numbers)"
    try:
        position = int(args[0])
    except ValueError:
        raise InvalidInput(f"Task number must be an integer, got {args[0]!r}.", field="position") from None

    removed = state.task_store.remove_at(position - 1)
    return f"Removed: {removed.describe()}"


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        with contextlib.suppress(Exception):
            emit(f"[SAVE] Writing tasks to {state.task_store.path} ...")
    n = state.task_store.save()
    return f"Saved {n} task(s)."


def cmd_load(state: AppState, args: list[str]) -> str:
    n = state.task_store.load()
    return f"Loaded {n} task(s).\n{render_task_list(state)}"


def cmd_remind(state: AppState, args: list[str]) -> str:
    """Run one reminder scan now; listeners are notified as on a timer tick."""
    reminders = state.reminders.tick()
    if not reminders:
        return "Nothing due soon."
    return f"{len(reminders)} task(s) due soon."


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    sched = state.reminders
    upcoming = [t for t in store.list_tasks() if t.deadline is not None]
    nearest = min((t.deadline for t in upcoming), default=None)
    return (
        "Status:\n"
        f"  Tasks: {store.count()} (file: {store.path})\n"
        f"  Reminders: {sched.state.value}, every {sched.interval_seconds:.0f}s, "
        f"lookahead {sched.lookahead_seconds / 60:.0f} min\n"
        f"  Nearest deadline: {format_deadline(nearest)}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks by priority.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <priority> <deadline|-> <title>.")
registry.register("remove", cmd_remove, help_text="Remove a task by its /list number.", aliases=["rm"])
registry.register("save", cmd_save, help_text="Save tasks to disk.")
registry.register("load", cmd_load, help_text="Reload tasks from disk (replaces current tasks).")
registry.register("remind", cmd_remind, help_text="Check for tasks due soon right now.")
registry.register("status", cmd_status, help_text="Show store and reminder status.")

# src/taskminder/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

A small polling loop that, every interval:
- lists tasks from the store,
- picks those whose deadline falls before now + lookahead,
- hands a Reminder for each to the subscribed listeners.

There is no de-duplication: a task keeps being reminded on every tick while it qualifies.
How reminders are shown belongs to the listener (console, popup), not the scheduler.
"""

import asyncio
import contextlib
import logging
import threading
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from ..core.ports import ReminderListener, TaskRepo
from .task_models import Reminder, Task

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0
DEFAULT_LOOKAHEAD_SECONDS = 60.0 * 60.0
MIN_INTERVAL_SECONDS = 0.01


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"


def collect_due_reminders(tasks: Iterable[Task], *, now_ts: float, lookahead_seconds: float) -> list[Reminder]:
    """
    Reminders for every task with a deadline strictly before now_ts + lookahead_seconds.

    Overdue tasks qualify too: only the upper bound of the window is checked.
    """
    horizon = now_ts + lookahead_seconds
    return [
        Reminder(task_title=t.title, deadline=t.deadline, fired_at=now_ts)
        for t in tasks
        if t.deadline is not None and t.deadline < horizon
    ]


class ReminderScheduler:
    """
    Periodic "due soon" scanner with an explicit cancellation handle.

    Lifecycle:
      IDLE --start()--> RUNNING --stop()--> CANCELLED (terminal)

    The first tick runs immediately on start, then at a fixed rate: tick k is
    due at start + k * interval, so time spent inside a tick does not push
    later ticks back.
    tick() can also be called directly (poll interface); it does not change the state.
    """

    def __init__(
        self,
        task_store: TaskRepo,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        lookahead_seconds: float = DEFAULT_LOOKAHEAD_SECONDS,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = task_store
        self._interval = max(MIN_INTERVAL_SECONDS, float(interval_seconds))
        self._lookahead = float(lookahead_seconds)
        self._clock = clock
        self._sleep = sleep

        self._listeners: list[ReminderListener] = []
        self._listeners_lock = threading.Lock()

        self._state = SchedulerState.IDLE
        self._runner: asyncio.Task[None] | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def lookahead_seconds(self) -> float:
        return self._lookahead

    # ---- subscription ----

    def subscribe(self, listener: ReminderListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock, contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    def _deliver(self, reminders: list[Reminder]) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)

        for reminder in reminders:
            for listener in listeners:
                try:
                    listener(reminder)
                except Exception:
                    logger.exception("Reminder listener failed title=%r", reminder.task_title)

    # ---- scanning ----

    def tick(self, now_ts: float | None = None) -> list[Reminder]:
        """Scan once, deliver to listeners and return what was emitted."""
        if now_ts is None:
            now_ts = self._clock()

        reminders = collect_due_reminders(
            self._store.list_tasks(),
            now_ts=now_ts,
            lookahead_seconds=self._lookahead,
        )
        if reminders:
            logger.info("Reminder tick: %d task(s) due soon", len(reminders))
        else:
            logger.debug("Reminder tick: nothing due")

        self._deliver(reminders)
        return reminders

    async def run(self) -> None:
        """
        Polling loop. Runs until cancelled.

        A failing tick (store error) is logged and the loop keeps going.
        """
        if self._state == SchedulerState.CANCELLED:
            raise RuntimeError("ReminderScheduler was cancelled and cannot run again")

        self._state = SchedulerState.RUNNING
        logger.info(
            "Reminder scheduler running (interval=%.1fs, lookahead=%.0fs)",
            self._interval,
            self._lookahead,
        )
        next_at = time.monotonic()
        try:
            while True:
                try:
                    self.tick()
                except Exception:
                    logger.exception("Reminder tick failed")

                next_at += self._interval
                delay = next_at - time.monotonic()
                if delay < 0:
                    # Overran a whole period: skip the missed slots instead of bursting.
                    next_at = time.monotonic()
                    delay = 0.0
                await self._sleep(delay)
        finally:
            self._state = SchedulerState.CANCELLED
            logger.info("Reminder scheduler stopped.")

    # ---- cancellation handle ----

    def start(self) -> asyncio.Task[None]:
        """Schedule run() on the running event loop. Must be called from a coroutine."""
        if self._state == SchedulerState.CANCELLED:
            raise RuntimeError("ReminderScheduler was cancelled and cannot be restarted")
        if self._runner is not None and not self._runner.done():
            return self._runner

        self._runner = asyncio.get_running_loop().create_task(self.run())
        return self._runner

    def stop(self) -> None:
        """Cancel the loop. Safe to call more than once, or before start()."""
        if self._runner is not None and not self._runner.done():
            self._runner.cancel()
        self._state = SchedulerState.CANCELLED

    async def wait_stopped(self) -> None:
        if self._runner is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._runner


# --------------------------------------------------------------------------------------
# Background thread runner (console REPL blocks the main thread).
# --------------------------------------------------------------------------------------


async def _run_until_stopped(scheduler: ReminderScheduler, stop_event: asyncio.Event) -> None:
    scheduler.start()
    try:
        await stop_event.wait()
    finally:
        scheduler.stop()
        await scheduler.wait_stopped()


@dataclass
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Reminder loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_reminders_in_background(scheduler: ReminderScheduler) -> ReminderBackgroundRunner | None:
    """
    Run the scheduler on its own thread with its own event loop.

    Returns None if the thread did not come up in time.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_until_stopped(scheduler, stop_event))
        except Exception:
            logger.exception("Reminder thread crashed.")
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="taskminder-reminders", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder background thread started.")
    return ReminderBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)

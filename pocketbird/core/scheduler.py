"""Periodic tick scheduler running on the asyncio event loop.

The logic and paint ticks are plain callbacks re-armed with
``loop.call_later`` after every run. Tasks registered with an idle interval
slow down while the scheduler is in idle mode (the bird is hidden).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Mode = str  # "active" | "idle"


class _Task:
    """Internal representation of a registered periodic task."""

    __slots__ = ("name", "callback", "interval", "idle_interval", "handle", "runs")

    def __init__(
        self,
        name: str,
        callback: Callable[[], None],
        interval: float,
        idle_interval: Optional[float],
    ):
        self.name = name
        self.callback = callback
        self.interval = interval
        self.idle_interval = idle_interval
        self.handle: Optional[asyncio.TimerHandle] = None
        self.runs = 0

    def interval_for(self, mode: Mode) -> float:
        if mode == "idle" and self.idle_interval is not None:
            return self.idle_interval
        return self.interval


class Scheduler:
    """Periodic task runner in the asyncio event loop.

    Usage::

        scheduler = Scheduler(loop)
        scheduler.register("logic", controller.logic_tick, interval=1 / 60)
        scheduler.register("paint", paint, interval=1 / 60, idle_interval=0.25)
        scheduler.start()
        ...
        scheduler.set_mode("idle")   # reschedules tasks at idle cadence
        ...
        scheduler.stop()

    Intervals are in seconds.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop
        self._tasks: dict[str, _Task] = {}
        self._mode: Mode = "active"
        self._running = False

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def running(self) -> bool:
        return self._running

    def runs(self, name: str) -> int:
        """How many times task *name* has fired."""
        return self._tasks[name].runs

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        callback: Callable[[], None],
        interval: float,
        idle_interval: Optional[float] = None,
    ) -> None:
        """Register a periodic task.

        Args:
            name: Unique task name.
            callback: Callable invoked every *interval* seconds.
            interval: Seconds between invocations in active mode.
            idle_interval: Seconds between invocations in idle mode
                (defaults to *interval*).
        """
        if name in self._tasks:
            raise ValueError(f"Task '{name}' already registered")
        if interval <= 0:
            raise ValueError(f"Task '{name}' needs a positive interval")
        task = _Task(name, callback, interval, idle_interval)
        self._tasks[name] = task
        if self._running:
            self._loop.call_soon_threadsafe(self._schedule, task)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start all registered tasks. Thread-safe."""
        if self._running:
            return
        self._running = True
        self._loop.call_soon_threadsafe(self._start_all)

    def _start_all(self) -> None:
        for task in self._tasks.values():
            self._schedule(task)
        logger.info("Scheduler started in %s mode with %d tasks", self._mode, len(self._tasks))

    def stop(self) -> None:
        """Cancel all scheduled tasks."""
        self._running = False
        for task in self._tasks.values():
            if task.handle is not None:
                task.handle.cancel()
                task.handle = None
        logger.info("Scheduler stopped")

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def set_mode(self, mode: Mode) -> None:
        """Switch mode and reschedule all tasks (call on the loop thread)."""
        if mode == self._mode:
            return
        old = self._mode
        self._mode = mode
        logger.info("Scheduler mode: %s -> %s", old, mode)
        if self._running:
            for task in self._tasks.values():
                # a task that is firing right now is re-armed by _fire
                if task.handle is not None:
                    task.handle.cancel()
                    self._schedule(task)

    # ------------------------------------------------------------------
    # Internal scheduling
    # ------------------------------------------------------------------

    def _schedule(self, task: _Task) -> None:
        task.handle = self._loop.call_later(task.interval_for(self._mode), self._fire, task)

    def _fire(self, task: _Task) -> None:
        """Timer callback: run the task and reschedule."""
        task.handle = None
        if not self._running:
            return
        task.runs += 1
        try:
            task.callback()
        except Exception:
            logger.exception("Scheduler task '%s' failed", task.name)
        if self._running and task.handle is None:
            self._schedule(task)

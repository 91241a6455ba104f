"""
Rest countdown between sets.

There is one timer per application. Starting a new countdown replaces the
running one; there is no queue.
"""

import functools
import logging
import threading
from collections.abc import Callable

from .config import DEFAULT_REST_SECONDS, REST_EXTEND_SECONDS, REST_REDUCE_SECONDS
from .models import RestTimerState
from .ticker import PeriodicTask, Scheduler

logger = logging.getLogger(__name__)


class RestTimer:
    """
    Countdown ticking once per second.

    With a scheduler the timer ticks itself; without one the caller is
    expected to call tick() once per second. Reaching zero deactivates the
    timer in the same step, and stops its own periodic task.

    Every start() opens a new countdown generation with its own periodic
    task. A tick from an earlier generation is ignored, and the task is only
    ever started or stopped while the state lock is held.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        on_expire: Callable[[], None] | None = None,
    ):
        """
        Initialize an idle timer.

        Args:
            scheduler: Periodic scheduler for self-ticking, or None for manual ticks
            on_expire: Called once when a countdown runs out
        """
        self._lock = threading.Lock()
        self._state = RestTimerState(active=False, time_left=0, initial=DEFAULT_REST_SECONDS)
        self._scheduler = scheduler
        self._task: PeriodicTask | None = None
        self._generation = 0
        self.on_expire = on_expire

    @property
    def state(self) -> RestTimerState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state.active

    @property
    def time_left(self) -> int:
        return self._state.time_left

    @property
    def progress(self) -> float:
        """Remaining fraction of the countdown, capped at 1.0 after an extension."""
        state = self._state
        return min(1.0, state.time_left / state.initial) if state.initial > 0 else 0.0

    def start(self, duration_seconds: int = DEFAULT_REST_SECONDS) -> None:
        """
        Start a countdown, replacing any running one.

        Raises:
            ValueError: If duration_seconds is not positive
        """
        if duration_seconds <= 0:
            raise ValueError(f"Rest duration must be positive, got {duration_seconds}")
        with self._lock:
            self._generation += 1
            self._state = RestTimerState(
                active=True, time_left=duration_seconds, initial=duration_seconds
            )
            self._stop_task()
            if self._scheduler is not None:
                # First tick comes a full interval after start
                self._task = PeriodicTask(
                    functools.partial(self._tick, self._generation), self._scheduler
                )
                self._task.start()
        logger.debug("Rest started: %ds", duration_seconds)

    def tick(self) -> None:
        """Count down one second; at zero the timer deactivates."""
        self._tick(None)

    def extend(self, delta_seconds: int = REST_EXTEND_SECONDS) -> None:
        """Add time; the countdown may end up above its initial duration."""
        with self._lock:
            state = self._state
            self._state = RestTimerState(
                active=state.active, time_left=state.time_left + delta_seconds, initial=state.initial
            )

    def reduce(self, delta_seconds: int = REST_REDUCE_SECONDS) -> None:
        """Remove time, clamped at 0. Does not deactivate the timer."""
        with self._lock:
            state = self._state
            self._state = RestTimerState(
                active=state.active, time_left=max(0, state.time_left - delta_seconds), initial=state.initial
            )

    def skip(self) -> None:
        """End the countdown now, whatever time is left."""
        with self._lock:
            state = self._state
            self._state = RestTimerState(active=False, time_left=state.time_left, initial=state.initial)
            self._stop_task()
        logger.debug("Rest skipped with %ds left", state.time_left)

    def _tick(self, generation: int | None) -> None:
        # generation is None for manual ticks, which always hit the current countdown
        with self._lock:
            state = self._state
            if not state.active:
                return
            if generation is not None and generation != self._generation:
                logger.debug("Ignoring tick from replaced countdown")
                return
            time_left = state.time_left - 1
            expired = time_left <= 0
            self._state = RestTimerState(
                active=not expired, time_left=max(0, time_left), initial=state.initial
            )
            if expired:
                self._stop_task()

        if expired:
            logger.debug("Rest finished")
            if self.on_expire is not None:
                self.on_expire()

    def _stop_task(self) -> None:
        # Caller holds _lock
        if self._task is not None:
            self._task.stop()
            self._task = None

"""
One-second periodic tasks.

The live session's elapsed-time refresh and the rest timer's tick each own a
PeriodicTask. Tasks are created through a scheduler function so that tests
(and other front ends) can drive them by hand.
"""

import threading
from collections.abc import Callable

from .config import TICK_INTERVAL_SECONDS

CancelFn = Callable[[], None]
Scheduler = Callable[[float, Callable[[], None]], CancelFn]


def schedule_periodic(interval: float, callback: Callable[[], None]) -> CancelFn:
    """
    Call *callback* every *interval* seconds on a daemon thread.

    Args:
        interval: Seconds between calls
        callback: Function to call

    Returns:
        Cancel function; after it returns no further calls are started
    """
    stop = threading.Event()

    def _run() -> None:
        while not stop.wait(interval):
            callback()

    threading.Thread(target=_run, name="hybrid-fit-ticker", daemon=True).start()
    return stop.set


class PeriodicTask:
    """
    A restartable periodic callback.

    Stopping one task never affects another; each task holds only its own
    cancel handle, swapped under a lock so start() and stop() may be called
    from different threads.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        scheduler: Scheduler = schedule_periodic,
        interval: float = TICK_INTERVAL_SECONDS,
    ):
        self.callback = callback
        self.scheduler = scheduler
        self.interval = interval
        self._lock = threading.Lock()
        self._cancel: CancelFn | None = None

    @property
    def running(self) -> bool:
        return self._cancel is not None

    def start(self) -> None:
        """Start the task; a running task is left as is."""
        with self._lock:
            if self._cancel is None:
                self._cancel = self.scheduler(self.interval, self.callback)

    def stop(self) -> None:
        """Stop the task if it is running."""
        with self._lock:
            cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()

"""Trailing-edge debounce for autosave."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Quiet period after the last edit before a save runs.
AUTOSAVE_DELAY_SECONDS = 0.5

TimerFactory = Callable[[float, Callable[[], None]], "threading.Timer"]


class Debouncer:
    """Run ``callback`` once after ``delay`` seconds without a new trigger.

    Every ``trigger()`` cancels the armed timer and arms a fresh one, so a
    burst of edits produces a single call after the last of them. At most one
    call is pending at any time.

    ``timer_factory`` builds the timer; it receives the delay and a function
    to run and must return an object with ``start()`` and ``cancel()``. It
    defaults to ``threading.Timer``.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.delay = delay
        self.callback = callback
        self._timer_factory = timer_factory or threading.Timer
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """True while a call is armed and has not run yet."""
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """Arm the timer, superseding any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self.delay, lambda: self._fire(generation))
            if isinstance(timer, threading.Timer):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending call now instead of waiting.

        Returns:
            True if a call was pending and has been run
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
        self.callback()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer cancelled just as it fired must not run a stale call.
            if generation != self._generation:
                return
            self._timer = None
        logger.debug("Debounce window elapsed, running %s", getattr(self.callback, "__name__", "callback"))
        self.callback()

"""Throttled access to an optional progress stream."""

import threading
from typing import Callable, Optional, TextIO

# Nothing is shown for runs that finish quicker than this
INITIAL_DELAY = 1.0


class ThrottledWriter:
    """
    Gate writes to an optional output so they happen at most once per interval.

    Without an output the writer is inert and never spawns a thread. With one, a
    daemon timer waits ``initial_delay`` and then raises a trigger every
    ``interval`` seconds. ``throttled`` consumes the trigger, so the caller's
    hot loop never waits on the timer.
    """

    def __init__(
        self,
        out: Optional[TextIO],
        interval: float,
        initial_delay: float = INITIAL_DELAY,
    ) -> None:
        self.out = out
        self._trigger = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

        if out is not None:
            self._thread = threading.Thread(
                target=self._tick,
                args=(interval, initial_delay),
                name="dusk-progress",
                daemon=True,
            )
            self._thread.start()

    def _tick(self, interval: float, initial_delay: float) -> None:
        if self._stop.wait(initial_delay):
            return
        while True:
            self._trigger.set()
            if self._stop.wait(interval):
                return

    def throttled(self, fn: Callable[[TextIO], None]) -> None:
        """Call fn with the output if the timer fired since the last call."""
        if self._trigger.is_set():
            self._trigger.clear()
            self.unthrottled(fn)

    def unthrottled(self, fn: Callable[[TextIO], None]) -> None:
        """Call fn with the output whenever there is one."""
        if self.out is not None:
            fn(self.out)

    def close(self) -> None:
        """Stop the timer thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> "ThrottledWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

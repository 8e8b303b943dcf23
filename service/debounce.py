from typing import Callable, Optional

from service.clock import get_default_clock


class Debouncer:
    """
    A single owned timer handle.

    Every call to schedule() drops the pending timeout, if any, and arms a new
    one, so a burst of calls inside the wait window runs the callback once.
    """

    def __init__(self, wait_ms: int, clock=None):
        self._wait_ms = wait_ms
        self._clock = clock or get_default_clock()
        self._source_id: Optional[int] = None

    @property
    def pending(self) -> bool:
        return self._source_id is not None

    def schedule(self, callback: Callable, *args) -> None:
        self.cancel()
        self._source_id = self._clock.timeout_add(self._wait_ms, self._fire, callback, args)

    def cancel(self) -> None:
        if self._source_id is not None:
            self._clock.source_remove(self._source_id)
            self._source_id = None

    def _fire(self, callback, args):
        self._source_id = None
        callback(*args)
        return False  # for GLib.timeout_add


class Debounced:
    """Callable wrapper returned by debounce(); forwards its arguments."""

    def __init__(self, callback: Callable, wait_ms: int, clock=None):
        self._callback = callback
        self._debouncer = Debouncer(wait_ms, clock)

    def __call__(self, *args):
        self._debouncer.schedule(self._callback, *args)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def cancel(self) -> None:
        self._debouncer.cancel()


def debounce(callback: Callable, wait_ms: int, clock=None) -> Debounced:
    """
    Delay `callback` until `wait_ms` milliseconds have passed since the last
    call of the returned wrapper. The wrapper also exposes cancel().
    """
    return Debounced(callback, wait_ms, clock)

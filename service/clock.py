import gi
gi.require_version('GLib', '2.0')
from gi.repository import GLib


class MainLoopClock:
    """
    Timer source backed by the GLib main loop.

    Debouncers and transitions take a clock object instead of calling GLib
    directly, so the same code runs against a fake clock in tests.
    """

    def timeout_add(self, interval_ms: int, callback, *args) -> int:
        return GLib.timeout_add(interval_ms, callback, *args)

    def source_remove(self, source_id: int) -> None:
        GLib.source_remove(source_id)

    def now(self) -> float:
        """Monotonic time in milliseconds."""
        return GLib.get_monotonic_time() / 1000.0


_default_clock = None


def get_default_clock() -> MainLoopClock:
    global _default_clock
    if _default_clock is None:
        _default_clock = MainLoopClock()
    return _default_clock

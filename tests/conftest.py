import gi
import pytest
gi.require_version("Gio", "2.0")
from gi.repository import Gio

from modules.panel import PanelModel
from service.connections import Connections
from service.settings import Settings
from service.theme import Theme, ThemeContext

CORNERS_CSS = """
/* test theme */
.panel-corner {
    -panel-corner-radius: 6px;
    -panel-corner-opacity: 0.5;
}
"""


class FakeClock:
    """Stands in for the GLib main loop; time only moves on advance()."""

    def __init__(self):
        self._now = 0.0
        self._next_id = 1
        self._sources = {}

    @property
    def pending(self) -> int:
        return len(self._sources)

    def timeout_add(self, interval_ms, callback, *args):
        source_id = self._next_id
        self._next_id += 1
        self._sources[source_id] = (self._now + interval_ms, interval_ms, callback, args)
        return source_id

    def source_remove(self, source_id):
        self._sources.pop(source_id, None)

    def now(self):
        return self._now

    def advance(self, ms):
        target = self._now + ms
        while True:
            due = [(deadline, source_id) for source_id, (deadline, *_) in self._sources.items()
                   if deadline <= target]
            if not due:
                break
            deadline, source_id = min(due)
            self._now = deadline
            _, interval_ms, callback, args = self._sources[source_id]
            keep = callback(*args)
            if source_id not in self._sources:
                continue
            if keep:
                self._sources[source_id] = (deadline + interval_ms, interval_ms, callback, args)
            else:
                del self._sources[source_id]
        self._now = target


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(backend=Gio.memory_settings_backend_new())


@pytest.fixture
def theme_context():
    return ThemeContext(Theme(CORNERS_CSS))


@pytest.fixture
def panel(theme_context):
    panel = PanelModel(theme_context)
    panel.set_geometry(0, 0, 1000, 40)
    yield panel
    panel.destroy()


@pytest.fixture
def connections():
    return Connections()

import cairo
import gi
from ctypes import CDLL

# Load GTK4 Layer Shell
try:
    CDLL('libgtk4-layer-shell.so')
except OSError:
    print("Error: Could not load libgtk4-layer-shell.so. Please ensure gtk4-layer-shell is installed.")
    exit(1)

gi.require_version('Gtk', '4.0')
gi.require_version('Gtk4LayerShell', '1.0')
gi.require_foreign('cairo')
from gi.repository import Gtk, Gdk, GLib
from gi.repository import Gtk4LayerShell as LayerShell
from loguru import logger

from modules.panel import PanelModel

BAR_HEIGHT = 40
# Room kept below the bar for the corners to hang into.
CORNER_SPACE = 64


class CornerArea(Gtk.DrawingArea):
    """Shows one PanelCorner: draws through it and mirrors its geometry."""

    def __init__(self, corner, fixed: Gtk.Fixed):
        super().__init__()
        self.corner = corner
        self._fixed = fixed
        self.set_name("panel-corner")
        self.set_can_target(False)
        self.set_draw_func(self.on_draw)

        self._handlers = [
            corner.connect('notify::allocation', self._sync_position),
            corner.connect('notify::translation-y', self._sync_position),
            corner.connect('notify::width', self._sync_size),
            corner.connect('notify::height', self._sync_size),
            corner.connect('notify::opacity', self._sync_opacity),
            corner.connect('queue-repaint', lambda c: self.queue_draw()),
        ]

        fixed.put(self, 0, 0)
        self._sync_size()
        self._sync_position()
        self._sync_opacity()

    def on_draw(self, drawing_area, cr, width: int, height: int):
        try:
            self.corner.on_repaint(cr, width, height)
        except Exception as e:
            self.corner.log(f"failed to draw {self.corner.side.name.lower()} corner: {e}")

    def _sync_position(self, *args):
        box = self.corner.allocation
        self._fixed.move(self, box.x1, box.y1 + self.corner.translation_y)

    def _sync_size(self, *args):
        self.set_content_width(max(0, round(self.corner.width)))
        self.set_content_height(max(0, round(self.corner.height)))
        self.queue_draw()

    def _sync_opacity(self, *args):
        self.set_opacity(self.corner.opacity / 255)

    def release(self):
        for handler_id in self._handlers:
            self.corner.disconnect(handler_id)
        self._handlers = []
        self._fixed.remove(self)


class _PanelStrip(Gtk.Box):
    """The visible bar; reports its allocation to the panel model."""

    def __init__(self, panel: PanelModel):
        super().__init__(orientation=Gtk.Orientation.HORIZONTAL)
        self._panel = panel
        self.set_name("bar-box")

    def do_size_allocate(self, width, height, baseline):
        Gtk.Box.do_size_allocate(self, width, height, baseline)
        # corners are moved outside of the allocation pass
        GLib.idle_add(self._report_geometry, width, height)

    def _report_geometry(self, width, height):
        self._panel.set_geometry(0, 0, width, height)
        return False


class Bar(Gtk.ApplicationWindow):
    """A LayerShell window holding the panel strip and its corners."""

    def __init__(self, application, panel: PanelModel):
        super().__init__(application=application)
        self.panel = panel
        self._areas: dict = {}

        # Set up the window
        self.set_name("bar")
        self.set_resizable(True)
        self.set_decorated(False)

        # Initialize LayerShell
        LayerShell.init_for_window(self)
        LayerShell.set_layer(self, LayerShell.Layer.TOP)
        LayerShell.set_namespace(self, "bar")

        # Anchor to top, left, and right for full width
        LayerShell.set_anchor(self, LayerShell.Edge.TOP, True)
        LayerShell.set_anchor(self, LayerShell.Edge.LEFT, True)
        LayerShell.set_anchor(self, LayerShell.Edge.RIGHT, True)

        # Set zero margins
        LayerShell.set_margin(self, LayerShell.Edge.LEFT, 0)
        LayerShell.set_margin(self, LayerShell.Edge.RIGHT, 0)
        LayerShell.set_margin(self, LayerShell.Edge.TOP, 0)

        # Only the bar itself reserves space, the corners overlap windows
        LayerShell.set_exclusive_zone(self, BAR_HEIGHT)

        # Set size based on monitor width
        display = Gdk.Display.get_default()
        monitors = display.get_monitors() if display else []
        monitor = monitors[0] if len(monitors) > 0 else None
        screen_width = monitor.get_geometry().width if monitor else -1

        self.fixed = Gtk.Fixed()
        self.strip = _PanelStrip(panel)
        self.strip.set_size_request(screen_width, BAR_HEIGHT)
        self.fixed.put(self.strip, 0, 0)
        self.set_child(self.fixed)
        self.set_size_request(screen_width, BAR_HEIGHT + CORNER_SPACE)

        panel.theme_context.scale_factor = self.get_scale_factor()
        self.connect('notify::scale-factor', self._on_scale_factor_changed)
        panel.connect('child-added', self._on_child_added)
        panel.connect('child-removed', self._on_child_removed)
        # the corners hang below the bar; only the bar strip takes pointer input
        self.connect('realize', self._update_input_region)
        panel.connect('notify::position', self._update_input_region)
        panel.connect('notify::size', self._update_input_region)
        for child in panel.get_children():
            self._on_child_added(panel, child)

    def _on_scale_factor_changed(self, window, pspec):
        self.panel.theme_context.scale_factor = self.get_scale_factor()

    def _update_input_region(self, *args):
        surface = self.get_surface()
        if surface is None:
            return
        surface.set_input_region(cairo.Region(self.panel.get_input_rectangle()))

    def _on_child_added(self, panel, corner):
        self._areas[corner] = CornerArea(corner, self.fixed)
        logger.debug(f"Showing {corner.side.name.lower()} corner")

    def _on_child_removed(self, panel, corner):
        area = self._areas.pop(corner, None)
        if area:
            area.release()

    def set_overview(self, active: bool) -> None:
        if active:
            self.panel.add_style_pseudo_class('overview')
        else:
            self.panel.remove_style_pseudo_class('overview')

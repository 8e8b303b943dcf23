from ctypes import CDLL
import gi
import os
import sys
# Load GTK4 Layer Shell
try:
    CDLL('libgtk4-layer-shell.so')
except OSError:
    print("Error: Could not load libgtk4-layer-shell.so. Please ensure gtk4-layer-shell is installed.")
    exit(1)

gi.require_version('Gtk', '4.0')
gi.require_version('Gtk4LayerShell', '1.0')
gi.require_version('GLib', '2.0')
gi.require_version('Gio', '2.0')

from gi.repository import Gtk, GLib, Gdk, Gio
from loguru import logger

from modules.bar import Bar
from modules.corners import PanelCorners
from modules.panel import PanelModel
from service.connections import Connections
from service.settings import Settings
from service.theme import ThemeContext

CORNERS_THEME = 'styles/corners.css'


class PanelCornersApp(Gtk.Application):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.settings = None
        self.panel = None
        self.corners = None
        self.bar = None
        self.css_monitor = None

    def do_activate(self):
        if self.bar:
            self.bar.present()
            return

        self.settings = Settings()
        setup_logger(self.settings.DEBUG.get())

        theme_context = ThemeContext.get_default()
        if os.path.exists(CORNERS_THEME):
            theme_context.load_theme(CORNERS_THEME)
            theme_context.monitor_theme(CORNERS_THEME)

        self.panel = PanelModel(theme_context)
        self.bar = Bar(self, self.panel)

        # Load CSS
        css_provider = load_css()
        if css_provider:
            css_file = Gio.File.new_for_path('main.css')
            self.css_monitor = css_file.monitor_file(Gio.FileMonitorFlags.NONE, None)
            self.css_monitor.connect("changed", lambda m, f, of, evt: reload_css(css_provider, 'main.css'))

        self.corners = PanelCorners(self.settings, Connections(), self.panel, theme_context)
        self.corners.update()

        # Define the 'overview' action with a boolean parameter
        action = Gio.SimpleAction.new("overview", GLib.VariantType.new("b"))
        action.connect("activate", self.on_overview)
        self.add_action(action)

        self.bar.present()

    def on_overview(self, action, parameter):
        """Handler for the 'overview' action."""
        if self.bar:
            self.bar.set_overview(parameter.get_boolean())

    def do_shutdown(self):
        if self.corners:
            self.corners.remove()
        if self.panel:
            self.panel.destroy()
        Gtk.Application.do_shutdown(self)


def setup_logger(debug: bool):
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO")


def load_css():
    css_provider = Gtk.CssProvider()
    try:
        css_provider.load_from_path('main.css')
        logger.info("CSS loaded from main.css")
    except GLib.Error as e:
        logger.warning(f"Error loading CSS: {e}")
        return None
    Gtk.StyleContext.add_provider_for_display(
        Gdk.Display.get_default(),
        css_provider,
        Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION
    )
    return css_provider


def reload_css(css_provider, css_path):
    if not css_provider:
        return
    try:
        css_provider.load_from_path(css_path)
        logger.info(f"CSS reloaded from {css_path}")
    except GLib.Error as e:
        logger.warning(f"Error reloading CSS: {e}")


def main():
    app = PanelCornersApp(application_id='com.example.gtk4.panelcorners')
    try:
        app.run(None)
    except KeyboardInterrupt:
        print("Application interrupted by user, exiting...")


if __name__ == "__main__":
    main()

import os
import re
from typing import Optional

import gi
gi.require_version('Gdk', '4.0')
gi.require_version('Gio', '2.0')
gi.require_version('GLib', '2.0')
from gi.repository import GObject, Gdk, Gio, GLib
from loguru import logger

BLACK = "#000000ff"

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_BLOCK_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_LENGTH_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(px|pt)?\s*$")


def parse_declarations(text: str) -> dict[str, str]:
    """Parse 'prop: value; prop: value' into a dict."""
    declarations = {}
    for declaration in text.split(';'):
        if ':' not in declaration:
            continue
        prop, value = declaration.split(':', 1)
        prop, value = prop.strip(), value.strip()
        if prop and value:
            declarations[prop] = value
    return declarations


def parse_color(value: str) -> Optional[Gdk.RGBA]:
    rgba = Gdk.RGBA()
    if value and rgba.parse(value):
        return rgba
    return None


class ThemeNode:
    """
    Resolved style properties for one element.

    The lookup_* methods return a (found, value) pair. Lengths come back in
    device pixels, already multiplied by the scale factor.
    """

    def __init__(self, properties: dict[str, str], scale_factor: float = 1):
        self._properties = properties
        self.scale_factor = scale_factor

    def lookup_length(self, prop: str, inherit: bool = False) -> tuple[bool, float]:
        value = self._properties.get(prop)
        match = _LENGTH_RE.match(value) if value else None
        if not match:
            return False, 0.0
        length = float(match.group(1))
        if match.group(2) == 'pt':
            length = length * 4 / 3
        return True, length * self.scale_factor

    def lookup_double(self, prop: str, inherit: bool = False) -> tuple[bool, float]:
        try:
            return True, float(self._properties[prop])
        except (KeyError, ValueError):
            return False, 0.0

    def lookup_color(self, prop: str, inherit: bool = False) -> tuple[bool, Optional[Gdk.RGBA]]:
        color = parse_color(self._properties.get(prop, ''))
        return color is not None, color


class Theme:
    """A flat stylesheet: class selectors mapped to their declarations."""

    def __init__(self, text: str = "", path: Optional[str] = None):
        self.path = path
        self._rules: dict[str, dict[str, str]] = {}
        for selectors, body in _BLOCK_RE.findall(_COMMENT_RE.sub('', text)):
            declarations = parse_declarations(body)
            for selector in selectors.split(','):
                self._rules.setdefault(selector.strip(), {}).update(declarations)

    @classmethod
    def load_from_path(cls, path: str) -> "Theme":
        with open(path) as f:
            return cls(f.read(), path=path)

    def get_node(self, style_class: str, style: Optional[str] = None, scale_factor: float = 1) -> ThemeNode:
        properties = dict(self._rules.get(f".{style_class}", {}))
        if style:
            properties.update(parse_declarations(style))
        return ThemeNode(properties, scale_factor)


class ThemeContext(GObject.Object):
    """
    Holds the active theme and the display scale factor.

    Emits 'changed' when either of them changes.
    """

    __gsignals__ = {
        'changed': (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    _instance = None

    @classmethod
    def get_default(cls):
        """Get or create the singleton instance of ThemeContext."""
        if cls._instance is None:
            cls._instance = ThemeContext()
        return cls._instance

    def __init__(self, theme: Optional[Theme] = None):
        GObject.Object.__init__(self)
        self._theme = theme or Theme()
        self._scale_factor = 1
        self._monitor = None

    @GObject.Property(type=int, default=1, minimum=1)
    def scale_factor(self) -> int:
        return self._scale_factor

    @scale_factor.setter
    def scale_factor(self, value: int):
        if value != self._scale_factor:
            self._scale_factor = value
            self.emit('changed')

    def get_theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        self._theme = theme
        self.emit('changed')

    def load_theme(self, path: str) -> bool:
        """Load a stylesheet, keeping the current theme if it can't be read."""
        try:
            theme = Theme.load_from_path(path)
        except OSError as e:
            logger.warning(f"Error loading theme {path}: {e}")
            return False
        logger.info(f"Theme loaded from {path}")
        self.set_theme(theme)
        return True

    def monitor_theme(self, path: str) -> None:
        """Reload the stylesheet whenever it changes on disk."""
        if self._monitor is not None:
            self._monitor.cancel()
        try:
            theme_file = Gio.File.new_for_path(os.path.abspath(path))
            self._monitor = theme_file.monitor_file(Gio.FileMonitorFlags.NONE, None)
        except GLib.Error as e:
            logger.warning(f"Cannot monitor theme {path}: {e}")
            self._monitor = None
            return
        self._monitor.connect(
            'changed',
            lambda m, f, of, evt: evt == Gio.FileMonitorEvent.CHANGES_DONE_HINT and self.load_theme(path)
        )

    def get_node(self, style_class: str, style: Optional[str] = None) -> ThemeNode:
        return self._theme.get_node(style_class, style, self._scale_factor)

from typing import Optional

import cairo
import gi
gi.require_version('GLib', '2.0')
from gi.repository import GObject

from service.theme import ThemeContext


class PanelModel(GObject.Object):
    """
    Geometry and style source for the panel.

    The bar window feeds its allocation in through set_geometry(); corners
    listen to 'notify::position' and 'notify::size'. Pseudo-class and theme
    changes are forwarded to every child's on_style_changed().
    """

    __gsignals__ = {
        'child-added': (GObject.SignalFlags.RUN_FIRST, None, (object,)),
        'child-removed': (GObject.SignalFlags.RUN_FIRST, None, (object,)),
    }

    style = GObject.Property(type=str, default="")

    def __init__(self, theme_context: Optional[ThemeContext] = None):
        GObject.Object.__init__(self)
        self._x = 0
        self._y = 0
        self._width = 0
        self._height = 0
        self._pseudo_classes: list[str] = []
        self._children = []

        self.theme_context = theme_context or ThemeContext.get_default()
        self._theme_changed_id = self.theme_context.connect('changed', self._on_theme_changed)

    @GObject.Property(type=object, flags=GObject.ParamFlags.READABLE)
    def position(self):
        return self._x, self._y

    @GObject.Property(type=object, flags=GObject.ParamFlags.READABLE)
    def size(self):
        return self._width, self._height

    @GObject.Property(type=int, flags=GObject.ParamFlags.READABLE)
    def width(self) -> int:
        return self._width

    @GObject.Property(type=int, flags=GObject.ParamFlags.READABLE)
    def height(self) -> int:
        return self._height

    def set_geometry(self, x: int, y: int, width: int, height: int) -> None:
        if (x, y) != (self._x, self._y):
            self._x, self._y = x, y
            self.notify('position')
        if (width, height) != (self._width, self._height):
            self._width, self._height = width, height
            self.notify('size')

    def get_input_rectangle(self) -> cairo.RectangleInt:
        """The area of the window that takes pointer input; the corners do not."""
        return cairo.RectangleInt(self._x, self._y, self._width, self._height)

    def get_children(self) -> list:
        return list(self._children)

    def add_child(self, child) -> None:
        if child in self._children:
            return
        self._children.append(child)
        child.set_parent(self)
        self.emit('child-added', child)

    def remove_child(self, child) -> None:
        if child not in self._children:
            return
        self._children.remove(child)
        child.set_parent(None)
        self.emit('child-removed', child)

    def get_style_pseudo_class(self) -> Optional[str]:
        if not self._pseudo_classes:
            return None
        return " ".join(self._pseudo_classes)

    def add_style_pseudo_class(self, name: str) -> None:
        if name not in self._pseudo_classes:
            self._pseudo_classes.append(name)
            self._propagate_style_changed()

    def remove_style_pseudo_class(self, name: str) -> None:
        if name in self._pseudo_classes:
            self._pseudo_classes.remove(name)
            self._propagate_style_changed()

    def _on_theme_changed(self, context):
        self._propagate_style_changed()

    def _propagate_style_changed(self) -> None:
        for child in list(self._children):
            child.emit_style_changed()

    def destroy(self) -> None:
        if self._theme_changed_id:
            self.theme_context.disconnect(self._theme_changed_id)
            self._theme_changed_id = None
        for child in list(self._children):
            self.remove_child(child)

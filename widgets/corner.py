import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Union

import cairo
import gi
gi.require_version("Gdk", "4.0")
from gi.repository import GObject, Gdk
from loguru import logger

from service.clock import get_default_clock
from service.lookup import lookup_for_color, lookup_for_double, lookup_for_length
from service.theme import ThemeContext, ThemeNode
from widgets.transition import AnimationMode, Transition

# Overview animation time, in milliseconds.
ANIMATION_TIME = 250

STYLE_CLASS = "panel-corner"


# Which edge of the panel a corner decorates.
class Side(Enum):
    LEFT = 1
    RIGHT = 2


# Helper to map a string to the corresponding enum member.
def get_enum_member(enum, value: Union[str, Enum]):
    if isinstance(value, enum):
        return value
    return enum[value.upper()]


@dataclass
class ChildBox:
    x1: float = 0
    y1: float = 0
    x2: float = 0
    y2: float = 0

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1


class PanelCorner(GObject.Object):
    """
    One rounded corner hanging below the panel.

    Radius, border width, background color and opacity are looked up lazily
    and cached until invalidate_cache(). The host calls on_repaint() to draw
    and on_style_changed() whenever the theme or style changes; the latter is
    the only place the cache gets refilled eagerly.
    """

    __gtype_name__ = 'PanelCorner'

    __gsignals__ = {
        'queue-repaint': (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    style = GObject.Property(type=str, default="")
    opacity = GObject.Property(type=int, default=0, minimum=0, maximum=255)
    translation_y = GObject.Property(type=float, default=0.0)
    width = GObject.Property(type=float, default=0.0)
    height = GObject.Property(type=float, default=0.0)
    allocation = GObject.Property(type=object)

    def __init__(
        self,
        side: Union[str, Side],
        settings,
        panel,
        theme_context: Optional[ThemeContext] = None,
        clock=None,
    ):
        super().__init__()

        self._side = get_enum_member(Side, side)
        self._settings = settings
        self._panel = panel
        self._theme_context = theme_context or ThemeContext.get_default()
        self._clock = clock or get_default_clock()
        self._parent = None
        self._transitions: dict[str, Transition] = {}
        self.allocation = ChildBox()

        # Cached computed values
        self._cached_radius: Optional[float] = None
        self._cached_border_width: Optional[float] = None
        self._cached_background_color: Optional[Gdk.RGBA] = None
        self._cached_opacity: Optional[float] = None

        self._style_changed_id = self.connect('notify::style', self._on_style_notify)
        self._position_changed_id = panel.connect('notify::position', self._on_panel_geometry_changed)
        self._size_changed_id = panel.connect('notify::size', self._on_panel_geometry_changed)

        self.update_allocation()

    @property
    def side(self) -> Side:
        return self._side

    def get_parent(self):
        return self._parent

    def set_parent(self, parent) -> None:
        self._parent = parent

    def get_theme_node(self) -> Optional[ThemeNode]:
        """The theme node, or None while the corner is not attached."""
        if self._parent is None:
            return None
        return self._theme_context.get_node(STYLE_CLASS, self.style)

    def invalidate_cache(self) -> None:
        """Invalidates all cached values, forcing recalculation on next access."""
        self._cached_radius = None
        self._cached_border_width = None
        self._cached_background_color = None
        self._cached_opacity = None

    def get_radius(self, node: Optional[ThemeNode]) -> float:
        if self._cached_radius is None:
            self._cached_radius = lookup_for_length(
                node, '-panel-corner-radius', self._settings, self._theme_context.scale_factor
            )
        return self._cached_radius

    def get_border_width(self, node: Optional[ThemeNode]) -> float:
        if self._cached_border_width is None:
            self._cached_border_width = lookup_for_length(
                node, '-panel-corner-border-width', self._settings, self._theme_context.scale_factor
            )
        return self._cached_border_width

    def get_background_color(self, node: Optional[ThemeNode]) -> Gdk.RGBA:
        if self._cached_background_color is None:
            self._cached_background_color = lookup_for_color(
                node, '-panel-corner-background-color', self._settings
            )
        return self._cached_background_color

    def get_opacity(self, node: Optional[ThemeNode]) -> float:
        if self._cached_opacity is None:
            self._cached_opacity = lookup_for_double(node, '-panel-corner-opacity', self._settings)
        return self._cached_opacity

    def remove_connections(self) -> None:
        if self._position_changed_id:
            self._panel.disconnect(self._position_changed_id)
            self._position_changed_id = None
        if self._size_changed_id:
            self._panel.disconnect(self._size_changed_id)
            self._size_changed_id = None

    def get_preferred_width(self) -> float:
        return self.get_radius(self.get_theme_node())

    def get_preferred_height(self) -> float:
        # The border strip is drawn above the panel edge through translation_y,
        # so only the arc hangs below it.
        return self.get_radius(self.get_theme_node())

    def update_allocation(self) -> None:
        corner_width = self.get_preferred_width()
        corner_height = self.get_preferred_height()

        alloc_width = self._panel.width
        alloc_height = self._panel.height

        if self._side == Side.LEFT:
            child_box = ChildBox(0, alloc_height, corner_width, alloc_height + corner_height)
        else:
            child_box = ChildBox(
                alloc_width - corner_width, alloc_height, alloc_width, alloc_height + corner_height
            )

        self.allocation = child_box

    def set_size(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def on_repaint(self, cr: cairo.Context, width: int = 0, height: int = 0) -> None:
        node = self.get_theme_node()

        corner_radius = self.get_radius(node)
        border_width = self.get_border_width(node)
        background_color = self.get_background_color(node)

        cr.save()
        try:
            if corner_radius <= 0:
                return

            cr.set_operator(cairo.OPERATOR_SOURCE)

            cr.move_to(0, 0)
            if self._side == Side.LEFT:
                cr.arc(corner_radius, border_width + corner_radius,
                       corner_radius, math.pi, 3 * math.pi / 2)
            else:
                cr.arc(0, border_width + corner_radius,
                       corner_radius, 3 * math.pi / 2, 2 * math.pi)
            cr.line_to(corner_radius, 0)
            cr.close_path()

            cr.set_source_rgba(
                background_color.red,
                background_color.green,
                background_color.blue,
                background_color.alpha,
            )
            cr.fill()
        finally:
            cr.restore()

    def on_style_changed(self) -> None:
        self.invalidate_cache()

        node = self.get_theme_node()

        corner_radius = self.get_radius(node)
        border_width = self.get_border_width(node)
        opacity = self.get_opacity(node)

        # if using extension values and in overview, set transparent
        pseudo_class = self._panel.get_style_pseudo_class()
        if self._settings.FORCE_EXTENSION_VALUES.get() and pseudo_class and 'overview' in pseudo_class:
            opacity = 0.0

        self.update_allocation()
        self.set_size(corner_radius, border_width + corner_radius)
        self.translation_y = -border_width

        self.remove_transition('opacity')
        self.ease(opacity=opacity * 255, duration=ANIMATION_TIME, mode=AnimationMode.EASE_IN_OUT_QUAD)

        self.log(f"{self._side.name.lower()} corner: radius={corner_radius}, "
                  f"border={border_width}, opacity={opacity}")
        self.emit('queue-repaint')

    def get_transition(self, prop: str) -> Optional[Transition]:
        return self._transitions.get(prop)

    def ease(self, duration: int = ANIMATION_TIME, mode: AnimationMode = AnimationMode.EASE_IN_OUT_QUAD, **props) -> None:
        for prop, value in props.items():
            self.remove_transition(prop)
            transition = Transition(self, prop, value, duration, mode, self._clock, self._on_transition_stopped)
            self._transitions[prop] = transition
            transition.start()

    def remove_transition(self, prop: str) -> None:
        transition = self._transitions.pop(prop, None)
        if transition:
            transition.stop()

    def _on_transition_stopped(self, transition: Transition) -> None:
        for prop, running in list(self._transitions.items()):
            if running is transition:
                del self._transitions[prop]

    def emit_style_changed(self) -> None:
        """Run on_style_changed() for the host; failures are logged, never raised."""
        try:
            self.on_style_changed()
        except Exception as e:
            self.log(f"failed to update {self._side.name.lower()} corner style: {e}")

    def _on_style_notify(self, corner, pspec):
        if self._parent is not None:
            self.emit_style_changed()

    def _on_panel_geometry_changed(self, panel, pspec):
        self.update_allocation()

    def destroy(self) -> None:
        for prop in list(self._transitions):
            self.remove_transition(prop)
        self.remove_connections()
        if self._style_changed_id:
            self.disconnect(self._style_changed_id)
            self._style_changed_id = None

    def log(self, message: str) -> None:
        if self._settings.DEBUG.get():
            logger.debug(f"[Panel corners] {message}")

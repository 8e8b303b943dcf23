from typing import Optional

import gi
gi.require_version('GLib', '2.0')
from gi.repository import GObject
from loguru import logger

from service.connections import Connections
from service.debounce import Debounced, debounce
from service.theme import ThemeContext
from widgets.corner import PanelCorner, Side

# Debounce delay in milliseconds for settings changes
SETTINGS_DEBOUNCE_MS = 50


class PanelCorners:
    """Creates, refreshes and removes the two panel corners."""

    def __init__(
        self,
        settings,
        connections: Connections,
        panel,
        theme_context: Optional[ThemeContext] = None,
        clock=None,
    ):
        self._settings = settings
        self._connections = connections
        self._panel = panel
        self._theme_context = theme_context or ThemeContext.get_default()
        self._clock = clock
        self._debounced_style_update: Optional[Debounced] = None
        self._bindings: dict[PanelCorner, GObject.Binding] = {}
        self.left_corner: Optional[PanelCorner] = None
        self.right_corner: Optional[PanelCorner] = None

    @property
    def corners(self) -> list[PanelCorner]:
        return [corner for corner in (self.left_corner, self.right_corner) if corner is not None]

    @property
    def active(self) -> bool:
        return bool(self.corners)

    def update(self) -> None:
        """
        Updates the corners.

        This removes already existing corners and creates new ones.
        """
        self._log("updating panel corners...")

        # remove already existing corners
        self.remove()

        self.left_corner = self._create_corner(Side.LEFT)
        self.right_corner = self._create_corner(Side.RIGHT)

        for corner in self.corners:
            self.update_corner(corner)

        # refresh every corner once a burst of preference changes settles
        self._debounced_style_update = debounce(self._refresh_corners, SETTINGS_DEBOUNCE_MS, self._clock)

        for key in self._settings.keys:
            self._connections.connect(
                self._settings.settings,
                f"changed::{key.name}",
                self._debounced_style_update,
            )

        self._log("corners updated.")

    def _create_corner(self, side: Side) -> PanelCorner:
        return PanelCorner(side, self._settings, self._panel, self._theme_context, self._clock)

    def update_corner(self, corner: PanelCorner) -> None:
        # bind corner style to the panel style
        self._bindings[corner] = self._panel.bind_property(
            'style', corner, 'style', GObject.BindingFlags.SYNC_CREATE
        )

        self._panel.add_child(corner)

        # update its style, showing it
        corner.on_style_changed()

    def _refresh_corners(self, *args) -> None:
        for corner in self.corners:
            corner.invalidate_cache()
            corner.emit_style_changed()

    def remove(self) -> None:
        """Removes existing corners. Does nothing if there are none."""
        # cancel any pending debounced updates
        if self._debounced_style_update:
            self._debounced_style_update.cancel()
            self._debounced_style_update = None

        # disconnect every settings signal
        self._connections.disconnect_all()

        if self.left_corner:
            self.remove_corner(self.left_corner)
            self.left_corner = None

        if self.right_corner:
            self.remove_corner(self.right_corner)
            self.right_corner = None

    def remove_corner(self, corner: PanelCorner) -> None:
        corner.remove_connections()

        binding = self._bindings.pop(corner, None)
        if binding:
            binding.unbind()

        self._panel.remove_child(corner)
        corner.destroy()

    def _log(self, message: str) -> None:
        if self._settings.DEBUG.get():
            logger.debug(f"[Panel corners] {message}")

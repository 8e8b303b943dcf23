"""
Two-tier lookup of corner style properties.

Values come from the theme node unless the user forces the extension
settings or the theme has no value; the settings key is the property name
without its leading dash.
"""
from typing import Optional

import gi
gi.require_version("Gdk", "4.0")
from gi.repository import Gdk

from service.theme import BLACK, ThemeNode, parse_color


def _use_extension_values(node: Optional[ThemeNode], settings) -> bool:
    return node is not None and settings.FORCE_EXTENSION_VALUES.get()


def lookup_for_length(node: Optional[ThemeNode], prop: str, settings, scale_factor: float = 1) -> float:
    use_extension_values = _use_extension_values(node, settings)

    found = False
    if use_extension_values:
        found, length = node.lookup_length(prop, False)

    if use_extension_values or not found:
        return settings.get_property(prop[1:]).get() * scale_factor
    return length


def lookup_for_double(node: Optional[ThemeNode], prop: str, settings) -> float:
    use_extension_values = _use_extension_values(node, settings)

    found = False
    if use_extension_values:
        found, value = node.lookup_double(prop, False)

    if use_extension_values or not found:
        return settings.get_property(prop[1:]).get()
    return value


def lookup_for_color(node: Optional[ThemeNode], prop: str, settings) -> Gdk.RGBA:
    use_extension_values = _use_extension_values(node, settings)

    found = False
    if use_extension_values:
        found, color = node.lookup_color(prop, False)

    if not use_extension_values and found:
        return color

    setting = settings.get_property(prop[1:])
    color = parse_color(setting.get())
    if color is None:
        # could not parse color, repair the setting
        setting.set(BLACK)
        color = parse_color(BLACK)
    return color

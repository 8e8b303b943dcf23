import os
import subprocess
from typing import Optional

import gi
gi.require_version('Gio', '2.0')
gi.require_version('GLib', '2.0')
from gi.repository import Gio, GLib
from loguru import logger

SCHEMA_ID = "com.example.gtk4.panelcorners"
SCHEMA_PATH = "/com/example/gtk4/panelcorners/"
SCHEMA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "schemas")


def _default_settings_path() -> str:
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return os.path.join(config_home, "panel-corners", "settings.ini")


class SettingsError(Exception):
    """Raised when the schema is missing or an unknown key is requested."""
    pass


def _compile_schemas(schema_dir: str) -> None:
    """Rebuild gschemas.compiled when a .gschema.xml is newer than it."""
    compiled = os.path.join(schema_dir, "gschemas.compiled")
    sources = [os.path.join(schema_dir, name) for name in os.listdir(schema_dir)
               if name.endswith(".gschema.xml")]
    if os.path.exists(compiled) and all(
        os.path.getmtime(source) <= os.path.getmtime(compiled) for source in sources
    ):
        return
    try:
        subprocess.run(['glib-compile-schemas', schema_dir], check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Could not compile settings schemas in {schema_dir}: {e}")


def load_schema(schema_dir: str = SCHEMA_DIR) -> Gio.SettingsSchema:
    _compile_schemas(schema_dir)
    try:
        source = Gio.SettingsSchemaSource.new_from_directory(
            schema_dir, Gio.SettingsSchemaSource.get_default(), False
        )
    except GLib.Error as e:
        raise SettingsError(f"Cannot load settings schemas from {schema_dir}: {e}") from e

    schema = source.lookup(SCHEMA_ID, False)
    if schema is None:
        raise SettingsError(f"Schema {SCHEMA_ID} not found in {schema_dir}")
    return schema


class Setting:
    """One key of the settings schema."""

    def __init__(self, gsettings: Gio.Settings, key: Gio.SettingsSchemaKey):
        self._gsettings = gsettings
        self.name = key.get_name()
        self.type_string = key.get_value_type().dup_string()

    def get(self):
        return self._gsettings.get_value(self.name).unpack()

    def set(self, value) -> None:
        if self.type_string == 'd':
            value = float(value)
        elif self.type_string == 'b':
            value = bool(value)
        if self.get() == value:
            return
        self._gsettings.set_value(self.name, GLib.Variant(self.type_string, value))


class Settings:
    """
    User settings for the panel corners.

    Wraps a Gio.Settings for the bundled schema. Each key is reachable by
    name via get_property() and as an upper-case attribute
    (FORCE_EXTENSION_VALUES, DEBUG, PANEL_CORNER_RADIUS, ...). Connect to
    `settings` for 'changed::<key>' notifications.

    The default backend is a keyfile in the user's config directory, which
    Gio watches for edits made by other programs.
    """

    def __init__(self, backend: Optional[Gio.SettingsBackend] = None, path: Optional[str] = None):
        schema = load_schema()

        if backend is None:
            self.path = path or _default_settings_path()
            os.makedirs(os.path.dirname(self.path), exist_ok=True)
            backend = Gio.keyfile_settings_backend_new(self.path, SCHEMA_PATH, None)
        else:
            self.path = path

        self.settings = Gio.Settings.new_full(schema, backend, None)
        self.keys = [Setting(self.settings, schema.get_key(name)) for name in schema.list_keys()]
        self._properties = {prop.name: prop for prop in self.keys}

        for prop in self.keys:
            setattr(self, prop.name.replace('-', '_').upper(), prop)

    def get_property(self, name: str) -> Setting:
        try:
            return self._properties[name]
        except KeyError:
            raise SettingsError(f"Unknown settings key: {name}") from None

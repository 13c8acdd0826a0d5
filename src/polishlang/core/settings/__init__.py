"""Settings model and persistence."""

from .errors import (
    KeyLookupFailed,
    KeySaveFailed,
    LoadFailed,
    SaveFailed,
    SettingsError,
)
from .settings import (
    DEFAULT_SHORTCUT,
    DEFAULT_TRANSLATE_SHORTCUT,
    Settings,
    get_config_dir,
    get_settings_file,
)
from .store import JsonSettingsStore, SettingsStore

__all__ = [
    "DEFAULT_SHORTCUT",
    "DEFAULT_TRANSLATE_SHORTCUT",
    "JsonSettingsStore",
    "KeyLookupFailed",
    "KeySaveFailed",
    "LoadFailed",
    "SaveFailed",
    "Settings",
    "SettingsError",
    "SettingsStore",
    "get_config_dir",
    "get_settings_file",
]

"""Failures raised by settings store collaborators."""


class SettingsError(RuntimeError):
    """Base class for settings persistence failures."""


class LoadFailed(SettingsError):
    """The persisted settings could not be read or were corrupt."""


class SaveFailed(SettingsError):
    """The settings store rejected a full settings write."""


class KeyLookupFailed(SettingsError):
    """A single provider's credential could not be read."""


class KeySaveFailed(SettingsError):
    """A single provider's credential could not be written."""

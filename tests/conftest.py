"""
Shared fixtures.

Provides an in-memory settings store with switchable failures, and Qt cleanup
for the widget tests.
"""
import copy
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from polishlang.core.settings import (
    KeyLookupFailed,
    KeySaveFailed,
    LoadFailed,
    SaveFailed,
    Settings,
)

LEGACY_RECORD = {
    "shortcut": "CmdOrCtrl+Alt+P",
    "api_key": "k1",
    "model": "gpt-4",
    "base_url": "https://api.openai.com/v1",
    "prompt": "Polish this:",
    "provider": "openai",
}


class FakeSettingsStore:
    """Settings store kept in memory. Flip the ``fail_*`` flags to inject errors."""

    def __init__(self, record=None):
        self.record = copy.deepcopy(record)
        self.saved = []
        self.save_attempts = []
        self.key_writes = []
        self.key_reads = []
        self.fail_load = False
        self.fail_save = False
        self.fail_get = False
        self.fail_set = False

    async def load_settings(self):
        if self.fail_load:
            raise LoadFailed("settings store unreachable")
        return copy.deepcopy(self.record)

    async def save_settings(self, settings: Settings) -> None:
        self.save_attempts.append(settings.model_copy(deep=True))
        if self.fail_save:
            raise SaveFailed("disk full")
        self.saved.append(settings.model_copy(deep=True))
        self.record = settings.model_dump()

    async def get_provider_key(self, provider_id):
        self.key_reads.append(provider_id)
        if self.fail_get:
            raise KeyLookupFailed("keychain locked")
        if self.record is None:
            return None
        return self.record.get("api_keys", {}).get(provider_id)

    async def set_provider_key(self, provider_id, api_key):
        if self.fail_set:
            raise KeySaveFailed("keychain locked")
        self.key_writes.append((provider_id, api_key))
        if self.record is None:
            self.record = Settings.defaults().model_dump()
        self.record.setdefault("api_keys", {})[provider_id] = api_key


@pytest.fixture
def store_factory():
    return FakeSettingsStore


@pytest.fixture
def legacy_record():
    return copy.deepcopy(LEGACY_RECORD)


@pytest.fixture
def cleanup_qt_objects(qtbot):
    """
    Cleanup fixture for widget tests to ensure Qt objects are properly
    destroyed before the next test starts.
    """
    yield

    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app:
        app.processEvents()

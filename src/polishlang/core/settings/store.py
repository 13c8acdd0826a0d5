"""
Settings persistence collaborators.

``SettingsStore`` is the contract the sync core talks to. ``JsonSettingsStore``
keeps the record in a JSON file under the user config directory.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ...utils.logger import get_logger
from .errors import KeyLookupFailed, KeySaveFailed, LoadFailed, SaveFailed
from .settings import Settings, get_settings_file

logger = get_logger(__name__)


class SettingsStore(Protocol):
    async def load_settings(self) -> Optional[Dict[str, Any]]: ...

    async def save_settings(self, settings: Settings) -> None: ...

    async def get_provider_key(self, provider_id: str) -> Optional[str]: ...

    async def set_provider_key(self, provider_id: str, api_key: str) -> None: ...


class JsonSettingsStore:
    """Store the settings record as pretty-printed JSON.

    Writes are serialized per document with an ``asyncio.Lock`` and all file
    access runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = get_settings_file()
        return self._path

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    async def load_settings(self) -> Optional[Dict[str, Any]]:
        try:
            return await asyncio.to_thread(self._read)
        except (OSError, ValueError, TypeError) as e:
            raise LoadFailed(f"Failed to read settings from {self.path}: {e}") from e

    async def save_settings(self, settings: Settings) -> None:
        data = settings.model_dump()
        async with self._lock:
            try:
                await asyncio.to_thread(self._write, data)
            except OSError as e:
                raise SaveFailed(f"Failed to write settings: {e}") from e
        logger.debug(f"Settings written to {self.path}")

    async def get_provider_key(self, provider_id: str) -> Optional[str]:
        try:
            data = await asyncio.to_thread(self._read)
        except (OSError, ValueError, TypeError) as e:
            raise KeyLookupFailed(
                f"Failed to read API key for {provider_id}: {e}"
            ) from e

        if data is None:
            return None

        api_keys = data.get("api_keys")
        if isinstance(api_keys, dict):
            value = api_keys.get(provider_id)
            if isinstance(value, str) and value:
                return value

        # Records from before per-provider keys hold one key for their provider
        legacy_key = data.get("api_key")
        if data.get("provider") == provider_id and isinstance(legacy_key, str):
            return legacy_key or None
        return None

    async def set_provider_key(self, provider_id: str, api_key: str) -> None:
        async with self._lock:
            try:
                data = await asyncio.to_thread(self._read)
            except (OSError, ValueError, TypeError) as e:
                raise KeySaveFailed(
                    f"Failed to read settings before saving API key: {e}"
                ) from e

            if data is None:
                data = Settings.defaults().model_dump()

            api_keys = data.get("api_keys")
            if not isinstance(api_keys, dict):
                api_keys = {}
            legacy_key = data.pop("api_key", None)
            provider = data.get("provider")
            if legacy_key and provider and provider not in api_keys:
                api_keys[provider] = legacy_key

            if api_key:
                api_keys[provider_id] = api_key
            else:
                api_keys.pop(provider_id, None)
            data["api_keys"] = api_keys

            try:
                await asyncio.to_thread(self._write, data)
            except OSError as e:
                raise KeySaveFailed(
                    f"Failed to save API key for {provider_id}: {e}"
                ) from e

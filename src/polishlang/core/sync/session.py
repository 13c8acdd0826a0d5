"""Settings session: owns the credential cache and serializes sync operations."""

import asyncio
from typing import Any, Dict, Optional

from ...utils.logger import get_logger
from ..providers import get_provider
from ..settings import KeyLookupFailed, LoadFailed, Settings, SettingsStore
from .credentials import CredentialCache
from .form import FormState
from .loader import form_from_settings, initialize
from .provider_switch import on_provider_change
from .save import SaveResult, save

logger = get_logger(__name__)


class _TimeoutStore:
    """Wrap a store so a stalled read fails like the operation it belongs to.

    Writes pass straight through: a write that outlives a timeout may still
    land, so its caller waits for the real outcome instead.
    """

    def __init__(self, store: SettingsStore, timeout: float):
        self._store = store
        self._timeout = timeout

    async def _call(self, coro, error_cls, what: str):
        try:
            return await asyncio.wait_for(coro, self._timeout)
        except asyncio.TimeoutError:
            raise error_cls(f"{what} timed out after {self._timeout}s") from None

    async def load_settings(self) -> Optional[Dict[str, Any]]:
        return await self._call(
            self._store.load_settings(), LoadFailed, "Loading settings"
        )

    async def save_settings(self, settings: Settings) -> None:
        await self._store.save_settings(settings)

    async def get_provider_key(self, provider_id: str) -> Optional[str]:
        return await self._call(
            self._store.get_provider_key(provider_id),
            KeyLookupFailed,
            f"Reading API key for {provider_id}",
        )

    async def set_provider_key(self, provider_id: str, api_key: str) -> None:
        await self._store.set_provider_key(provider_id, api_key)


class SettingsSession:
    """
    Holds the state shared by load, provider switch and save.

    Every public coroutine takes the session lock, so a switch or save always
    completes before the next one starts, even when callers overlap.

    Attributes:
        cache: The credential cache for this session.
        form: The most recent form state, ``None`` before ``start``.
        settings: The last loaded or successfully saved settings.
        load_error: Set when startup fell back to defaults after a failed load.
    """

    def __init__(self, store: SettingsStore, timeout: Optional[float] = None):
        self._store = _TimeoutStore(store, timeout) if timeout else store
        self._lock = asyncio.Lock()
        self.cache = CredentialCache()
        self.form: Optional[FormState] = None
        self.settings: Optional[Settings] = None
        self.load_error: Optional[LoadFailed] = None

    async def start(self) -> FormState:
        async with self._lock:
            try:
                settings, cache = await initialize(self._store)
                self.load_error = None
            except LoadFailed as e:
                logger.error(f"Could not load settings, starting from defaults: {e}")
                self.load_error = e
                settings, cache = Settings.defaults(), CredentialCache()

            self.cache.restore(cache.to_dict())
            self.settings = settings

            form = await on_provider_change(
                settings.provider,
                form_from_settings(settings),
                self.cache,
                self._store,
            )
            form.model = settings.model
            self.form = form
            return form

    async def switch_provider(
        self, provider_id: str, form: Optional[FormState] = None
    ) -> FormState:
        async with self._lock:
            form = self._current_form(form)
            form = await on_provider_change(provider_id, form, self.cache, self._store)
            form.model = self._initial_model(provider_id)
            self.form = form
            return form

    async def save(self, form: Optional[FormState] = None) -> SaveResult:
        async with self._lock:
            form = self._current_form(form)
            result = await save(form, self.cache, self._store)
            if result.ok:
                self.settings = result.snapshot
            self.form = form
            return result

    def _current_form(self, form: Optional[FormState]) -> FormState:
        if form is not None:
            return form
        if self.form is None:
            raise RuntimeError("Settings session has not been started")
        return self.form

    def _initial_model(self, provider_id: str) -> str:
        # Restore the saved model when switching back to the saved provider
        if self.settings is not None and self.settings.provider == provider_id:
            return self.settings.model
        return get_provider(provider_id).default_model

"""Startup load of persisted settings, with defaults and legacy migration."""

from typing import Tuple

from pydantic import ValidationError

from ...utils.logger import get_logger
from ..settings import LoadFailed, Settings, SettingsStore
from .credentials import CredentialCache
from .form import FormState

logger = get_logger(__name__)


async def initialize(store: SettingsStore) -> Tuple[Settings, CredentialCache]:
    """
    Load settings through ``store`` and seed a credential cache from them.

    An absent record is a first run and yields defaults. A failed or corrupt
    load raises ``LoadFailed``; defaults are never substituted for it here.
    Nothing is persisted, a migration only becomes durable on the next save.
    """
    record = await store.load_settings()

    if record is None:
        logger.info("No saved settings found, using defaults")
        return Settings.defaults(), CredentialCache()

    try:
        settings = Settings.from_record(record)
    except ValidationError as e:
        raise LoadFailed(f"Saved settings are invalid: {e}") from e

    settings.migrate_legacy_api_key()
    cache = CredentialCache(settings.api_keys)

    logger.info(
        f"Loaded settings for provider '{settings.provider}' "
        f"with keys for {len(cache)} provider(s)"
    )
    return settings, cache


def form_from_settings(settings: Settings) -> FormState:
    """Build the unprimed form. The caller runs a provider change to fill it in."""
    return FormState(
        shortcut=settings.shortcut,
        translate_shortcut=settings.translate_shortcut,
        base_url=settings.base_url,
        prompt=settings.prompt,
        sound_enabled=settings.sound_enabled,
        notifications_enabled=settings.notifications_enabled,
    )

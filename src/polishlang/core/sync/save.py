"""Builds the settings snapshot from the form and persists it."""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ...utils.logger import get_logger
from ..providers import get_provider
from ..settings import SaveFailed, Settings, SettingsStore
from .credentials import CredentialCache
from .form import FormState
from .provider_switch import flush_credential

logger = get_logger(__name__)


@dataclass
class SaveResult:
    ok: bool
    error: Optional[str] = None
    snapshot: Optional[Settings] = None


def build_snapshot(form: FormState, cache: CredentialCache) -> Settings:
    if form.provider is None:
        raise ValueError("Cannot build settings before a provider is selected")

    provider = get_provider(form.provider)
    model = form.model
    if not provider.has_model(model):
        logger.warning(
            f"No valid model selected for {provider.id}, "
            f"saving default {provider.default_model}"
        )
        model = provider.default_model

    return Settings(
        shortcut=form.shortcut,
        translate_shortcut=form.translate_shortcut,
        provider=provider.id,
        api_keys=cache.to_dict(),
        model=model,
        base_url=form.base_url.strip(),
        prompt=form.prompt,
        sound_enabled=form.sound_enabled,
        notifications_enabled=form.notifications_enabled,
    )


async def save(
    form: FormState, cache: CredentialCache, store: SettingsStore
) -> SaveResult:
    """
    Capture the displayed credential and persist a full settings snapshot.

    The form is never modified. If the store rejects the write the cache is put
    back the way it was, so retrying without edits produces the same snapshot.
    """
    try:
        snapshot = build_snapshot(form, cache)
    except ValidationError as e:
        logger.warning(f"Refusing to save invalid settings: {e}")
        return SaveResult(ok=False, error=f"Invalid settings: {e}")
    previous_keys = cache.to_dict()

    await flush_credential(form.provider, form.api_key, cache, store)
    snapshot.api_keys = cache.to_dict()

    try:
        await store.save_settings(snapshot)
    except SaveFailed as e:
        cache.restore(previous_keys)
        logger.error(f"Failed to save settings: {e}")
        return SaveResult(ok=False, error=str(e))

    logger.info(f"Settings saved for provider '{snapshot.provider}'")
    return SaveResult(ok=True, snapshot=snapshot)

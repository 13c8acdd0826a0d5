"""Keeps the form consistent when the user selects a different provider."""

from dataclasses import replace

from ...utils.logger import get_logger
from ..providers import default_base_urls, get_provider
from ..settings import KeyLookupFailed, KeySaveFailed, SettingsStore
from .credentials import CredentialCache
from .form import FormState

logger = get_logger(__name__)


async def flush_credential(
    provider_id: str,
    api_key: str,
    cache: CredentialCache,
    store: SettingsStore,
) -> None:
    """Record a non-empty credential in the cache and the store."""
    api_key = api_key.strip()
    if not api_key:
        return

    cache.set(provider_id, api_key)
    try:
        await store.set_provider_key(provider_id, api_key)
    except KeySaveFailed as e:
        logger.warning(f"Could not persist API key for {provider_id}: {e}")


def reconcile_base_url(base_url: str, new_provider_id: str) -> str:
    # A URL equal to any provider default is treated as untouched, even when
    # the user typed it in by hand.
    base_url = base_url.strip()
    if not base_url or base_url in default_base_urls():
        return get_provider(new_provider_id).default_base_url
    return base_url


async def resolve_credential(
    provider_id: str, cache: CredentialCache, store: SettingsStore
) -> str:
    try:
        api_key = await store.get_provider_key(provider_id)
    except KeyLookupFailed as e:
        logger.warning(f"Falling back to cached API key for {provider_id}: {e}")
        return cache.get(provider_id)

    if not api_key:
        return cache.get(provider_id)

    cache.set(provider_id, api_key)
    return api_key


async def on_provider_change(
    new_provider_id: str,
    form: FormState,
    cache: CredentialCache,
    store: SettingsStore,
) -> FormState:
    """
    Switch the form to ``new_provider_id`` and return the updated form.

    The outgoing provider is ``form.provider``. Its credential is flushed to the
    cache and the store before the incoming provider's credential, model list,
    base URL and key placeholder are shown. Model selection is left empty for
    the caller to set.
    """
    provider = get_provider(new_provider_id)
    outgoing = form.provider

    if outgoing is not None:
        await flush_credential(outgoing, form.api_key, cache, store)

    base_url = reconcile_base_url(form.base_url, provider.id)
    api_key = await resolve_credential(provider.id, cache, store)

    logger.debug(f"Provider changed: {outgoing} -> {provider.id}")
    return replace(
        form,
        provider=provider.id,
        api_key=api_key,
        api_key_placeholder=provider.api_key_placeholder,
        model_options=list(provider.models),
        model=None,
        base_url=base_url,
    )

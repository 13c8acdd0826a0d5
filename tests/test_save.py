"""Tests for the save coordinator."""

import asyncio
import copy
from dataclasses import replace

import pytest

from polishlang.core.providers import get_provider
from polishlang.core.sync import CredentialCache, FormState, build_snapshot, save


def _form(**overrides) -> FormState:
    form = FormState(
        shortcut="CmdOrCtrl+Alt+P",
        translate_shortcut="CmdOrCtrl+Alt+T",
        base_url="https://api.openai.com/v1",
        prompt="Polish this:",
        provider="openai",
        api_key="sk-active",
        api_key_placeholder=get_provider("openai").api_key_placeholder,
        model_options=list(get_provider("openai").models),
        model="gpt-4o",
    )
    return replace(form, **overrides)


class TestSave:
    def test_snapshot_from_form(self, store_factory):
        store = store_factory()
        result = asyncio.run(save(_form(), CredentialCache(), store))

        assert result.ok
        snapshot = store.saved[-1]
        assert snapshot == result.snapshot
        assert snapshot.provider == "openai"
        assert snapshot.model == "gpt-4o"
        assert snapshot.prompt == "Polish this:"
        assert snapshot.api_keys == {"openai": "sk-active"}

    def test_captures_active_credential(self, store_factory):
        store = store_factory()
        cache = CredentialCache()
        asyncio.run(save(_form(), cache, store))

        assert cache.get("openai") == "sk-active"
        assert store.key_writes == [("openai", "sk-active")]

    def test_includes_inactive_provider_keys(self, store_factory):
        store = store_factory()
        cache = CredentialCache({"gemini": "AIza-1"})
        result = asyncio.run(save(_form(), cache, store))

        assert result.snapshot.api_keys == {"gemini": "AIza-1", "openai": "sk-active"}

    def test_empty_field_keeps_cached_key(self, store_factory):
        store = store_factory()
        cache = CredentialCache({"openai": "sk-old"})
        result = asyncio.run(save(_form(api_key=""), cache, store))

        assert store.key_writes == []
        assert result.snapshot.api_keys == {"openai": "sk-old"}

    def test_legacy_field_never_saved(self, store_factory):
        store = store_factory()
        asyncio.run(save(_form(), CredentialCache(), store))
        assert "api_key" not in store.record

    def test_key_save_failure_still_saves(self, store_factory):
        store = store_factory()
        store.fail_set = True
        result = asyncio.run(save(_form(), CredentialCache(), store))

        assert result.ok
        assert result.snapshot.api_keys == {"openai": "sk-active"}

    def test_unselected_model_saves_provider_default(self, store_factory):
        store = store_factory()
        result = asyncio.run(save(_form(model=None), CredentialCache(), store))
        assert result.snapshot.model == "gpt-3.5-turbo"

    def test_invalid_form_is_rejected(self, store_factory):
        store = store_factory()
        cache = CredentialCache()
        result = asyncio.run(save(_form(shortcut=""), cache, store))

        assert not result.ok
        assert "Invalid settings" in result.error
        assert store.save_attempts == []
        assert len(cache) == 0


class TestFailedSave:
    def test_reports_error(self, store_factory):
        store = store_factory()
        store.fail_save = True
        result = asyncio.run(save(_form(), CredentialCache(), store))

        assert not result.ok
        assert result.error == "disk full"
        assert result.snapshot is None

    def test_leaves_state_intact(self, store_factory):
        store = store_factory()
        store.fail_save = True
        cache = CredentialCache({"gemini": "AIza-1"})
        form = _form()
        form_before = copy.deepcopy(form)

        asyncio.run(save(form, cache, store))

        assert cache == {"gemini": "AIza-1"}
        assert form == form_before

    def test_retry_reproduces_snapshot(self, store_factory):
        store = store_factory()
        store.fail_save = True
        cache = CredentialCache({"gemini": "AIza-1"})
        form = _form()

        asyncio.run(save(form, cache, store))
        asyncio.run(save(form, cache, store))
        assert store.save_attempts[0] == store.save_attempts[1]

        store.fail_save = False
        result = asyncio.run(save(form, cache, store))
        assert result.ok
        assert result.snapshot == store.save_attempts[0]


class TestBuildSnapshot:
    def test_requires_provider(self):
        with pytest.raises(ValueError):
            build_snapshot(_form(provider=None), CredentialCache())

    def test_strips_base_url(self):
        snapshot = build_snapshot(
            _form(base_url="  https://proxy.example.com/v1 "), CredentialCache()
        )
        assert snapshot.base_url == "https://proxy.example.com/v1"

"""Tests for the provider registry."""

import pytest

from polishlang.core.providers import (
    DEFAULT_PROVIDER,
    PROVIDERS,
    default_base_urls,
    get_provider,
    is_known_provider,
)


class TestProviderRegistry:
    def test_openai_is_first_and_default(self):
        assert list(PROVIDERS) == ["openai", "gemini"]
        assert DEFAULT_PROVIDER == "openai"

    def test_every_provider_has_models_and_url(self):
        for provider in PROVIDERS.values():
            assert provider.models
            assert provider.default_base_url.startswith("https://")
            assert provider.api_key_placeholder

    def test_placeholders_are_unique(self):
        placeholders = [p.api_key_placeholder for p in PROVIDERS.values()]
        assert len(set(placeholders)) == len(placeholders)

    def test_default_model_is_first_entry(self):
        provider = get_provider("gemini")
        assert provider.default_model == provider.models[0].id

    def test_has_model(self):
        provider = get_provider("openai")
        assert provider.has_model("gpt-4o")
        assert not provider.has_model("gemini-pro")
        assert not provider.has_model(None)

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="anthropic"):
            get_provider("anthropic")

    def test_is_known_provider(self):
        assert is_known_provider("gemini")
        assert not is_known_provider("other")
        assert not is_known_provider(None)

    def test_default_base_urls(self):
        assert default_base_urls() == [
            "https://api.openai.com/v1",
            "https://generativelanguage.googleapis.com",
        ]

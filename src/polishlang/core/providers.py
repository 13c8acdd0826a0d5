"""Built-in provider definitions and registry."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ModelOption(BaseModel):
    """A single model offered by a provider."""

    id: str = Field(..., description="Model identifier used in API calls")
    label: str = Field(..., description="Human-readable model name")


class ProviderConfig(BaseModel):
    """Static definition of a provider. Never persisted."""

    id: str
    name: str
    default_base_url: str
    api_key_placeholder: str
    models: List[ModelOption] = Field(default_factory=list)

    @property
    def default_model(self) -> str:
        return self.models[0].id

    def model_ids(self) -> List[str]:
        return [m.id for m in self.models]

    def has_model(self, model_id: Optional[str]) -> bool:
        return model_id is not None and model_id in self.model_ids()


PROVIDER_OPENAI = ProviderConfig(
    id="openai",
    name="OpenAI",
    default_base_url="https://api.openai.com/v1",
    api_key_placeholder="sk-...",
    models=[
        ModelOption(id="gpt-3.5-turbo", label="GPT-3.5 Turbo"),
        ModelOption(id="gpt-4", label="GPT-4"),
        ModelOption(id="gpt-4-turbo", label="GPT-4 Turbo"),
        ModelOption(id="gpt-4o", label="GPT-4o"),
        ModelOption(id="gpt-4o-mini", label="GPT-4o Mini"),
    ],
)

PROVIDER_GEMINI = ProviderConfig(
    id="gemini",
    name="Google Gemini",
    default_base_url="https://generativelanguage.googleapis.com",
    api_key_placeholder="AIza...",
    models=[
        ModelOption(id="gemini-1.5-flash", label="Gemini 1.5 Flash"),
        ModelOption(id="gemini-1.5-pro", label="Gemini 1.5 Pro"),
        ModelOption(id="gemini-pro", label="Gemini Pro"),
    ],
)

# Registry: provider_id -> ProviderConfig. Order matters, the first entry is the
# default provider.
PROVIDERS: Dict[str, ProviderConfig] = {
    PROVIDER_OPENAI.id: PROVIDER_OPENAI,
    PROVIDER_GEMINI.id: PROVIDER_GEMINI,
}

DEFAULT_PROVIDER = next(iter(PROVIDERS))


def get_provider(provider_id: str) -> ProviderConfig:
    try:
        return PROVIDERS[provider_id]
    except KeyError:
        raise ValueError(f"Unknown provider: {provider_id!r}") from None


def is_known_provider(provider_id: Optional[str]) -> bool:
    return provider_id in PROVIDERS


def default_base_urls() -> List[str]:
    return [p.default_base_url for p in PROVIDERS.values()]

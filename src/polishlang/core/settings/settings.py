"""
Settings model for the persisted settings record.

Handles defaults, validation and the one-way migration from the legacy
single ``api_key`` field to per-provider ``api_keys``.
Uses platformdirs for cross-platform directory resolution.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...utils.logger import get_logger
from ..providers import DEFAULT_PROVIDER, get_provider, is_known_provider

logger = get_logger(__name__)

APP_NAME = "polish-language"

DEFAULT_SHORTCUT = "CmdOrCtrl+Alt+P"
DEFAULT_TRANSLATE_SHORTCUT = "CmdOrCtrl+Alt+T"


def get_config_dir() -> Path:
    return user_config_path(APP_NAME, appauthor=False, ensure_exists=True)


def get_settings_file() -> Path:
    return get_config_dir() / "settings.json"


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=False)

    shortcut: str
    translate_shortcut: str = DEFAULT_TRANSLATE_SHORTCUT
    provider: str = DEFAULT_PROVIDER
    api_keys: Dict[str, str] = Field(default_factory=dict)
    # Legacy single credential, read for migration only and never serialized
    api_key: Optional[str] = Field(default=None, exclude=True)
    model: str
    base_url: str
    prompt: str
    sound_enabled: bool = True
    notifications_enabled: bool = False

    @field_validator("shortcut")
    @classmethod
    def shortcut_not_empty(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("shortcut must be a non-empty string")
        return v

    @model_validator(mode="after")
    def reconcile_provider_and_model(self) -> "Settings":
        if not is_known_provider(self.provider):
            logger.warning(
                f"Unknown provider {self.provider!r}, resetting to {DEFAULT_PROVIDER}"
            )
            self.provider = DEFAULT_PROVIDER

        provider = get_provider(self.provider)
        if not provider.has_model(self.model):
            logger.warning(
                f"Model {self.model!r} is not offered by {provider.id}, "
                f"resetting to {provider.default_model}"
            )
            self.model = provider.default_model
        return self

    @classmethod
    def defaults(cls) -> "Settings":
        provider = get_provider(DEFAULT_PROVIDER)
        return cls(
            shortcut=DEFAULT_SHORTCUT,
            provider=provider.id,
            model=provider.default_model,
            base_url=provider.default_base_url,
            prompt="",
        )

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Settings":
        """Validate a persisted record. Raises ``pydantic.ValidationError``."""
        valid_keys = cls.model_fields.keys()
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        return cls.model_validate(filtered_data)

    def migrate_legacy_api_key(self) -> bool:
        """Fold the legacy credential into ``api_keys``. Returns True if one was present."""
        if self.api_key is None:
            return False

        legacy_key = self.api_key
        self.api_key = None
        if legacy_key and self.provider not in self.api_keys:
            self.api_keys[self.provider] = legacy_key
            logger.info(f"Migrated legacy API key to provider '{self.provider}'")
        return True

    def current_api_key(self) -> str:
        return self.api_keys.get(self.provider, "")

    def set_api_key(self, provider_id: str, api_key: str) -> None:
        if api_key:
            self.api_keys[provider_id] = api_key
        else:
            self.api_keys.pop(provider_id, None)

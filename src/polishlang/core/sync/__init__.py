from .credentials import CredentialCache
from .form import FormState
from .loader import form_from_settings, initialize
from .provider_switch import on_provider_change, reconcile_base_url
from .save import SaveResult, build_snapshot, save
from .session import SettingsSession

__all__ = [
    "CredentialCache",
    "FormState",
    "SaveResult",
    "SettingsSession",
    "build_snapshot",
    "form_from_settings",
    "initialize",
    "on_provider_change",
    "reconcile_base_url",
    "save",
]

from dataclasses import dataclass, field
from typing import List, Optional

from ..providers import ModelOption


@dataclass
class FormState:
    """Values shown in the settings form, independent of any widget toolkit.

    ``provider`` is the provider whose credential is currently displayed. It is
    ``None`` until the first provider change primes the form.
    """

    shortcut: str
    translate_shortcut: str
    base_url: str
    prompt: str
    sound_enabled: bool = True
    notifications_enabled: bool = False
    provider: Optional[str] = None
    api_key: str = ""
    api_key_placeholder: str = ""
    model_options: List[ModelOption] = field(default_factory=list)
    model: Optional[str] = None

    def model_ids(self) -> List[str]:
        return [m.id for m in self.model_options]

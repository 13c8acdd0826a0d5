from typing import Dict, Iterator, Mapping, Optional


class CredentialCache:
    """In-memory provider -> credential map for the running session.

    One instance is owned by the session and handed to the loader, the provider
    switch and the save step. It is not thread safe; callers serialize access.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._keys: Dict[str, str] = {}
        if initial:
            for provider_id, api_key in initial.items():
                self.set(provider_id, api_key)

    def get(self, provider_id: str) -> str:
        return self._keys.get(provider_id, "")

    def set(self, provider_id: str, api_key: str) -> None:
        if api_key:
            self._keys[provider_id] = api_key
        else:
            self._keys.pop(provider_id, None)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._keys)

    def restore(self, keys: Mapping[str, str]) -> None:
        self._keys = dict(keys)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CredentialCache):
            return self._keys == other._keys
        if isinstance(other, Mapping):
            return self._keys == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"CredentialCache(providers={sorted(self._keys)})"

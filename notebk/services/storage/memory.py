"""In-memory storage backend, used by tests and throwaway sessions."""

from typing import Optional

from notebk.services.storage.interface import StorageBackend


class MemoryStorage(StorageBackend):
    """Keeps every slot in a dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._slots.get(self.check_key(key))

    def write(self, key: str, text: str) -> None:
        self._slots[self.check_key(key)] = text

    def keys(self) -> list[str]:
        return sorted(self._slots)

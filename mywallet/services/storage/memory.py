"""In-memory key-value store, used by tests and the "memory" backend."""

from typing import Optional

from mywallet.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def dump(self) -> dict[str, str]:
        """Copy of everything stored (handy for assertions)."""
        return dict(self._data)

"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Swap the JSON file for another durable backend later
2. Use in-memory storage for testing
3. Keep the state engine decoupled from how bytes reach the disk

The interface is intentionally tiny. Values are opaque strings; the
engine does its own (de)serialization. There are no transactions and no
atomicity across keys.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the persistent store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StoreUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StoreUnavailableError: If the backend cannot be written
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Delete a key. Removing an absent key is not an error.

        Raises:
            StoreUnavailableError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreUnavailableError(StorageError):
    """The storage backend could not be read or written."""
    pass

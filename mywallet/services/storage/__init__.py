"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The JSON file backend is the default; the in-memory one serves tests.
"""

from mywallet.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StoreUnavailableError,
)
from mywallet.services.storage.json_file import JsonFileStore
from mywallet.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "StorageError",
    "StoreUnavailableError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]

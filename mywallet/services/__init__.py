"""Services package."""

from mywallet.services.auth import AuthGate
from mywallet.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    StorageError,
    StoreUnavailableError,
)

__all__ = [
    # Auth
    "AuthGate",
    # Storage services
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "StorageError",
    "StoreUnavailableError",
]

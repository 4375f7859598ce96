"""
Storage Services Package

Provides the storage slot interface, its file and in-memory
implementations, and the StateStore that persists the AppState document.
"""

from notebk.services.storage.interface import (
    InvalidKeyError,
    StorageBackend,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from notebk.services.storage.file_storage import FileStorage
from notebk.services.storage.memory import MemoryStorage
from notebk.services.storage.state_store import (
    DEFAULT_STORAGE_KEY,
    StateStore,
    default_state,
    repair_document,
)

__all__ = [
    # Interface
    "StorageBackend",
    # Exceptions
    "InvalidKeyError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "FileStorage",
    "MemoryStorage",
    # Document store
    "DEFAULT_STORAGE_KEY",
    "StateStore",
    "default_state",
    "repair_document",
]

"""Services package."""

from notebk.services.storage import (
    FileStorage,
    MemoryStorage,
    StateStore,
    StorageBackend,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from notebk.services.transfer import (
    Exporter,
    HostPlatform,
    TransferError,
    build_exporter,
    detect_platform,
)

__all__ = [
    # Storage services
    "FileStorage",
    "MemoryStorage",
    "StateStore",
    "StorageBackend",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Transfer services
    "Exporter",
    "HostPlatform",
    "TransferError",
    "build_exporter",
    "detect_platform",
]

"""
Abstract Storage Interface

DESIGN DECISION: The document lives in a named key-value slot.
Defining the slot as an interface allows us to:
1. Keep the document on disk in production
2. Use in-memory storage for testing
3. Swap in another local store later without touching the state logic

The interface is intentionally tiny: read a slot, overwrite a slot.
There is no partial update; the whole document is written every time.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional


KEY_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")


class StorageBackend(ABC):
    """
    Abstract interface for a local key-value text store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the text stored at a key.

        Args:
            key: The slot name

        Returns:
            The stored text, or None if the slot is empty

        Raises:
            StorageReadError: If the slot exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, text: str) -> None:
        """
        Overwrite the text stored at a key.

        Args:
            key: The slot name
            text: The full new content

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every occupied slot, sorted."""
        pass

    @staticmethod
    def check_key(key: str) -> str:
        """Reject slot names that could escape the store."""
        if not KEY_PATTERN.fullmatch(key) or key in (".", ".."):
            raise InvalidKeyError(f"Invalid storage key: {key!r}")
        return key


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """A stored slot exists but could not be read."""
    pass


class StorageWriteError(StorageError):
    """The host rejected a write."""
    pass


class InvalidKeyError(StorageError):
    """Slot name is not allowed."""
    pass

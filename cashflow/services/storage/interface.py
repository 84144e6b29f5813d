"""
Abstract Blob Store Interface

DESIGN DECISION: The ledger core only ever needs a durable string-keyed
store of opaque text blobs. Keeping the interface this small means:
1. An in-memory store is enough for tests
2. A file-per-key store is enough for a single local writer
3. Any key-value backend can be dropped in later

There is no locking, no transactions and no compare-and-swap here.
Callers read a whole blob, change it, and write the whole blob back.
"""

from abc import ABC, abstractmethod
from typing import Optional


# Persisted key layout
SESSION_KEY = "session"
DATA_PREFIX = "data:"


def ledger_key(user_id: str) -> str:
    """Key of the full ledger document for a user."""
    return f"{DATA_PREFIX}{user_id}"


def profile_key(user_id: str) -> str:
    """Key of the profile record for a user."""
    return f"{DATA_PREFIX}profile_{user_id}"


class BlobStoreInterface(ABC):
    """
    Abstract interface for key-value blob storage.

    Any storage implementation (memory, files, a device key-value store)
    must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: The blob key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a blob, replacing any previous value.

        Args:
            key: The blob key
            value: Text to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a blob. Removing a missing key is not an error.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not open or reach the storage backend."""
    pass

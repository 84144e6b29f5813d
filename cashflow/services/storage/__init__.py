"""
Storage Services Package

Provides the abstract blob store interface and its concrete backends.
The ledger core persists everything through this interface only.
"""

from cashflow.services.storage.interface import (
    DATA_PREFIX,
    SESSION_KEY,
    BlobStoreInterface,
    ConnectionError,
    StorageError,
    ledger_key,
    profile_key,
)
from cashflow.services.storage.file_store import FileBlobStore
from cashflow.services.storage.memory import InMemoryBlobStore

__all__ = [
    # Interface
    "BlobStoreInterface",
    # Key layout
    "DATA_PREFIX",
    "SESSION_KEY",
    "ledger_key",
    "profile_key",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Backends
    "FileBlobStore",
    "InMemoryBlobStore",
]

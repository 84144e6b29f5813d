"""Services package."""

from cashflow.services.storage import (
    BlobStoreInterface,
    ConnectionError,
    FileBlobStore,
    InMemoryBlobStore,
    StorageError,
)

__all__ = [
    "BlobStoreInterface",
    "ConnectionError",
    "FileBlobStore",
    "InMemoryBlobStore",
    "StorageError",
]

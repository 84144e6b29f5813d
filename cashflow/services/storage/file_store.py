"""
File-backed Blob Store

DESIGN DECISION: One UTF-8 file per key in a single data directory.
This is the local equivalent of a device key-value store:
1. No database setup required
2. Each blob can be inspected (and backed up) by hand
3. Writes go to a temp file first and are swapped in with os.replace,
   so a crash mid-write never leaves half a document behind

TRADEOFFS:
- One writer at a time (same as the rest of the ledger core)
- Every read and write touches the whole blob
"""

import os
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cashflow.config import get_settings
from cashflow.services.storage.interface import (
    BlobStoreInterface,
    ConnectionError,
    StorageError,
)


BLOB_SUFFIX = ".blob"


class FileBlobStore(BlobStoreInterface):
    """
    Stores each blob as a file named after its (percent-encoded) key.

    Transient OSErrors are retried; anything left after the last attempt
    surfaces as StorageError.
    """

    def __init__(
        self,
        data_dir: Optional[str | Path] = None,
        retry_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._dir = Path(data_dir if data_dir is not None else settings.data_dir)
        attempts = retry_attempts or settings.retry_attempts
        self._retrying = Retrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConnectionError(f"Cannot use data directory {self._dir}: {e}")

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path_for(self, key: str) -> Path:
        """Map a key such as 'data:abc' to a safe file name."""
        return self._dir / f"{quote(key, safe='')}{BLOB_SUFFIX}"

    def _read_file(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write_file(self, path: Path, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _delete_file(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[str]:
        """Read a blob from disk."""
        try:
            return self._retrying(self._read_file, self._path_for(key))
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}")

    async def set(self, key: str, value: str) -> None:
        """Write a blob to disk atomically."""
        try:
            self._retrying(self._write_file, self._path_for(key), value)
        except OSError as e:
            raise StorageError(f"Failed to save {key}: {e}")

    async def delete(self, key: str) -> None:
        """Remove a blob from disk."""
        try:
            self._retrying(self._delete_file, self._path_for(key))
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}")

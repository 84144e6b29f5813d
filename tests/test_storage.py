"""Tests for the blob store backends."""

import pytest

from cashflow.services.storage import (
    ConnectionError,
    FileBlobStore,
    InMemoryBlobStore,
    StorageError,
    ledger_key,
    profile_key,
)


class TestKeys:
    """Tests for the key layout."""

    def test_key_layout(self):
        assert ledger_key("abc") == "data:abc"
        assert profile_key("abc") == "data:profile_abc"


class TestInMemoryBlobStore:
    """Tests for the in-memory backend."""

    @pytest.mark.asyncio
    async def test_get_set_delete(self):
        store = InMemoryBlobStore()
        assert await store.get("k") is None
        await store.set("k", "v")
        assert await store.get("k") == "v"
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    def test_initial_contents(self):
        store = InMemoryBlobStore({"b": "2", "a": "1"})
        assert store.keys() == ["a", "b"]


class TestFileBlobStore:
    """Tests for the file backend."""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        store = FileBlobStore(tmp_path)
        assert await store.get("data:u1") is None
        await store.set("data:u1", '{"months": {}}')
        assert await store.get("data:u1") == '{"months": {}}'

    @pytest.mark.asyncio
    async def test_overwrite(self, tmp_path):
        store = FileBlobStore(tmp_path)
        await store.set("session", "one")
        await store.set("session", "two")
        assert await store.get("session") == "two"
        assert len(list(tmp_path.iterdir())) == 1

    @pytest.mark.asyncio
    async def test_keys_map_to_safe_file_names(self, tmp_path):
        store = FileBlobStore(tmp_path)
        await store.set("data:../escape", "x")
        files = list(tmp_path.iterdir())
        assert len(files) == 1
        assert files[0].parent == tmp_path
        assert "/" not in files[0].name

    @pytest.mark.asyncio
    async def test_delete_missing_is_fine(self, tmp_path):
        store = FileBlobStore(tmp_path)
        await store.delete("nothing")
        await store.set("k", "v")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_creates_data_dir(self, tmp_path):
        store = FileBlobStore(tmp_path / "nested" / "dir")
        await store.set("k", "v")
        assert store.data_dir.is_dir()

    def test_unusable_data_dir(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(ConnectionError):
            FileBlobStore(blocker / "sub")

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self, tmp_path):
        store = FileBlobStore(tmp_path, retry_attempts=3)
        await store.set("k", "v")
        real_read = store._read_file
        calls = []

        def flaky(path):
            calls.append(path)
            if len(calls) == 1:
                raise OSError("busy")
            return real_read(path)

        store._read_file = flaky
        assert await store.get("k") == "v"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_persistent_error_is_storage_error(self, tmp_path):
        store = FileBlobStore(tmp_path, retry_attempts=2)

        def broken(path, value):
            raise OSError("read-only file system")

        store._write_file = broken
        with pytest.raises(StorageError):
            await store.set("k", "v")

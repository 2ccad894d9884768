"""Tests for json_store module."""

import asyncio
import json
import threading

import pytest

from word_wizard.exceptions import StorageError
from word_wizard.services import JsonFileStore


@pytest.mark.asyncio
class TestJsonFileStore:
    """Tests for JsonFileStore."""

    async def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "missing.json")
        assert await store.get("history") is None

    async def test_set_persists_to_disk(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        store = JsonFileStore(path)

        await store.set("settings", {"anki_enabled": True})

        assert json.loads(path.read_text(encoding="utf-8")) == {"settings": {"anki_enabled": True}}
        assert await JsonFileStore(path).get("settings") == {"anki_enabled": True}

    async def test_remove(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        await store.set("a", 1)
        await store.set("b", 2)
        await store.remove("a")

        assert await JsonFileStore(tmp_path / "storage.json").get("a") is None
        assert await store.get("b") == 2

    async def test_corrupt_file_treated_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        assert await store.get("history") is None
        await store.set("history", [])
        assert json.loads(path.read_text(encoding="utf-8")) == {"history": []}

    async def test_unserializable_value_raises_storage_error(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        with pytest.raises(StorageError):
            await store.set("bad", {1, 2})

    async def test_failed_write_keeps_previous_document(self, tmp_path):
        path = tmp_path / "storage.json"
        store = JsonFileStore(path)
        await store.set("good", True)

        with pytest.raises(StorageError):
            await store.set("bad", object())

        assert await store.get("bad") is None
        assert json.loads(path.read_text(encoding="utf-8")) == {"good": True}

    async def test_file_access_runs_off_the_event_loop(self, tmp_path):
        store = ThreadRecordingStore(tmp_path / "storage.json")

        await store.set("history", [])
        await store.get("history")

        assert store.threads
        assert threading.get_ident() not in store.threads

    async def test_concurrent_writes_keep_every_key(self, tmp_path):
        path = tmp_path / "storage.json"
        store = JsonFileStore(path)

        await asyncio.gather(*(store.set(f"key{i}", i) for i in range(10)))

        assert json.loads(path.read_text(encoding="utf-8")) == {f"key{i}": i for i in range(10)}


class ThreadRecordingStore(JsonFileStore):
    """JsonFileStore that remembers which threads touched the file."""

    def __init__(self, path):
        super().__init__(path)
        self.threads = []

    def _read(self):
        self.threads.append(threading.get_ident())
        return super()._read()

    def _write(self, data):
        self.threads.append(threading.get_ident())
        super()._write(data)

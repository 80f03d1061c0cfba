"""Tests for the key-value storage backends."""

import json

import pytest

from storefront.core.exceptions import StorageError
from storefront.core.storage import FileStorage, MemoryStorage, create_storage


class TestMemoryStorage:
    def test_set_get_remove(self):
        storage = MemoryStorage({"a": "1"})

        storage.set("b", "2")
        storage.remove("a")

        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_remove_missing_key(self):
        MemoryStorage().remove("nothing")


class TestFileStorage:
    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "state" / "storage.json"
        FileStorage(str(path)).set("sparshCart", "[]")

        assert FileStorage(str(path)).get("sparshCart") == "[]"
        assert json.loads(path.read_text()) == {"sparshCart": "[]"}

    def test_missing_file_reads_empty(self, tmp_path):
        assert FileStorage(str(tmp_path / "none.json")).get("key") is None

    def test_corrupt_file_reads_empty_and_is_replaced(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{oops")
        storage = FileStorage(str(path))

        assert storage.get("key") is None
        storage.set("key", "value")
        assert storage.get("key") == "value"

    def test_remove(self, tmp_path):
        storage = FileStorage(str(tmp_path / "storage.json"))
        storage.set("a", "1")
        storage.set("b", "2")

        storage.remove("a")

        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(StorageError):
            FileStorage(str(blocker / "storage.json")).set("a", "1")


class TestCreateStorage:
    def test_memory_backend(self):
        assert isinstance(create_storage("memory"), MemoryStorage)

    def test_file_backend(self):
        assert isinstance(create_storage("FILE"), FileStorage)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage("floppy")

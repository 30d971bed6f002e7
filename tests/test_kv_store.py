"""
Tests for key-value storage backends.
"""

import pytest

from cursorpack.core.config import StorageConfig
from cursorpack.storage.kv_store import (
    JsonFileKeyValueStore,
    KeyValueStoreError,
    MemoryKeyValueStore,
    QSettingsKeyValueStore,
    open_key_value_store,
)


class TestMemoryKeyValueStore:
    """Tests for the in-memory store."""

    def test_set_and_get(self):
        """Test basic operations."""
        kv = MemoryKeyValueStore({"a": "1"})
        kv.set("b", "2")

        assert kv.get("a") == "1"
        assert kv.get("b") == "2"
        assert kv.get("missing") is None
        assert sorted(kv.keys()) == ["a", "b"]


class TestJsonFileKeyValueStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test that a fresh store has no keys."""
        kv = JsonFileKeyValueStore(tmp_path, "store.json")

        assert kv.keys() == []
        assert kv.get("cursor-file-pointer") is None

    def test_values_survive_reopen(self, tmp_path):
        """Test persistence across store instances."""
        JsonFileKeyValueStore(tmp_path, "store.json").set("k", '{"x": 1}')

        reopened = JsonFileKeyValueStore(tmp_path, "store.json")

        assert reopened.get("k") == '{"x": 1}'
        assert not (tmp_path / "store.tmp").exists()

    def test_set_overwrites(self, tmp_path):
        """Test that setting a key again replaces its value."""
        kv = JsonFileKeyValueStore(tmp_path, "store.json")
        kv.set("k", "old")
        kv.set("k", "new")

        assert kv.get("k") == "new"
        assert kv.keys() == ["k"]

    def test_corrupted_file(self, tmp_path):
        """Test that a corrupted file raises a store error."""
        (tmp_path / "store.json").write_text("{not json", encoding="utf-8")
        kv = JsonFileKeyValueStore(tmp_path, "store.json")

        with pytest.raises(KeyValueStoreError, match="Corrupted store file"):
            kv.get("k")

    def test_non_object_file(self, tmp_path):
        """Test that a JSON file holding a list is rejected."""
        (tmp_path / "store.json").write_text("[1, 2]", encoding="utf-8")
        kv = JsonFileKeyValueStore(tmp_path, "store.json")

        with pytest.raises(KeyValueStoreError, match="expected a JSON object"):
            kv.keys()

    def test_path_traversal(self, tmp_path):
        """Test that a filename escaping the data dir is refused."""
        with pytest.raises(KeyValueStoreError, match="Path traversal detected"):
            JsonFileKeyValueStore(tmp_path / "data", "../outside.json")


class TestQSettingsKeyValueStore:
    """Tests for the QSettings store."""

    def test_values_survive_reopen(self, tmp_path):
        """Test that JSON strings round-trip through the INI file."""
        path = tmp_path / "cursorpack.ini"
        value = '{"filename": "arrow.cur", "base64Data": "data:x;base64,QUJD"}'

        QSettingsKeyValueStore(path).set("cursor-file-pointer", value)
        reopened = QSettingsKeyValueStore(path)

        assert reopened.get("cursor-file-pointer") == value
        assert reopened.keys() == ["cursor-file-pointer"]

    def test_missing_key(self, tmp_path):
        """Test that an unknown key reads as None."""
        kv = QSettingsKeyValueStore(tmp_path / "cursorpack.ini")

        assert kv.get("cursor-file-help") is None


class TestOpenKeyValueStore:
    """Tests for backend selection."""

    def test_json_backend(self, tmp_path):
        """Test the JSON backend is the default."""
        kv = open_key_value_store(StorageConfig(data_dir=tmp_path))

        assert isinstance(kv, JsonFileKeyValueStore)
        assert kv.path == tmp_path.resolve() / "cursor_store.json"

    def test_qsettings_backend(self, tmp_path):
        """Test selecting the QSettings backend."""
        kv = open_key_value_store(StorageConfig(backend="qsettings", data_dir=tmp_path))

        assert isinstance(kv, QSettingsKeyValueStore)
        assert kv.path == tmp_path / "cursorpack.ini"

    def test_unknown_backend(self, tmp_path):
        """Test that an unknown backend is rejected."""
        with pytest.raises(ValueError, match="Unknown storage backend"):
            open_key_value_store(StorageConfig(backend="sqlite", data_dir=tmp_path))

"""
Tests for cursor record access and export selection.
"""

import json

import pytest

from cursorpack.core.config import StorageConfig
from cursorpack.core.slots import CursorSlot, ordered_slots
from cursorpack.storage.cursor_store import CursorFileStore
from cursorpack.storage.kv_store import MemoryKeyValueStore
from cursorpack.storage.schema import CursorFile


class TestCursorFileStore:
    """Tests for reading and writing records."""

    @pytest.fixture
    def kv(self):
        return MemoryKeyValueStore()

    @pytest.fixture
    def store(self, kv):
        return CursorFileStore(kv)

    def test_get_absent(self, store):
        """Test that a slot without a record reads as None."""
        assert store.get(CursorSlot.POINTER) is None

    def test_put_uses_slot_key(self, kv, store):
        """Test the per-slot key layout and stored JSON."""
        store.put(CursorFile.from_bytes("arrow.cur", b"x", CursorSlot.POINTER))

        stored = json.loads(kv.get("cursor-file-pointer"))
        assert stored["filename"] == "arrow.cur"
        assert stored["base64Data"].endswith(",eA==")

    def test_get_reads_editor_records(self, kv, store):
        """Test reading a record written by the editor."""
        kv.set(
            "cursor-file-busy",
            json.dumps(
                {
                    "filename": "hourglass.ani",
                    "type": "ani",
                    "slot": "busy",
                    "base64Data": "data:application/octet-stream;base64,UklGRg==",
                }
            ),
        )

        cursor_file = store.get(CursorSlot.BUSY)

        assert cursor_file.filename == "hourglass.ani"
        assert cursor_file.payload() == b"RIFF"

    def test_clear(self, store):
        """Test that clearing leaves an unpopulated record."""
        store.put(CursorFile.from_bytes("arrow.cur", b"x", CursorSlot.POINTER))
        store.clear(CursorSlot.POINTER)

        cursor_file = store.get(CursorSlot.POINTER)
        assert cursor_file is not None
        assert cursor_file.is_populated is False

    def test_custom_key_prefix(self, kv):
        """Test that key names come from the storage configuration."""
        store = CursorFileStore(kv, StorageConfig(cursor_key_prefix="cur:"))
        store.put(CursorFile.from_bytes("a.cur", b"x", CursorSlot.HAND))

        assert kv.keys() == ["cur:hand"]


class TestEnabledSlots:
    """Tests for the enabled-slots map."""

    @pytest.fixture
    def kv(self):
        return MemoryKeyValueStore()

    @pytest.fixture
    def store(self, kv):
        return CursorFileStore(kv)

    def test_defaults_to_all_enabled(self, kv, store):
        """Test that reading without a stored map enables every slot."""
        enabled = store.enabled_slots()

        assert all(enabled[slot] for slot in ordered_slots())
        assert kv.get("enabled-cursor-slots") is None

    def test_ensure_creates_once(self, kv, store):
        """Test that the default map is written once and then kept."""
        store.ensure_enabled_slots()
        stored = json.loads(kv.get("enabled-cursor-slots"))
        assert len(stored) == 17
        assert all(stored.values())

        store.set_enabled(CursorSlot.HELP, False)
        store.ensure_enabled_slots()

        assert store.enabled_slots()[CursorSlot.HELP] is False

    def test_missing_slots_default_to_enabled(self, kv, store):
        """Test a partial stored map."""
        kv.set("enabled-cursor-slots", json.dumps({"help": False, "bogus": False}))

        enabled = store.enabled_slots()

        assert enabled[CursorSlot.HELP] is False
        assert enabled[CursorSlot.POINTER] is True


class TestListPopulated:
    """Tests for the export selection."""

    @pytest.fixture
    def store(self):
        store = CursorFileStore(MemoryKeyValueStore())
        # Written out of registry order on purpose
        store.put(CursorFile.from_bytes("text.cur", b"t", CursorSlot.TEXT))
        store.put(CursorFile.from_bytes("arrow.cur", b"a", CursorSlot.POINTER))
        store.put(CursorFile.from_bytes("help.cur", b"h", CursorSlot.HELP))
        store.put(CursorFile.empty(CursorSlot.BUSY))
        return store

    def test_registry_order_and_populated_only(self, store):
        """Test that empty records are skipped and order is fixed."""
        files = store.list_populated(apply_enabled_filter=False)

        assert [f.slot for f in files] == [
            CursorSlot.POINTER,
            CursorSlot.HELP,
            CursorSlot.TEXT,
        ]

    def test_disabled_slot_excluded_when_filtering(self, store):
        """Test that a populated but disabled slot is left out."""
        store.set_enabled(CursorSlot.HELP, False)

        filtered = store.list_populated(apply_enabled_filter=True)
        unfiltered = store.list_populated(apply_enabled_filter=False)

        assert CursorSlot.HELP not in [f.slot for f in filtered]
        assert CursorSlot.HELP in [f.slot for f in unfiltered]

    def test_disabled_flag_does_not_populate_empty_slot(self, store):
        """Test that an enabled flag never includes an empty record."""
        store.set_enabled(CursorSlot.BUSY, True)

        files = store.list_populated(apply_enabled_filter=True)

        assert CursorSlot.BUSY not in [f.slot for f in files]

    def test_empty_store(self):
        """Test that nothing stored means nothing selected."""
        store = CursorFileStore(MemoryKeyValueStore())

        assert store.list_populated(apply_enabled_filter=True) == []

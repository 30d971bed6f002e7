"""
Cursor record access on top of a key-value store.

Layout:
- "<prefix><slot>": JSON-serialized CursorFile, one per slot
- "<enabled key>": JSON object mapping slot identifier to bool

list_populated() is the only place that decides which cursors an export
contains; the descriptor and the package both go through it.
"""

import json
from typing import Dict, List, Optional

from cursorpack.core.config import StorageConfig
from cursorpack.core.slots import CursorSlot, ordered_slots
from cursorpack.storage.kv_store import KeyValueStore
from cursorpack.storage.schema import CursorFile
from cursorpack.utils.logger import get_logger

logger = get_logger(__name__)


class CursorFileStore:
    """Reads and writes cursor records and the enabled-slots map."""

    def __init__(self, kv_store: KeyValueStore, config: Optional[StorageConfig] = None):
        """
        Initialize cursor store.

        Args:
            kv_store: Backing key-value store
            config: Storage configuration (key names)
        """
        self._kv = kv_store
        self._config = config or StorageConfig()

    def key_for(self, slot: CursorSlot) -> str:
        """Storage key of a slot's record."""
        return f"{self._config.cursor_key_prefix}{slot.value}"

    def get(self, slot: CursorSlot) -> Optional[CursorFile]:
        """
        Read the stored record for a slot.

        Stored values are trusted to be well-formed; a malformed value
        raises whatever error parsing it produces.

        Returns:
            CursorFile, or None if nothing is stored for the slot
        """
        raw = self._kv.get(self.key_for(slot))
        if raw is None:
            return None
        return CursorFile.from_dict(json.loads(raw))

    def put(self, cursor_file: CursorFile) -> None:
        """Store a record under its slot's key, replacing any previous one."""
        self._kv.set(self.key_for(cursor_file.slot), json.dumps(cursor_file.to_dict()))
        logger.info(
            f"Stored {cursor_file.filename or '<empty>'} for slot {cursor_file.slot.value}"
        )

    def clear(self, slot: CursorSlot) -> None:
        """Unassign a slot's file by storing the empty record."""
        self.put(CursorFile.empty(slot))

    def enabled_slots(self) -> Dict[CursorSlot, bool]:
        """
        Read the enabled-slots map.

        Slots missing from the stored map (or every slot, when no map is
        stored) count as enabled. Unknown slot identifiers are ignored.
        """
        enabled = {slot: True for slot in ordered_slots()}

        raw = self._kv.get(self._config.enabled_slots_key)
        if raw is None:
            return enabled

        for name, flag in json.loads(raw).items():
            try:
                enabled[CursorSlot(name)] = bool(flag)
            except ValueError:
                logger.warning(f"Ignoring unknown slot in enabled map: {name!r}")

        return enabled

    def ensure_enabled_slots(self) -> Dict[CursorSlot, bool]:
        """
        Create the all-enabled map if none is stored yet.

        Returns:
            The enabled-slots map now in effect
        """
        if self._kv.get(self._config.enabled_slots_key) is None:
            self._write_enabled({slot: True for slot in ordered_slots()})
            logger.info("Created default enabled-slots map")
        return self.enabled_slots()

    def set_enabled(self, slot: CursorSlot, enabled: bool) -> None:
        """Turn a slot on or off."""
        flags = self.enabled_slots()
        flags[slot] = enabled
        self._write_enabled(flags)
        logger.info(f"Slot {slot.value} {'enabled' if enabled else 'disabled'}")

    def list_populated(self, apply_enabled_filter: bool) -> List[CursorFile]:
        """
        Collect the cursor files an export should contain.

        Args:
            apply_enabled_filter: Also drop slots switched off in the
                enabled-slots map

        Returns:
            Records with a non-empty payload, in slot registry order
        """
        enabled = self.enabled_slots() if apply_enabled_filter else None

        # Iteration order comes from the registry, not from the backend
        stored = set(self._kv.keys())

        files = []
        for slot in ordered_slots():
            if self.key_for(slot) not in stored:
                continue
            cursor_file = self.get(slot)
            if cursor_file is None or not cursor_file.is_populated:
                continue
            if enabled is not None and not enabled[slot]:
                continue
            files.append(cursor_file)

        logger.debug(
            f"{len(files)} populated slots (enabled filter: {apply_enabled_filter})"
        )
        return files

    def _write_enabled(self, flags: Dict[CursorSlot, bool]) -> None:
        payload = {slot.value: flag for slot, flag in flags.items()}
        self._kv.set(self._config.enabled_slots_key, json.dumps(payload))

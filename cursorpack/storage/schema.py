"""
Cursor record schema.

A cursor record binds one slot to one cursor file. The file travels as a
data URL ("<metadata>,<base64 payload>") so records stay plain JSON.
Cursor image formats are not parsed; payloads are opaque bytes.
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from cursorpack.core.slots import CursorSlot
from cursorpack.utils.logger import get_logger

logger = get_logger(__name__)

DATA_URL_PREFIX = "data:application/octet-stream;base64,"


class CursorDecodeError(Exception):
    """Cursor payload could not be decoded."""

    pass


class CursorFileType(Enum):
    """Cursor payload classification (informational only)."""

    CUR = "cur"
    ANI = "ani"
    UNKNOWN = "unknown"

    @classmethod
    def from_filename(cls, filename: str) -> "CursorFileType":
        """Classify a file by its extension."""
        suffix = Path(filename).suffix.lower()
        if suffix == ".cur":
            return cls.CUR
        if suffix == ".ani":
            return cls.ANI
        return cls.UNKNOWN


@dataclass
class CursorFile:
    """
    Cursor file assigned to a slot.

    An empty base64_data means the slot has no file; such records are
    skipped by every export step.
    """

    filename: str = ""
    type: CursorFileType = CursorFileType.UNKNOWN
    slot: CursorSlot = CursorSlot.POINTER

    # "<metadata>,<base64 payload>"
    base64_data: str = ""

    @property
    def is_populated(self) -> bool:
        """True if a file is assigned."""
        return len(self.base64_data) != 0

    def payload(self) -> bytes:
        """
        Decode the file contents.

        Returns:
            Raw cursor file bytes

        Raises:
            CursorDecodeError: If the data URL has no comma or the payload
                is not valid base64
        """
        _, sep, encoded = self.base64_data.partition(",")
        if not sep:
            raise CursorDecodeError(
                f"{self.slot.value}: data for {self.filename!r} is not a data URL"
            )

        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CursorDecodeError(
                f"{self.slot.value}: invalid base64 payload for {self.filename!r}: {e}"
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "filename": self.filename,
            "type": self.type.value,
            "slot": self.slot.value,
            "base64Data": self.base64_data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CursorFile":
        """Create from dictionary."""
        return cls(
            filename=data.get("filename", ""),
            type=CursorFileType(data.get("type", CursorFileType.UNKNOWN.value)),
            slot=CursorSlot(data["slot"]),
            base64_data=data.get("base64Data", ""),
        )

    @classmethod
    def empty(cls, slot: CursorSlot) -> "CursorFile":
        """Record for a slot with no file assigned."""
        return cls(slot=slot)

    @classmethod
    def from_bytes(cls, filename: str, data: bytes, slot: CursorSlot) -> "CursorFile":
        """
        Create a record from raw file contents.

        Args:
            filename: Name the file will have inside the package
            data: Raw cursor file bytes
            slot: Slot the file is assigned to

        Returns:
            Populated CursorFile
        """
        encoded = base64.b64encode(data).decode("ascii")
        return cls(
            filename=filename,
            type=CursorFileType.from_filename(filename),
            slot=slot,
            base64_data=DATA_URL_PREFIX + encoded,
        )

    @classmethod
    def from_path(cls, path: Union[str, Path], slot: CursorSlot) -> "CursorFile":
        """
        Create a record from a cursor file on disk.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        data = path.read_bytes()
        logger.debug(f"Read {len(data)} bytes from {path} for slot {slot.value}")
        return cls.from_bytes(path.name, data, slot)

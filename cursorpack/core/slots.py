"""
Cursor slot registry.

The fixed, ordered set of Windows cursor roles a scheme can bind.
Member order is the order of the registry scheme value and of every
generated section.
"""

from enum import Enum
from typing import Dict, List


class CursorSlot(Enum):
    """
    Windows cursor scheme slots.

    Values are the identifiers used as string keys in install.inf.
    "unavailiable" is spelled the way Windows cursor .inf files spell it.
    """

    POINTER = "pointer"
    HELP = "help"
    WORK = "work"
    BUSY = "busy"
    CROSS = "cross"
    TEXT = "text"
    HAND = "hand"
    UNAVAILIABLE = "unavailiable"
    VERT = "vert"
    HORZ = "horz"
    DGN1 = "dgn1"
    DGN2 = "dgn2"
    MOVE = "move"
    ALTERNATE = "alternate"
    LINK = "link"
    LOCATION = "location"
    PERSON = "person"


# Labels shown in the Windows mouse control panel
_SCHEME_LABELS: Dict[CursorSlot, str] = {
    CursorSlot.POINTER: "normal select",
    CursorSlot.HELP: "help select",
    CursorSlot.WORK: "working in background",
    CursorSlot.BUSY: "busy",
    CursorSlot.CROSS: "precision select",
    CursorSlot.TEXT: "text select",
    CursorSlot.HAND: "handwriting",
    CursorSlot.UNAVAILIABLE: "unavailable",
    CursorSlot.VERT: "vertical resize",
    CursorSlot.HORZ: "horizontal resize",
    CursorSlot.DGN1: "diagonal resize 1 \\",
    CursorSlot.DGN2: "diagonal resize 2 /",
    CursorSlot.MOVE: "move",
    CursorSlot.ALTERNATE: "alternate select",
    CursorSlot.LINK: "link select",
    CursorSlot.LOCATION: "location select",
    CursorSlot.PERSON: "person select",
}


def ordered_slots() -> List[CursorSlot]:
    """
    Get all slots in registry order.

    Returns:
        List of the 17 cursor slots
    """
    return list(CursorSlot)


def scheme_label(slot: CursorSlot) -> str:
    """Get the human-readable scheme label for a slot."""
    return _SCHEME_LABELS[slot]


def parse_slot(name: str) -> CursorSlot:
    """
    Look up a slot by its identifier.

    Args:
        name: Slot identifier, e.g. "pointer"

    Returns:
        Matching CursorSlot

    Raises:
        ValueError: If the name is not a known slot
    """
    try:
        return CursorSlot(name.strip().lower())
    except ValueError:
        valid = ", ".join(slot.value for slot in CursorSlot)
        raise ValueError(f"Unknown cursor slot {name!r} (expected one of: {valid})")

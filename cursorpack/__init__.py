"""
CursorPack - Windows cursor scheme packager.

Collects one cursor file per Windows cursor slot (pointer, busy, text, ...)
and exports them as an installable package:

- install.inf describing the registry scheme and file copy plan
- a zip archive with the distinct cursor files plus install.inf

Storage:
- Cursor records live in an injected key-value store
- JSON file and QSettings backends, in-memory store for tests
- Cursor payloads are opaque bytes (no .cur/.ani parsing)

Architecture:
- Slot registry -> store accessor -> descriptor generator -> package builder
- One filtering rule shared by every export step
"""

__version__ = "0.1.0"
__author__ = "CursorPack Team"
__license__ = "MIT"

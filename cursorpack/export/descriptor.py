"""
install.inf generation.

Renders the Windows setup-information file that copies the cursor files
into %SystemRoot%\\Cursors\\<dir> and registers them as a cursor scheme
under HKCU\\Control Panel\\Cursors\\Schemes.
"""

from typing import List, Optional, Sequence

from cursorpack.core.config import ExportConfig
from cursorpack.storage.cursor_store import CursorFileStore
from cursorpack.storage.schema import CursorFile
from cursorpack.utils.logger import get_logger

logger = get_logger(__name__)

# Directory id 10 is %SystemRoot%
_HEADER = [
    "[Version]",
    'signature="$CHICAGO$"',
    "",
    "[DefaultInstall]",
    "CopyFiles = Scheme.Cur",
    "AddReg    = Scheme.Reg",
    "",
    "[DestinationDirs]",
    'Scheme.Cur = 10,"%CUR_DIR%"',
    "",
]


def effective_dir_name(pack_name: str, dir_name: str) -> str:
    """Directory name to install into: dir_name, or pack_name if empty."""
    return dir_name if dir_name else pack_name


def unique_filenames(files: Sequence[CursorFile]) -> List[str]:
    """Distinct filenames in first-seen order."""
    seen = set()
    names = []
    for cursor_file in files:
        if cursor_file.filename in seen:
            continue
        seen.add(cursor_file.filename)
        names.append(cursor_file.filename)
    return names


def render_install_inf(files: Sequence[CursorFile], pack_name: str, dir_name: str) -> str:
    """
    Render install.inf for a set of cursor files.

    Pure function of its arguments. An empty file set still yields every
    section, with empty bodies.

    Args:
        files: Cursor files to include, in output order
        pack_name: Scheme name shown in the mouse control panel
        dir_name: Install directory under Cursors (falls back to pack_name)

    Returns:
        install.inf text, lines joined with "\\n", no trailing newline
    """
    cur_dir = effective_dir_name(pack_name, dir_name)

    placeholders = ",".join(f"%10%\\%CUR_DIR%\\%{f.slot.value}%" for f in files)

    lines = list(_HEADER)
    lines.append("[Scheme.Reg]")
    lines.append(
        f'HKCU,"Control Panel\\Cursors\\Schemes","%SCHEME_NAME%",,"{placeholders}"'
    )
    lines.append("")
    lines.append("; -- Common Information")
    lines.append("")

    lines.append("[Scheme.Cur]")
    lines.extend(f'"{name}"' for name in unique_filenames(files))
    lines.append("")

    lines.append("[Strings]")
    lines.append(f'CUR_DIR = "Cursors\\{cur_dir}"')
    lines.append(f'SCHEME_NAME = "{pack_name}"')
    lines.extend(f'{f.slot.value} = "{f.filename}"' for f in files)

    return "\n".join(lines)


class DescriptorGenerator:
    """Generates install.inf from the cursors currently in the store."""

    def __init__(self, store: CursorFileStore, config: Optional[ExportConfig] = None):
        self._store = store
        self._config = config or ExportConfig()

    def current_files(self) -> List[CursorFile]:
        """Cursor files the next export will contain."""
        return self._store.list_populated(self._config.apply_enabled_filter)

    def generate(self, pack_name: str, dir_name: str = "") -> str:
        """
        Generate install.inf text for the current store contents.

        Args:
            pack_name: Scheme name
            dir_name: Install directory name (defaults to pack_name)

        Returns:
            install.inf text
        """
        files = self.current_files()
        logger.debug(f"Generating install.inf for {pack_name!r} with {len(files)} cursors")
        return render_install_inf(files, pack_name, dir_name)

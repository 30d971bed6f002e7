"""
Cursor package (zip) builder.

Archive layout:
    <dir>/<cursor file>   one entry per distinct filename
    <dir>/install.inf

The archive is assembled in memory and only written to disk once it is
complete, so a failed export never leaves a partial zip behind.
"""

import asyncio
import io
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from cursorpack.core.config import ExportConfig
from cursorpack.export.descriptor import DescriptorGenerator, effective_dir_name
from cursorpack.storage.cursor_store import CursorFileStore
from cursorpack.utils.logger import get_logger
from cursorpack.utils.timing import Timer

logger = get_logger(__name__)

_COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


class PackageBuildError(Exception):
    """Archive could not be serialized or written."""

    pass


def _entry_name(cur_dir: str, filename: str) -> str:
    """Archive member name for a file inside the package directory."""
    return f"{cur_dir}/{filename}" if cur_dir else filename


class PackageBuilder:
    """
    Builds downloadable cursor packages.

    Reads the current cursor set through the store's list_populated(), the
    same selection the descriptor generator uses.
    """

    def __init__(
        self,
        store: CursorFileStore,
        descriptor: DescriptorGenerator,
        config: Optional[ExportConfig] = None,
    ):
        """
        Initialize package builder.

        Args:
            store: Cursor record store
            descriptor: install.inf generator
            config: Export configuration
        """
        self._store = store
        self._descriptor = descriptor
        self._config = config or ExportConfig()

    def archive_entries(self, pack_name: str, dir_name: str = "") -> Tuple[str, List[Tuple[str, bytes]]]:
        """
        Collect archive contents without serializing them.

        Returns:
            (effective directory name, [(entry name, bytes), ...]) with
            install.inf as the last entry

        Raises:
            CursorDecodeError: If a stored payload is malformed
        """
        cur_dir = effective_dir_name(pack_name, dir_name)
        files = self._store.list_populated(self._config.apply_enabled_filter)

        entries = []
        added = set()
        for cursor_file in files:
            if cursor_file.filename == self._config.descriptor_filename:
                logger.warning(
                    f"Skipping {cursor_file.filename} for {cursor_file.slot.value}: "
                    "name is reserved for the setup file"
                )
                continue
            if cursor_file.filename in added:
                logger.debug(
                    f"Skipping {cursor_file.filename} for {cursor_file.slot.value}: already added"
                )
                continue
            entries.append((_entry_name(cur_dir, cursor_file.filename), cursor_file.payload()))
            added.add(cursor_file.filename)

        inf_text = self._descriptor.generate(pack_name, dir_name)
        entries.append(
            (_entry_name(cur_dir, self._config.descriptor_filename), inf_text.encode("utf-8"))
        )
        return cur_dir, entries

    def build_archive(self, pack_name: str, dir_name: str = "") -> bytes:
        """
        Build the zip archive in memory.

        Args:
            pack_name: Scheme name
            dir_name: Top-level directory name (defaults to pack_name)

        Returns:
            Serialized zip archive

        Raises:
            CursorDecodeError: If a stored payload is malformed
            PackageBuildError: If serialization fails
        """
        cur_dir, entries = self.archive_entries(pack_name, dir_name)
        return self._serialize(cur_dir, entries)

    async def build(self, pack_name: str, dir_name: str = "") -> str:
        """
        Build the package and write it to the output directory.

        Serialization and the file write run off the event loop.

        Args:
            pack_name: Scheme name
            dir_name: Top-level directory name (defaults to pack_name)

        Returns:
            file:// URI of the written archive

        Raises:
            CursorDecodeError: If a stored payload is malformed
            PackageBuildError: If serialization or writing fails
        """
        with Timer("export") as timer:
            cur_dir, entries = self.archive_entries(pack_name, dir_name)
            data = await asyncio.to_thread(self._serialize, cur_dir, entries)
            path = await asyncio.to_thread(self._write, cur_dir, data)

        logger.info(f"Package written: {path} ({len(data)} bytes, {timer})")
        return path.resolve().as_uri()

    def _serialize(self, cur_dir: str, entries: List[Tuple[str, bytes]]) -> bytes:
        """Serialize entries into a zip archive."""
        buffer = io.BytesIO()
        compression = _COMPRESSION[self._config.compression]

        try:
            with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
                # An empty directory name puts the entries at the archive root
                if cur_dir:
                    folder = zipfile.ZipInfo(f"{cur_dir}/")
                    folder.external_attr = (0o40755 << 16) | 0x10
                    zf.writestr(folder, b"")

                for name, data in entries:
                    zf.writestr(name, data)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as e:
            error_msg = f"Failed to build package {cur_dir!r}: {e}"
            logger.error(error_msg)
            raise PackageBuildError(error_msg) from e

        logger.debug(f"Serialized {len(entries)} entries into {cur_dir!r}")
        return buffer.getvalue()

    def _write(self, cur_dir: str, data: bytes) -> Path:
        """Write the archive atomically into the output directory."""
        # The directory name may contain separators; keep the file name flat
        stem = cur_dir.replace("/", "_").replace("\\", "_") or "cursors"
        output_dir = self._config.output_dir
        target = output_dir / f"{stem}.zip"
        temp_path = target.with_suffix(".zip.tmp")

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(data)
            temp_path.replace(target)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            error_msg = f"Failed to write package {target}: {e}"
            logger.error(error_msg)
            raise PackageBuildError(error_msg) from e

        return target

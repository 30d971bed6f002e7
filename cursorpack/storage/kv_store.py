"""
Key-value storage backends for cursor records.

Every backend stores plain strings under string keys:
- MemoryKeyValueStore: in-process dict, used by tests
- JsonFileKeyValueStore: one JSON object on disk with atomic writes
- QSettingsKeyValueStore: Qt settings file (INI format)
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from PyQt6.QtCore import QSettings

from cursorpack.core.config import StorageConfig
from cursorpack.utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueStoreError(Exception):
    """Key-value storage errors."""

    pass


class KeyValueStore(Protocol):
    """String key-value storage used by the cursor store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class MemoryKeyValueStore:
    """Dict-backed store. Nothing is persisted."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """
    Key-value store kept in a single JSON file.

    The file is re-read on every access so changes made by another writer
    (the editor) are picked up by the next export.

    Security:
    - Path traversal protection
    - Atomic writes (temp file + replace)
    """

    def __init__(self, data_dir: Path, filename: str):
        """
        Initialize JSON file store.

        Args:
            data_dir: Directory holding the store file
            filename: Store file name

        Raises:
            KeyValueStoreError: If storage path is invalid
        """
        try:
            self._data_dir = Path(data_dir).resolve(strict=False)
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except (RuntimeError, OSError) as e:
            raise KeyValueStoreError(f"Invalid storage path: {e}") from e

        self._path = self._data_dir / filename

        # Ensure we're still within the intended directory
        if not self._is_safe_path(self._path):
            raise KeyValueStoreError("Path traversal detected")

        logger.info(f"JsonFileKeyValueStore initialized: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def keys(self) -> List[str]:
        return list(self._read())

    def _read(self) -> Dict[str, str]:
        """
        Load the whole store.

        Returns:
            Stored mapping, empty if the file does not exist yet

        Raises:
            KeyValueStoreError: If the file is unreadable or corrupted
        """
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            error_msg = f"Corrupted store file {self._path}: {e}"
            logger.error(error_msg)
            raise KeyValueStoreError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to read store file {self._path}: {e}"
            logger.error(error_msg)
            raise KeyValueStoreError(error_msg) from e

        if not isinstance(data, dict):
            error_msg = f"Corrupted store file {self._path}: expected a JSON object"
            logger.error(error_msg)
            raise KeyValueStoreError(error_msg)

        return data

    def _write(self, data: Dict[str, str]) -> None:
        """Write the whole store atomically."""
        temp_path = self._path.with_suffix(".tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            temp_path.replace(self._path)
        except OSError as e:
            error_msg = f"Failed to write store file {self._path}: {e}"
            logger.error(error_msg)
            raise KeyValueStoreError(error_msg) from e

        logger.debug(f"Store written: {len(data)} keys")

    def _is_safe_path(self, path: Path) -> bool:
        """
        Check if path is safe (within data directory).

        Args:
            path: Path to check

        Returns:
            True if safe, False if potential traversal attack
        """
        try:
            resolved = path.resolve(strict=False)
            return resolved.parent == self._data_dir
        except (RuntimeError, OSError):
            return False


class QSettingsKeyValueStore:
    """Key-value store backed by a Qt settings file in INI format."""

    def __init__(self, path: Path):
        """
        Initialize settings store.

        Args:
            path: INI file location (created on first write)
        """
        self._path = Path(path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise KeyValueStoreError(f"Invalid settings path: {e}") from e

        self._settings = QSettings(str(self._path), QSettings.Format.IniFormat)
        logger.info(f"QSettingsKeyValueStore initialized: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        if not self._settings.contains(key):
            return None
        return str(self._settings.value(key))

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._sync()

    def keys(self) -> List[str]:
        return list(self._settings.allKeys())

    def _sync(self) -> None:
        """Flush pending changes to disk."""
        self._settings.sync()
        status = self._settings.status()
        if status != QSettings.Status.NoError:
            error_msg = f"Failed to write settings file {self._path}: {status.name}"
            logger.error(error_msg)
            raise KeyValueStoreError(error_msg)


def open_key_value_store(config: StorageConfig) -> KeyValueStore:
    """
    Open the backend selected in the storage configuration.

    Args:
        config: Storage configuration

    Returns:
        Key-value store instance

    Raises:
        KeyValueStoreError: If the backend cannot be opened
        ValueError: If the backend name is unknown
    """
    if config.backend == "json":
        return JsonFileKeyValueStore(config.data_dir, config.store_filename)
    if config.backend == "qsettings":
        return QSettingsKeyValueStore(config.settings_path)
    raise ValueError(f"Unknown storage backend: {config.backend}")

"""
Configuration management for CursorPack.

All application configuration with sensible defaults.
Uses dataclasses for type safety and validation.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path

STORAGE_BACKENDS = ("json", "qsettings")
COMPRESSION_METHODS = ("deflated", "stored")


@dataclass
class StorageConfig:
    """Cursor record storage configuration."""

    # Which key-value backend holds the cursor records
    backend: str = "json"

    # User data directory (store file, settings file, optional log)
    data_dir: Path = field(default_factory=lambda: Path.home() / ".cursorpack")

    # JSON backend filename
    store_filename: str = "cursor_store.json"

    # QSettings backend filename (INI format)
    settings_filename: str = "cursorpack.ini"

    # Per-slot record key is "<prefix><slot>"
    cursor_key_prefix: str = "cursor-file-"

    # Key of the enabled-slots map
    enabled_slots_key: str = "enabled-cursor-slots"

    log_filename: str = "cursorpack.log"

    # File logging is opt-in
    enable_file_logging: bool = False

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)

    @property
    def store_path(self) -> Path:
        """Get full path to the JSON store file."""
        return self.data_dir / self.store_filename

    @property
    def settings_path(self) -> Path:
        """Get full path to the QSettings INI file."""
        return self.data_dir / self.settings_filename

    @property
    def log_path(self) -> Path:
        """Get full path to log file."""
        return self.data_dir / self.log_filename


@dataclass
class ExportConfig:
    """Package export configuration."""

    # Where finished archives are written
    output_dir: Path = field(default_factory=lambda: Path.cwd())

    # Name of the setup-information entry inside the archive
    descriptor_filename: str = "install.inf"

    # Zip compression: "deflated" or "stored"
    compression: str = "deflated"

    # Skip slots the user switched off
    apply_enabled_filter: bool = True

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)


@dataclass
class AppConfig:
    """Main application configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Application version
    version: str = "0.1.0"

    # Log level from environment or default to WARNING
    log_level: str = field(
        default_factory=lambda: os.getenv("CURSORPACK_LOG_LEVEL", "WARNING")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        if self.storage.backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"backend must be one of {', '.join(STORAGE_BACKENDS)}"
            )

        if not self.storage.cursor_key_prefix:
            raise ValueError("cursor_key_prefix must not be empty")

        if not self.storage.enabled_slots_key:
            raise ValueError("enabled_slots_key must not be empty")

        if self.export.compression not in COMPRESSION_METHODS:
            raise ValueError(
                f"compression must be one of {', '.join(COMPRESSION_METHODS)}"
            )

        name = self.export.descriptor_filename
        if not name or "/" in name or "\\" in name:
            raise ValueError("descriptor_filename must be a bare file name")


def get_default_config() -> AppConfig:
    """
    Get default application configuration.

    Returns:
        AppConfig instance with default values
    """
    return AppConfig()

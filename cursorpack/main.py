"""
CursorPack - Windows cursor scheme packager

Main entry point.

Usage:
    python -m cursorpack.main set pointer arrow.cur
    python -m cursorpack.main list
    python -m cursorpack.main export "My Pack" --dir MyPack
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from cursorpack.core.config import AppConfig, get_default_config
from cursorpack.core.slots import ordered_slots, parse_slot, scheme_label
from cursorpack.export.descriptor import DescriptorGenerator
from cursorpack.export.package import PackageBuildError, PackageBuilder
from cursorpack.storage.cursor_store import CursorFileStore
from cursorpack.storage.kv_store import KeyValueStoreError, open_key_value_store
from cursorpack.storage.schema import CursorDecodeError, CursorFile
from cursorpack.utils.logger import get_logger, setup_logger


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="cursorpack",
        description="Assemble Windows cursor scheme packages.",
    )
    parser.add_argument("--data-dir", type=Path, help="Directory holding the cursor store")
    parser.add_argument(
        "--backend", choices=["json", "qsettings"], help="Cursor store backend"
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")

    sub = parser.add_subparsers(dest="command", required=True)

    set_cmd = sub.add_parser("set", help="Assign a cursor file to a slot")
    set_cmd.add_argument("slot", type=parse_slot)
    set_cmd.add_argument("path", type=Path)

    for name, help_text in (
        ("clear", "Remove the file assigned to a slot"),
        ("enable", "Include a slot in exports"),
        ("disable", "Leave a slot out of exports"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("slot", type=parse_slot)

    sub.add_parser("list", help="Show every slot and its assigned file")

    for name, help_text in (
        ("inf", "Print install.inf for the current cursors"),
        ("export", "Build the cursor package archive"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("name", help="Scheme name")
        cmd.add_argument("--dir", default="", help="Install directory (defaults to the name)")
        cmd.add_argument(
            "--no-filter",
            action="store_true",
            help="Include disabled slots that have a file",
        )
        if name == "export":
            cmd.add_argument("--output", type=Path, help="Directory to write the archive to")

    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Apply command-line options on top of the default configuration."""
    if args.data_dir is not None:
        config.storage.data_dir = args.data_dir
    if args.backend is not None:
        config.storage.backend = args.backend
    if args.log_level:
        config.log_level = args.log_level
    if getattr(args, "no_filter", False):
        config.export.apply_enabled_filter = False
    if getattr(args, "output", None) is not None:
        config.export.output_dir = args.output
    return config


def run(args: argparse.Namespace, config: AppConfig) -> int:
    """Execute one command against the configured store."""
    store = CursorFileStore(open_key_value_store(config.storage), config.storage)
    store.ensure_enabled_slots()
    descriptor = DescriptorGenerator(store, config.export)

    if args.command == "set":
        store.put(CursorFile.from_path(args.path, args.slot))
    elif args.command == "clear":
        store.clear(args.slot)
    elif args.command in ("enable", "disable"):
        store.set_enabled(args.slot, args.command == "enable")
    elif args.command == "list":
        enabled = store.enabled_slots()
        for slot in ordered_slots():
            cursor_file = store.get(slot)
            filename = cursor_file.filename if cursor_file and cursor_file.is_populated else "-"
            state = "on" if enabled[slot] else "off"
            print(f"{slot.value:<13} {state:<4} {filename:<30} {scheme_label(slot)}")
    elif args.command == "inf":
        print(descriptor.generate(args.name, args.dir))
    elif args.command == "export":
        builder = PackageBuilder(store, descriptor, config.export)
        print(asyncio.run(builder.build(args.name, args.dir)))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = apply_overrides(get_default_config(), args)

    setup_logger(
        name="cursorpack",
        level=config.log_level,
        log_file=config.storage.log_path,
        enable_file_logging=config.storage.enable_file_logging,
    )
    logger = get_logger(__name__)
    logger.info(f"CursorPack {config.version}: {args.command}")

    try:
        return run(args, config)
    except (CursorDecodeError, PackageBuildError, KeyValueStoreError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

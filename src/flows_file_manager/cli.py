"""
Command-line interface for flows-file-manager.

Usage:
    flows-file-manager split                        # Monolith -> tree files
    flows-file-manager merge                        # Tree files -> monolith
    flows-file-manager merge --overwrite-tabs-order # Re-derive tabsOrder from the tree
    flows-file-manager list                         # Show the files split would write
    flows-file-manager --version                    # Show version

The configuration file is searched in the project root unless --config is
given. split and merge write the updated tabsOrder back to it.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ManagerConfig, load_config, save_config
from .errors import FlowsFileError, Result
from .manager import FlowsFileManager

logger = logging.getLogger(__name__)

CONFIG_CANDIDATES = (
    "flows-manager.json",
    "flows-manager.yaml",
    "flows-manager.yml",
    ".flows-manager.json",
    ".flows-manager.yaml",
    ".flows-manager.yml",
)


def find_config_file(root: Path) -> Optional[Path]:
    """Find the configuration file in common locations."""
    for name in CONFIG_CANDIDATES:
        candidate = root / name
        if candidate.exists():
            return candidate
    return None


def _load(args: argparse.Namespace):
    """Resolve root, config path and config. Returns None on usage errors."""
    root = Path(args.root)
    config_path = Path(args.config) if args.config else find_config_file(root)
    if config_path is None:
        print("Error: No configuration file found.", file=sys.stderr)
        print("Create a flows-manager.json file or use --config to specify one.", file=sys.stderr)
        return None
    try:
        config = load_config(config_path)
    except FlowsFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    return root, config_path, config


def _report_failure(result: Result) -> int:
    print(f"Error: {result.message}", file=sys.stderr)
    for issue in result.issues:
        print(f"  - {issue}", file=sys.stderr)
    return 1


def _persist(config: ManagerConfig, config_path: Path) -> int:
    try:
        save_config(config, config_path)
    except FlowsFileError as e:
        print(f"Error: could not update {config_path}: {e}", file=sys.stderr)
        return 1
    logger.debug("Updated %s", config_path)
    return 0


def cmd_split(args: argparse.Namespace) -> int:
    """Decompose the monolith into tree files."""
    loaded = _load(args)
    if loaded is None:
        return 2
    root, config_path, config = loaded

    manager = FlowsFileManager(config, root_path=root)
    parsed = manager.flow_set_from_monolith_file()
    if not parsed:
        return _report_failure(parsed)

    written = manager.write_tree_files(parsed.value)
    if not written:
        return _report_failure(written)

    print(f"Split {config.monolith_filename} into {config.destination_folder}/")
    return _persist(written.value, config_path)


def cmd_merge(args: argparse.Namespace) -> int:
    """Recompose the monolith from tree files."""
    loaded = _load(args)
    if loaded is None:
        return 2
    root, config_path, config = loaded

    manager = FlowsFileManager(config, root_path=root)
    parsed = manager.flow_set_from_tree_files()
    if not parsed:
        return _report_failure(parsed)

    written = manager.write_monolith_file(parsed.value, overwrite_tabs_order=args.overwrite_tabs_order)
    if not written:
        return _report_failure(written)

    print(f"Merged {config.destination_folder}/ into {config.monolith_filename}")
    return _persist(written.value, config_path)


def cmd_list(args: argparse.Namespace) -> int:
    """List the tree files the monolith decomposes into."""
    loaded = _load(args)
    if loaded is None:
        return 2
    root, _, config = loaded

    manager = FlowsFileManager(config, root_path=root)
    parsed = manager.flow_set_from_monolith_file()
    if not parsed:
        return _report_failure(parsed)
    tree = manager.build_tree(parsed.value)
    if not tree:
        return _report_failure(tree)

    rows = [
        {"file": entry.relative_path(config.extension), "nodes": len(entry.content)}
        for entry in tree.value
    ]
    if args.json:
        print(json.dumps(rows, indent=2))
    else:
        for row in rows:
            print(f"  {row['file']:50s} {row['nodes']:5d} nodes")
        print(f"\nTotal files: {len(rows)}")
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Project root the configured paths are relative to",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="flows-file-manager",
        description="Split flow monoliths into version-friendly file trees and back",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"flows-file-manager {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    split_parser = subparsers.add_parser("split", help="Monolith file -> tree files")
    _add_common(split_parser)

    merge_parser = subparsers.add_parser("merge", help="Tree files -> monolith file")
    _add_common(merge_parser)
    merge_parser.add_argument(
        "--overwrite-tabs-order",
        action="store_true",
        help="Ignore the configured tabsOrder and re-derive it from the tree",
    )

    list_parser = subparsers.add_parser("list", help="List the tree files split would write")
    _add_common(list_parser)
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "split":
        return cmd_split(args)
    elif args.command == "merge":
        return cmd_merge(args)
    elif args.command == "list":
        return cmd_list(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())

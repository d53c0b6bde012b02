"""
manager.py - File-level conversions between the monolith and the tree.

FlowsFileManager is bound to a configuration record and a project root. It
provides the full round trip:

- monolith file/object  -> FlowSet      (flow_set_from_monolith_*)
- FlowSet               -> tree files   (write_tree_files)
- tree files/entries    -> FlowSet      (flow_set_from_tree_*)
- FlowSet               -> monolith     (monolith_object, write_monolith_file)

Every public method returns a Result. Configuration problems are detected
before anything touches the disk; per-file problems in batch reads and writes
are collected in ``Result.issues`` while the rest of the batch proceeds.

Example:
    manager = FlowsFileManager(load_config("flows-manager.json"), root_path=".")
    flow_set = manager.flow_set_from_monolith_file().unwrap()
    result = manager.write_tree_files(flow_set)
    if result:
        save_config(result.value, "flows-manager.json")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import ManagerConfig, load_config
from .encoding import dump_data, load_data
from .errors import FlowsFileError, ParseError, Result, SourceNotFoundError, WriteError
from .flowparser import FlowSet, parse_flow
from .naming import disambiguate_flow_set
from .ordering import derive_tabs_order, project_monolith
from .storage import atomic_write, create_src_folders, read_text, tree_root
from .tree import TREE_FOLDERS, TreeEntry, assemble_flow_config, build_tree

logger = logging.getLogger(__name__)

ConfigSource = Union[ManagerConfig, Dict[str, Any], str, Path]


class FlowsFileManager:
    """
    Converts flows between the monolith file and the per-entity tree.

    Attributes:
        root_path: Project root all configured paths are relative to
    """

    def __init__(self, config: ConfigSource, root_path: Union[str, Path] = "."):
        """
        Initialize the manager.

        The configuration is validated lazily, on every operation, so an
        invalid record surfaces as a failed Result rather than an exception.

        Args:
            config: ManagerConfig, raw configuration mapping, or config file path
            root_path: Project root (default: current directory)
        """
        self._config_source = config
        self.root_path = Path(root_path or ".")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _config(self) -> ManagerConfig:
        return load_config(self._config_source)

    def _failure(self, error: FlowsFileError, **kwargs) -> Result:
        logger.error("%s", error)
        return Result.failure(error, **kwargs)

    def _prepare(self, nodes: List[Dict[str, Any]], labels: Optional[Dict[str, str]] = None) -> FlowSet:
        flow_set = parse_flow(nodes)
        flow_set.tabs_order = derive_tabs_order(flow_set)
        disambiguate_flow_set(flow_set, preferred=labels)
        return flow_set

    # -------------------------------------------------------------------------
    # Monolith -> FlowSet
    # -------------------------------------------------------------------------

    def flow_set_from_monolith_object(self, nodes: List[Dict[str, Any]]) -> Result:
        """Parse a monolith node list into a disambiguated FlowSet."""
        try:
            return Result.success(self._prepare(nodes))
        except FlowsFileError as e:
            return self._failure(e)

    def flow_set_from_monolith_file(self, path: Optional[Union[str, Path]] = None) -> Result:
        """
        Read and parse the monolith JSON file.

        Args:
            path: Monolith path; defaults to the configured monolithFilename
                under the project root
        """
        try:
            if path is None:
                path = self.root_path / self._config().monolith_filename
            nodes = load_data(read_text(path), "json", source=path)
            return Result.success(self._prepare(nodes))
        except FlowsFileError as e:
            return self._failure(e)

    # -------------------------------------------------------------------------
    # FlowSet -> tree
    # -------------------------------------------------------------------------

    def build_tree(self, flow_set: FlowSet) -> Result:
        """Decompose a FlowSet into TreeEntry objects (no file I/O)."""
        return build_tree(flow_set)

    def write_tree_files(self, flow_set: FlowSet) -> Result:
        """
        Write one file per tree entry under the destination folder.

        Returns:
            On success, a Result whose value is the configuration updated with
            the FlowSet's tabs order. If some files failed, a WriteError
            failure whose value lists the files that were written and whose
            issues hold the individual errors.
        """
        try:
            config = self._config()
        except FlowsFileError as e:
            return self._failure(e)

        tree = build_tree(flow_set)
        if not tree:
            return tree

        try:
            create_src_folders(config.destination_folder, self.root_path)
        except WriteError as e:
            return self._failure(e)

        base = tree_root(config.destination_folder, self.root_path)
        written: List[Path] = []
        issues: List[FlowsFileError] = []
        for entry in tree.value:
            path = base / entry.relative_path(config.extension)
            try:
                atomic_write(path, dump_data(entry.content, config.file_format))
                written.append(path)
            except WriteError as e:
                logger.warning("Could not create source file for element '%s': %s", entry.file_name, e)
                issues.append(e)

        if issues:
            error = WriteError(f"{len(issues)} of {len(tree.value)} tree files could not be written")
            return self._failure(error, value=written, issues=issues)

        logger.info("Wrote %d tree files to %s", len(written), base)
        return Result.success(config.with_tabs_order(flow_set.tabs_order))

    # -------------------------------------------------------------------------
    # FlowSet -> monolith
    # -------------------------------------------------------------------------

    def monolith_object(self, flow_set: FlowSet, overwrite_tabs_order: bool = False) -> Result:
        """Project the FlowSet to a flat node list ordered by the configured tabsOrder."""
        try:
            config = self._config()
        except FlowsFileError as e:
            return self._failure(e)
        return Result.success(project_monolith(flow_set, config.tabs_order, overwrite_tabs_order))

    def write_monolith_file(self, flow_set: FlowSet, overwrite_tabs_order: bool = False) -> Result:
        """
        Write the monolith JSON file.

        Args:
            flow_set: FlowSet to export
            overwrite_tabs_order: Ignore the configured tabsOrder and re-derive
                it from the FlowSet

        Returns:
            Result whose value is the (possibly updated) configuration
        """
        projected = self.monolith_object(flow_set, overwrite_tabs_order)
        if not projected:
            return projected
        config = self._config()

        path = self.root_path / config.monolith_filename
        try:
            atomic_write(path, dump_data(projected.value, "json"))
        except WriteError as e:
            return self._failure(e)
        logger.info("Wrote monolith %s (%d nodes)", path, len(projected.value))

        if overwrite_tabs_order:
            config = config.with_tabs_order(derive_tabs_order(flow_set))
        return Result.success(config)

    # -------------------------------------------------------------------------
    # Tree -> FlowSet
    # -------------------------------------------------------------------------

    def flow_set_from_tree_entries(self, entries: List[TreeEntry]) -> Result:
        """
        Reassemble tree entries into a disambiguated FlowSet.

        Each entity keeps the file name of the entry whose first record it
        is; only entities without one get a freshly derived label.
        """
        try:
            config = self._config()
            nodes = assemble_flow_config(entries, config.tabs_order)
            labels = {
                str(entry.content[0]["id"]): entry.file_name
                for entry in entries
                if entry.content and isinstance(entry.content[0], dict) and "id" in entry.content[0]
            }
            return Result.success(self._prepare(nodes, labels))
        except FlowsFileError as e:
            return self._failure(e)

    def _read_tree_entries(self, config: ManagerConfig, issues: List[FlowsFileError]) -> List[TreeEntry]:
        base = tree_root(config.destination_folder, self.root_path)
        entries: List[TreeEntry] = []
        for folder in TREE_FOLDERS:
            directory = base / folder
            if not directory.is_dir():
                logger.warning("Missing '%s' folder in %s, treating it as empty", folder, base)
                continue
            for path in sorted(directory.iterdir()):
                if not path.is_file():
                    continue
                if path.suffix.lower() != f".{config.extension}":
                    logger.warning("Unexpected file in the '%s' folder: %s", config.destination_folder, path.name)
                    continue
                try:
                    content = load_data(read_text(path), config.file_format, source=path)
                except FlowsFileError as e:
                    logger.warning("Cannot parse '%s': %s", path.name, e)
                    issues.append(e)
                    continue
                if content is None:
                    content = []
                if not isinstance(content, list):
                    issues.append(ParseError("tree file must contain a list of nodes", path))
                    continue
                logger.debug("Read %s (%d nodes)", path, len(content))
                entries.append(TreeEntry(folder=folder, file_name=path.stem, content=content))
        return entries

    def flow_set_from_tree_files(self) -> Result:
        """
        Read every tree file and rebuild the FlowSet.

        Unparseable files do not stop the scan; all of them are reported in
        the failure's issues.
        """
        try:
            config = self._config()
        except FlowsFileError as e:
            return self._failure(e)

        base = tree_root(config.destination_folder, self.root_path)
        if not base.is_dir():
            return self._failure(SourceNotFoundError(base, what="destination folder"))

        issues: List[FlowsFileError] = []
        entries = self._read_tree_entries(config, issues)
        if issues:
            return self._failure(ParseError(f"{len(issues)} tree file(s) could not be parsed", base), issues=issues)
        return self.flow_set_from_tree_entries(entries)

    def __repr__(self) -> str:
        return f"FlowsFileManager(root_path={str(self.root_path)!r})"


"""
Tree representation of a FlowSet.

The tree is a list of TreeEntry objects, one per flow, subflow and config
node. Each entry knows the folder and file name it is written to and holds
the ordered node list of that file: the entity's own record first, followed by
its placed nodes sorted by id.

build_tree() decomposes a disambiguated FlowSet; assemble_flow_config()
concatenates entries back into a flat node list ready for parse_flow().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .errors import MissingLabelError, Result
from .flowparser import FlowSet
from .groups import normalize_groups
from .ordering import apply_order, sort_by_id

logger = logging.getLogger(__name__)

TABS_FOLDER = "tabs"
SUBFLOWS_FOLDER = "subflows"
CONFIG_NODES_FOLDER = "config-nodes"
TREE_FOLDERS = (TABS_FOLDER, SUBFLOWS_FOLDER, CONFIG_NODES_FOLDER)


@dataclass
class TreeEntry:
    """One file of the tree.

    Attributes:
        folder: Category folder ("tabs", "subflows" or "config-nodes")
        file_name: Slug used as the file name (without extension)
        content: Entity record followed by its exported child nodes
    """

    folder: str
    file_name: str
    content: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.folder not in TREE_FOLDERS:
            raise ValueError(f"Invalid folder: {self.folder}. Must be one of {', '.join(TREE_FOLDERS)}.")

    def relative_path(self, extension: str) -> str:
        return f"{self.folder}/{self.file_name}.{extension}"


def _entries_for(containers, folder: str, category: str, with_children: bool) -> List[TreeEntry]:
    entries = []
    for entity in containers.values():
        if not entity.normalized_label:
            raise MissingLabelError(entity.id, category)
        content = [entity.export()]
        if with_children:
            content.extend(sort_by_id(entity.export_contents()))
        entries.append(TreeEntry(folder=folder, file_name=entity.normalized_label, content=content))
    return entries


def build_tree(flow_set: FlowSet) -> Result:
    """Decompose a FlowSet into tree entries.

    Returns:
        Result whose value is the list of TreeEntry objects, or a failure
        carrying MissingLabelError if disambiguation has not run.
    """
    try:
        entries = _entries_for(flow_set.flows, TABS_FOLDER, "flows", with_children=True)
        entries.extend(_entries_for(flow_set.subflows, SUBFLOWS_FOLDER, "subflows", with_children=True))
        entries.extend(_entries_for(flow_set.config_nodes, CONFIG_NODES_FOLDER, "config_nodes", with_children=False))
    except MissingLabelError as e:
        logger.error("Cannot build tree: %s", e)
        return Result.failure(e)

    normalize_groups(entries)
    logger.debug(
        "Built tree: %d tabs, %d subflows, %d config nodes",
        len(flow_set.flows), len(flow_set.subflows), len(flow_set.config_nodes),
    )
    return Result.success(entries)


def assemble_flow_config(entries: Sequence[TreeEntry], tabs_order: Optional[Sequence[str]]) -> List[Dict[str, Any]]:
    """Flatten tree entries into one node list with tabs pinned per tabs_order."""
    flow_config: List[Dict[str, Any]] = []
    for entry in entries:
        flow_config.extend(entry.content)
    return apply_order(flow_config, tabs_order)

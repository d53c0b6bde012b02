"""Canonicalization of "group" nodes inside tree entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .tree import TreeEntry

GROUP_TYPE = "group"
LAYOUT_KEYS = ("w", "h")


def normalize_groups(entries: List["TreeEntry"]) -> List["TreeEntry"]:
    """Drop group layout size and sort group membership, in place.

    Group width/height and the order of the member list are editor artefacts;
    removing them keeps otherwise identical decompositions byte-identical.
    """
    for entry in entries:
        for node in entry.content:
            if not isinstance(node, dict) or node.get("type") != GROUP_TYPE:
                continue
            for key in LAYOUT_KEYS:
                node.pop(key, None)
            if "nodes" in node and isinstance(node["nodes"], list):
                node["nodes"] = sorted(node["nodes"], key=str)
    return entries

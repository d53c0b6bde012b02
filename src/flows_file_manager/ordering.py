"""
Ordering of exported nodes.

Node ids are opaque strings, so every "sort by id" in this package is a
lexicographic comparison of ``str(id)``: "10" sorts before "9".

apply_order() pins the nodes named in a reference list (normally the
configured tabs order) to the front of a sequence while everything else keeps
its relative order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .flowparser import FlowSet


def node_sort_key(node: Dict[str, Any]) -> str:
    return str(node.get("id", ""))


def sort_by_id(nodes: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return nodes sorted lexicographically by id (stable)."""
    return sorted(nodes, key=node_sort_key)


def move_element(sequence: List[Any], from_index: int, to_index: int = 0) -> List[Any]:
    """Move one element of ``sequence`` in place and return it.

    A negative ``from_index`` means the element was not found and leaves the
    list untouched. A ``to_index`` past the end pads the list with None
    first; apply_order() never does this since it always targets index 0.
    """
    if from_index < 0 or from_index >= len(sequence):
        return sequence
    if to_index >= len(sequence):
        sequence.extend([None] * (to_index - len(sequence) + 1))
    element = sequence.pop(from_index)
    sequence.insert(to_index, element)
    return sequence


def _find_index(sequence: Sequence[Any], node_id: str) -> int:
    for index, node in enumerate(sequence):
        if isinstance(node, dict) and str(node.get("id")) == str(node_id):
            return index
    return -1


def apply_order(sequence: Sequence[Dict[str, Any]], reference_ids: Optional[Sequence[str]]) -> List[Dict[str, Any]]:
    """Bubble the referenced nodes to the front, respecting the reference order.

    Walks ``reference_ids`` from last to first and moves each match to index
    0, so the result starts with the referenced nodes in their given order,
    followed by all other nodes in their prior relative order. Ids that are
    not present are skipped.

        >>> [n["id"] for n in apply_order([{"id": "a"}, {"id": "b"}, {"id": "c"}], ["b", "a"])]
        ['b', 'a', 'c']
    """
    ordered = list(sequence)
    for reference_id in reversed(list(reference_ids or [])):
        move_element(ordered, _find_index(ordered, reference_id), 0)
    return ordered


def derive_tabs_order(flow_set: FlowSet) -> List[str]:
    """Return the flow ids in their natural order."""
    return list(flow_set.flows.keys())


def project_monolith(
    flow_set: FlowSet,
    tabs_order: Optional[Sequence[str]],
    overwrite: bool = False,
) -> List[Dict[str, Any]]:
    """Export a FlowSet as one ordered node list.

    Nodes are sorted by id and the tabs are pinned to the front following
    ``tabs_order``. When ``tabs_order`` is empty or ``overwrite`` is set the
    natural export order is returned instead.
    """
    if tabs_order and not overwrite:
        return apply_order(sort_by_id(flow_set.export()), tabs_order)
    return flow_set.export()

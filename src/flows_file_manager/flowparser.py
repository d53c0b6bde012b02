"""
flowparser.py - Minimal in-process graph-model provider.

Parses a flat list of flow nodes (the monolith form) into a FlowSet made of
three ordered mappings: flows (tabs), subflows and config nodes. Placed nodes
are attached to the flow or subflow named by their ``z`` property.

The provider knows nothing about individual node types; it only classifies
records and keeps them intact so that export() is lossless:

- ``type == "tab"``      -> Flow
- ``type == "subflow"``  -> Subflow
- no ``x`` and no ``y``  -> ConfigNode (global or scoped, ``z`` is preserved)
- anything else          -> placed node inside its ``z`` container

Usage:
    from flows_file_manager.flowparser import parse_flow

    flow_set = parse_flow(json.load(open("flows.json")))
    for flow in flow_set.flows.values():
        print(flow.id, len(flow.export_contents()))
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .errors import ParseError


TAB_TYPE = "tab"
SUBFLOW_TYPE = "subflow"


class FlowEntity(Protocol):
    """Capability interface every container entity exposes."""

    id: str
    type: str
    normalized_label: Optional[str]

    @property
    def config(self) -> Dict[str, Any]: ...

    def export(self) -> Dict[str, Any]: ...

    def export_contents(self) -> List[Dict[str, Any]]: ...


class _Container:
    """Shared behaviour of Flow, Subflow and ConfigNode."""

    def __init__(self, record: Dict[str, Any]):
        self._record = copy.deepcopy(record)
        self.id: str = str(record["id"])
        self.type: str = record.get("type", "")
        self.normalized_label: Optional[str] = None
        self._children: List[Dict[str, Any]] = []

    @property
    def config(self) -> Dict[str, Any]:
        """Configuration record: every field except id and type."""
        return {k: v for k, v in self._record.items() if k not in ("id", "type")}

    def add_child(self, node: Dict[str, Any]) -> None:
        self._children.append(copy.deepcopy(node))

    def export(self) -> Dict[str, Any]:
        return copy.deepcopy(self._record)

    def export_contents(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(node) for node in self._children]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, label={self.normalized_label!r})"


class Flow(_Container):
    """A tab and the nodes placed on it."""

    @property
    def label(self) -> Optional[str]:
        return self._record.get("label")


class Subflow(_Container):
    """A subflow definition and the nodes placed inside it."""

    @property
    def name(self) -> Optional[str]:
        return self._record.get("name")


class ConfigNode(_Container):
    """A configuration node. Config nodes own no placed children."""

    @property
    def name(self) -> Optional[str]:
        return self._record.get("name")

    def add_child(self, node: Dict[str, Any]) -> None:
        raise ParseError(f"config node '{self.id}' cannot contain node '{node.get('id')}'")


class FlowSet:
    """Parsed flow graph.

    Attributes:
        flows: Flow id -> Flow, in declaration order
        subflows: Subflow id -> Subflow, in declaration order
        config_nodes: Config node id -> ConfigNode, in declaration order
        tabs_order: Canonical tab ordering used on export
    """

    def __init__(self) -> None:
        self.flows: Dict[str, Flow] = {}
        self.subflows: Dict[str, Subflow] = {}
        self.config_nodes: Dict[str, ConfigNode] = {}
        self.tabs_order: List[str] = []

    def entities(self) -> Iterable[_Container]:
        yield from self.flows.values()
        yield from self.subflows.values()
        yield from self.config_nodes.values()

    def export(self) -> List[Dict[str, Any]]:
        """Export every node in natural order."""
        nodes: List[Dict[str, Any]] = []
        for flow in self.flows.values():
            nodes.append(flow.export())
            nodes.extend(flow.export_contents())
        for subflow in self.subflows.values():
            nodes.append(subflow.export())
            nodes.extend(subflow.export_contents())
        for config_node in self.config_nodes.values():
            nodes.append(config_node.export())
        return nodes


def _is_config_node(node: Dict[str, Any]) -> bool:
    return "x" not in node and "y" not in node


def parse_flow(nodes: List[Dict[str, Any]]) -> FlowSet:
    """Parse a flat node list into a FlowSet.

    Containers are registered in a first pass so that placed nodes may appear
    before the tab or subflow that holds them.

    Raises:
        ParseError: If the input is not a list of records with ids, an id is
            duplicated, or a placed node references a missing or unknown
            container or a config node.
    """
    if not isinstance(nodes, list):
        raise ParseError(f"expected a list of nodes, got {type(nodes).__name__}")

    flow_set = FlowSet()
    seen: set = set()
    placed: List[Dict[str, Any]] = []

    for index, node in enumerate(nodes):
        if not isinstance(node, dict):
            raise ParseError(f"node at index {index} is not a mapping")
        if node.get("id") in (None, ""):
            raise ParseError(f"node at index {index} has no id")
        node_id = str(node["id"])
        if node_id in seen:
            raise ParseError(f"duplicate node id '{node_id}'")
        seen.add(node_id)

        node_type = node.get("type")
        if node_type == TAB_TYPE:
            flow_set.flows[node_id] = Flow(node)
        elif node_type == SUBFLOW_TYPE:
            flow_set.subflows[node_id] = Subflow(node)
        elif _is_config_node(node):
            flow_set.config_nodes[node_id] = ConfigNode(node)
        else:
            placed.append(node)

    for node in placed:
        parent_id = node.get("z")
        if not isinstance(parent_id, (str, int)) or isinstance(parent_id, bool):
            raise ParseError(f"node '{node['id']}' has an invalid container reference: {parent_id!r}")
        parent_id = str(parent_id)
        container: Optional[_Container] = (
            flow_set.flows.get(parent_id)
            or flow_set.subflows.get(parent_id)
            or flow_set.config_nodes.get(parent_id)
        )
        if container is None:
            raise ParseError(f"node '{node['id']}' references unknown container '{parent_id}'")
        container.add_child(node)

    return flow_set

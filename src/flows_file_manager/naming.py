"""
File naming for tree entries.

normalize_string() turns any label into a filesystem-safe slug and
disambiguate() assigns every entity of a FlowSet a slug that is unique across
flows, subflows and config nodes alike. Uniqueness is tracked by a
NameRegistry that the caller passes to each disambiguate() call; sharing one
registry across the three categories is what makes names globally unique.

Example:
    registry = NameRegistry()
    disambiguate(flow_set, "flows", "label", registry)
    disambiguate(flow_set, "subflows", "name", registry)
    disambiguate(flow_set, "config_nodes", "name", registry)
"""

from __future__ import annotations

import re
from typing import Any, Collection, Dict, Iterator, Mapping, Optional, Set

from .flowparser import FlowSet

SEPARATOR = "-"
# Used when neither the label, the id nor the type yields a slug
FALLBACK_SLUG = "node"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.]")
_SEPARATOR_RUNS = re.compile(r"-{2,}")

# Category name -> FlowSet attribute
CATEGORIES: Dict[str, str] = {
    "flows": "flows",
    "subflows": "subflows",
    "config_nodes": "config_nodes",
    "configNodes": "config_nodes",
}


def normalize_string(text: str) -> str:
    """Transform a string into a sanitized lowercase slug.

    Every character outside ``[A-Za-z0-9.]`` becomes ``-``, runs of ``-``
    collapse to one, and a leading or trailing ``-`` is stripped.

        >>> normalize_string("My Flow!!")
        'my-flow'
    """
    normalized = _UNSAFE_CHARS.sub(SEPARATOR, str(text))
    normalized = _SEPARATOR_RUNS.sub(SEPARATOR, normalized).lower()
    if normalized.startswith(SEPARATOR):
        normalized = normalized[1:]
    if normalized.endswith(SEPARATOR):
        normalized = normalized[:-1]
    return normalized


class NameRegistry:
    """Set of slugs already handed out within one FlowSet conversion."""

    def __init__(self) -> None:
        self._names: Set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def register(self, name: str) -> None:
        self._names.add(name)

    def claim(self, candidate: str, entity_id: str) -> str:
        """Register and return a free slug derived from ``candidate``.

        A taken candidate gets ``-<entity_id>`` appended. If that is taken as
        well, a numeric suffix is added until the name is free.
        """
        name = candidate
        if name in self._names:
            name = normalize_string(f"{candidate}{SEPARATOR}{entity_id}")
            base, counter = name, 2
            while name in self._names:
                name = f"{base}{SEPARATOR}{counter}"
                counter += 1
        self._names.add(name)
        return name


def _site_name(config: Dict[str, Any]) -> Optional[str]:
    site = config.get("site")
    if isinstance(site, dict):
        return site.get("name")
    return None


def candidate_label(entity: Any, attribute: str) -> str:
    """Pick the raw label for an entity.

    Priority: config attribute, entity attribute, ``config.site.name``,
    entity type, entity id. The id is always defined, so a value is always
    produced.
    """
    config = entity.config
    for value in (
        config.get(attribute),
        getattr(entity, attribute, None),
        _site_name(config),
        entity.type,
        entity.id,
    ):
        if value:
            return str(value)
    return str(entity.id)


def _slug_for(entity: Any, attribute: str) -> str:
    for raw in (candidate_label(entity, attribute), entity.id, entity.type):
        slug = normalize_string(raw or "")
        if slug:
            return slug
    return FALLBACK_SLUG


def disambiguate(
    flow_set: FlowSet,
    category: str,
    attribute: str,
    registry: NameRegistry,
    skip: Collection[str] = (),
) -> FlowSet:
    """Assign a unique normalized_label to every entity of one category.

    Args:
        flow_set: The FlowSet to update in place
        category: "flows", "subflows" or "config_nodes"
        attribute: Config attribute holding the human label ("label" or "name")
        registry: Registry shared by every category of this FlowSet
        skip: Ids of entities whose label is already claimed

    Returns:
        The same FlowSet

    Raises:
        ValueError: If category is unknown
    """
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category: {category}. Must be flows, subflows, or config_nodes.")

    for entity in getattr(flow_set, CATEGORIES[category]).values():
        if entity.id in skip:
            continue
        entity.normalized_label = registry.claim(_slug_for(entity, attribute), entity.id)
    return flow_set


def disambiguate_flow_set(
    flow_set: FlowSet,
    registry: Optional[NameRegistry] = None,
    preferred: Optional[Mapping[str, str]] = None,
) -> NameRegistry:
    """Disambiguate flows, subflows and config nodes against one registry.

    Args:
        flow_set: The FlowSet to update in place
        registry: Registry to claim names from (a fresh one by default)
        preferred: Entity id -> slug to keep, such as the file stems of a
            tree read from disk. These are claimed before any label is
            derived, so existing file names survive a reload.
    """
    if registry is None:
        registry = NameRegistry()

    kept: Set[str] = set()
    for entity in flow_set.entities():
        slug = normalize_string((preferred or {}).get(entity.id, ""))
        if slug:
            entity.normalized_label = registry.claim(slug, entity.id)
            kept.add(entity.id)

    disambiguate(flow_set, "flows", "label", registry, skip=kept)
    disambiguate(flow_set, "subflows", "name", registry, skip=kept)
    disambiguate(flow_set, "config_nodes", "name", registry, skip=kept)
    return registry

"""
flows-file-manager: Split flow monoliths into version-control friendly trees.

A flows file (one JSON array holding every tab, subflow, config node and
placed node) is hard to review in a diff. This package decomposes it into one
file per tab, subflow and config node, and recomposes the monolith from
those files:

- Deterministic, collision-free file names shared across all categories
- Stable ordering: nodes sorted by id, tabs pinned by a configured tabsOrder
- Group nodes normalized (no layout size, sorted membership)
- JSON or YAML tree files
- Explicit Result values instead of exceptions at the public boundary

Quick Start:
    from flows_file_manager import FlowsFileManager, load_config

    manager = FlowsFileManager(load_config("flows-manager.json"))

    flow_set = manager.flow_set_from_monolith_file().unwrap()
    result = manager.write_tree_files(flow_set)
    if not result:
        print(result.message)

Back to a monolith:
    flow_set = manager.flow_set_from_tree_files().unwrap()
    manager.write_monolith_file(flow_set)

Building blocks:
    from flows_file_manager import normalize_string, apply_order

    normalize_string("My Flow!!")                         # 'my-flow'
    apply_order([{"id": "a"}, {"id": "b"}], ["b"])       # b first
"""

__version__ = "0.1.0"

# Errors and results
from .errors import (
    ConfigurationError,
    FlowsFileError,
    MissingLabelError,
    ParseError,
    Result,
    SourceNotFoundError,
    WriteError,
)

# Graph model
from .flowparser import (
    ConfigNode,
    Flow,
    FlowEntity,
    FlowSet,
    Subflow,
    parse_flow,
)

# Naming
from .naming import (
    NameRegistry,
    disambiguate,
    disambiguate_flow_set,
    normalize_string,
)

# Ordering
from .ordering import (
    apply_order,
    derive_tabs_order,
    move_element,
    project_monolith,
    sort_by_id,
)

# Tree
from .groups import normalize_groups
from .tree import (
    TreeEntry,
    assemble_flow_config,
    build_tree,
)

# Configuration
from .config import (
    ManagerConfig,
    load_config,
    save_config,
)

# Encoding
from .encoding import dump_data, load_data

# Manager
from .manager import FlowsFileManager

__all__ = [
    # Version
    "__version__",
    # Errors
    "FlowsFileError",
    "ConfigurationError",
    "SourceNotFoundError",
    "ParseError",
    "WriteError",
    "MissingLabelError",
    "Result",
    # Graph model
    "FlowSet",
    "FlowEntity",
    "Flow",
    "Subflow",
    "ConfigNode",
    "parse_flow",
    # Naming
    "NameRegistry",
    "normalize_string",
    "disambiguate",
    "disambiguate_flow_set",
    # Ordering
    "move_element",
    "apply_order",
    "derive_tabs_order",
    "sort_by_id",
    "project_monolith",
    # Tree
    "TreeEntry",
    "build_tree",
    "assemble_flow_config",
    "normalize_groups",
    # Configuration
    "ManagerConfig",
    "load_config",
    "save_config",
    # Encoding
    "dump_data",
    "load_data",
    # Manager
    "FlowsFileManager",
]

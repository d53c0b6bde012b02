"""Shared fixtures for flows-file-manager tests.

The sample flows deliberately use ids whose lexicographic order differs from
their numeric order ("10" < "100" < "20" < "3" < "9").
"""

import copy
import json

import pytest
from flows_file_manager import disambiguate_flow_set, parse_flow

SAMPLE_FLOWS = [
    {"id": "9", "type": "tab", "label": "Main Flow", "disabled": False, "info": ""},
    {"id": "10", "type": "tab", "label": "Main Flow", "disabled": False, "info": ""},
    {"id": "sf1", "type": "subflow", "name": "Helper", "info": "", "in": [], "out": []},
    {"id": "100", "type": "inject", "z": "9", "name": "tick", "x": 100, "y": 80, "wires": [["20"]]},
    {"id": "20", "type": "debug", "z": "9", "name": "", "x": 300, "y": 80, "wires": []},
    {"id": "3", "type": "function", "z": "sf1", "func": "return msg;", "x": 10, "y": 10, "wires": []},
    {
        "id": "g1",
        "type": "group",
        "z": "10",
        "name": "Comments",
        "nodes": ["n2", "n1"],
        "x": 5,
        "y": 5,
        "w": 200,
        "h": 100,
    },
    {"id": "n2", "type": "comment", "z": "10", "g": "g1", "name": "second", "x": 40, "y": 60},
    {"id": "n1", "type": "comment", "z": "10", "g": "g1", "name": "first", "x": 40, "y": 20},
    {"id": "b1", "type": "mqtt-broker", "broker": "localhost", "port": "1883"},
    {"id": "u1", "type": "ui_base", "site": {"name": "Dashboard", "hideToolbar": "false"}},
    {"id": "c1", "type": "global-config", "name": "Main Flow", "env": []},
]


@pytest.fixture
def monolith_nodes():
    """Fresh copy of the sample monolith."""
    return copy.deepcopy(SAMPLE_FLOWS)


@pytest.fixture
def flow_set(monolith_nodes):
    """Parsed and disambiguated sample FlowSet."""
    parsed = parse_flow(monolith_nodes)
    disambiguate_flow_set(parsed)
    return parsed


@pytest.fixture
def config_dict():
    return {
        "fileFormat": "json",
        "destinationFolder": "src",
        "tabsOrder": [],
        "monolithFilename": "flows.json",
    }


@pytest.fixture
def project(tmp_path, monolith_nodes, config_dict):
    """Project root holding flows.json and flows-manager.json."""
    (tmp_path / "flows.json").write_text(json.dumps(monolith_nodes, indent=2), encoding="utf-8")
    (tmp_path / "flows-manager.json").write_text(json.dumps(config_dict, indent=2), encoding="utf-8")
    return tmp_path

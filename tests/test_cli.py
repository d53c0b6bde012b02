"""
Tests for the flows-file-manager command line.

Commands are driven through main(argv) in-process; one test runs the module
as a subprocess to check the entry point wiring.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Tuple

import pytest
from flows_file_manager.cli import find_config_file, main

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def run_module(args: List[str], cwd: Path) -> Tuple[int, str, str]:
    """Run ``python -m flows_file_manager.cli`` and return (exit_code, stdout, stderr)."""
    env = dict(os.environ, PYTHONPATH=str(SRC_DIR))
    proc = subprocess.run(
        [sys.executable, "-m", "flows_file_manager.cli"] + args,
        cwd=cwd,
        env=env,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=30,
    )
    return proc.returncode, proc.stdout, proc.stderr


class TestFindConfigFile:
    """Tests for config discovery."""

    def test_finds_json(self, project):
        assert find_config_file(project) == project / "flows-manager.json"

    def test_finds_dotted_yaml(self, tmp_path):
        (tmp_path / ".flows-manager.yml").write_text("fileFormat: json\n")
        assert find_config_file(tmp_path) == tmp_path / ".flows-manager.yml"

    def test_none(self, tmp_path):
        assert find_config_file(tmp_path) is None


class TestSplitCommand:
    """Tests for `split`."""

    def test_split_writes_tree_and_tabs_order(self, project, capsys):
        assert main(["split", "--root", str(project)]) == 0
        assert (project / "src" / "tabs" / "main-flow.json").is_file()
        config = json.loads((project / "flows-manager.json").read_text())
        assert config["tabsOrder"] == ["9", "10"]
        assert "Split flows.json into src/" in capsys.readouterr().out

    def test_explicit_yaml_config(self, project, config_dict):
        config_path = project / "custom.yaml"
        config_path.write_text(
            "fileFormat: yaml\n"
            "destinationFolder: tree\n"
            "tabsOrder: []\n"
            "monolithFilename: flows.json\n"
        )
        assert main(["split", "--root", str(project), "-c", str(config_path)]) == 0
        assert (project / "tree" / "subflows" / "helper.yaml").is_file()

    def test_missing_monolith(self, tmp_path, config_dict, capsys):
        (tmp_path / "flows-manager.json").write_text(json.dumps(config_dict))
        assert main(["split", "--root", str(tmp_path)]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_no_config(self, tmp_path, capsys):
        assert main(["split", "--root", str(tmp_path)]) == 2
        assert "No configuration file found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        (tmp_path / "flows-manager.json").write_text(json.dumps({"fileFormat": "json"}))
        assert main(["split", "--root", str(tmp_path)]) == 2
        assert "missing key" in capsys.readouterr().err


class TestMergeCommand:
    """Tests for `merge`."""

    def test_split_then_merge(self, project, monolith_nodes):
        assert main(["split", "--root", str(project)]) == 0
        (project / "flows.json").unlink()

        assert main(["merge", "--root", str(project)]) == 0
        merged = json.loads((project / "flows.json").read_text())
        assert [n["id"] for n in merged[:2]] == ["9", "10"]
        assert {n["id"] for n in merged} == {n["id"] for n in monolith_nodes}

    def test_merge_honours_configured_tabs_order(self, project):
        assert main(["split", "--root", str(project)]) == 0
        config_path = project / "flows-manager.json"
        config = json.loads(config_path.read_text())
        config["tabsOrder"] = ["10", "9"]
        config_path.write_text(json.dumps(config))

        assert main(["merge", "--root", str(project)]) == 0
        merged = json.loads((project / "flows.json").read_text())
        assert [n["id"] for n in merged[:2]] == ["10", "9"]

    def test_merge_overwrite_tabs_order(self, project):
        assert main(["split", "--root", str(project)]) == 0
        config_path = project / "flows-manager.json"
        config = json.loads(config_path.read_text())
        config["tabsOrder"] = ["9"]
        config_path.write_text(json.dumps(config))

        assert main(["merge", "--overwrite-tabs-order", "--root", str(project)]) == 0
        assert json.loads(config_path.read_text())["tabsOrder"] == ["9", "10"]

    def test_merge_without_tree(self, project, capsys):
        assert main(["merge", "--root", str(project)]) == 1
        assert "destination folder not found" in capsys.readouterr().err

    def test_merge_reports_each_bad_file(self, project, capsys):
        assert main(["split", "--root", str(project)]) == 0
        (project / "src" / "tabs" / "broken.json").write_text("[{")
        assert main(["merge", "--root", str(project)]) == 1
        err = capsys.readouterr().err
        assert "1 tree file(s) could not be parsed" in err
        assert "broken.json" in err


class TestListCommand:
    """Tests for `list`."""

    def test_list_json(self, project, capsys):
        assert main(["list", "--json", "--root", str(project)]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert len(rows) == 6
        assert {"file": "tabs/main-flow.json", "nodes": 3} in rows
        assert not (project / "src").exists()

    def test_list_table(self, project, capsys):
        assert main(["list", "--root", str(project)]) == 0
        out = capsys.readouterr().out
        assert "config-nodes/dashboard.json" in out
        assert "Total files: 6" in out


class TestMainEntry:
    """Tests for top-level options."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "flows-file-manager 0.1.0" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "split" in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit) as exc:
            main(["explode"])
        assert exc.value.code == 2

    def test_module_entry_point(self, project):
        code, out, _ = run_module(["list", "--json"], cwd=project)
        assert code == 0
        assert len(json.loads(out)) == 6

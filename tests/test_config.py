"""Tests for configuration handling."""

import json

import pytest
from flows_file_manager import (
    ConfigurationError,
    ManagerConfig,
    ParseError,
    SourceNotFoundError,
    load_config,
    save_config,
)


class TestManagerConfigFromDict:
    """Tests for ManagerConfig.from_dict."""

    def test_basic_config(self, config_dict):
        config = ManagerConfig.from_dict(config_dict)
        assert config.file_format == "json"
        assert config.destination_folder == "src"
        assert config.monolith_filename == "flows.json"
        assert config.tabs_order == []

    def test_format_is_case_insensitive(self, config_dict):
        config_dict["fileFormat"] = "YML"
        config = ManagerConfig.from_dict(config_dict)
        assert config.file_format == "yml"
        assert config.extension == "yml"

    @pytest.mark.parametrize("key", ["fileFormat", "destinationFolder", "tabsOrder", "monolithFilename"])
    def test_missing_key(self, config_dict, key):
        del config_dict[key]
        with pytest.raises(ConfigurationError, match=key):
            ManagerConfig.from_dict(config_dict)

    @pytest.mark.parametrize("key", ["fileFormat", "destinationFolder", "monolithFilename"])
    def test_empty_value(self, config_dict, key):
        config_dict[key] = ""
        with pytest.raises(ConfigurationError, match="is required"):
            ManagerConfig.from_dict(config_dict)

    @pytest.mark.parametrize("key", ["destinationFolder", "monolithFilename"])
    @pytest.mark.parametrize("value", [5, ["src"], {"path": "src"}, True])
    def test_non_string_path(self, config_dict, key, value):
        config_dict[key] = value
        with pytest.raises(ConfigurationError, match=f"{key} must be a path string"):
            ManagerConfig.from_dict(config_dict)

    def test_pathlike_accepted(self, config_dict, tmp_path):
        config_dict["destinationFolder"] = tmp_path / "tree"
        config = ManagerConfig.from_dict(config_dict)
        assert config.destination_folder == str(tmp_path / "tree")

    @pytest.mark.parametrize("fmt", ["xml", "jsonx", "yamlx", "toml"])
    def test_invalid_format(self, config_dict, fmt):
        config_dict["fileFormat"] = fmt
        with pytest.raises(ConfigurationError, match="Unexpected file format"):
            ManagerConfig.from_dict(config_dict)

    def test_tabs_order_must_be_list(self, config_dict):
        config_dict["tabsOrder"] = "9,10"
        with pytest.raises(ConfigurationError, match="tabsOrder must be a list"):
            ManagerConfig.from_dict(config_dict)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            ManagerConfig.from_dict(["fileFormat"])

    def test_to_dict_round_trip(self, config_dict):
        config_dict["tabsOrder"] = ["9", "10"]
        assert ManagerConfig.from_dict(config_dict).to_dict() == config_dict

    def test_with_tabs_order_returns_copy(self, config_dict):
        config = ManagerConfig.from_dict(config_dict)
        updated = config.with_tabs_order(["10"])
        assert updated.tabs_order == ["10"]
        assert config.tabs_order == []


class TestLoadConfig:
    """Tests for load_config and save_config."""

    def test_load_from_dict(self, config_dict):
        assert load_config(config_dict).destination_folder == "src"

    def test_load_passthrough(self, config_dict):
        config = ManagerConfig.from_dict(config_dict)
        assert load_config(config) is config

    def test_load_from_json(self, tmp_path, config_dict):
        path = tmp_path / "flows-manager.json"
        path.write_text(json.dumps(config_dict))
        assert load_config(path).monolith_filename == "flows.json"

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "flows-manager.yaml"
        path.write_text(
            "fileFormat: yaml\n"
            "destinationFolder: src\n"
            "tabsOrder:\n"
            "  - '9'\n"
            "monolithFilename: flows.json\n"
        )
        config = load_config(str(path))
        assert config.file_format == "yaml"
        assert config.tabs_order == ["9"]

    def test_file_not_found(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "flows-manager.yaml"
        path.write_text("")
        with pytest.raises(ParseError, match="Empty or invalid"):
            load_config(path)

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "flows-manager.json"
        path.write_text("{not json")
        with pytest.raises(ParseError, match="Invalid JSON"):
            load_config(path)

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ConfigurationError, match=".json, .yaml or .yml"):
            load_config(tmp_path / "flows-manager.ini")

    @pytest.mark.parametrize("name", ["cfg.json", "cfg.yaml"])
    def test_save_and_reload(self, tmp_path, config_dict, name):
        config = ManagerConfig.from_dict(config_dict).with_tabs_order(["9", "10"])
        path = save_config(config, tmp_path / name)
        assert load_config(path) == config

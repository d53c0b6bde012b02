"""
Configuration handling for the flows file manager.

The configuration record names the tree format, where the tree lives, the
monolith file and the canonical tabs order. It is usually kept next to the
project as JSON or YAML.

Example configuration (JSON):
    {
      "fileFormat": "yaml",
      "destinationFolder": "src",
      "tabsOrder": ["a1b2c3", "d4e5f6"],
      "monolithFilename": "flows.json"
    }

Example usage:
    from flows_file_manager.config import load_config

    # Load from file
    config = load_config("flows-manager.json")

    # Load from dict
    config = load_config({"fileFormat": "json", ...})
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .encoding import JSON_FORMAT, YAML_FORMATS, check_format, dump_data, load_data
from .errors import ConfigurationError, ParseError
from .storage import atomic_write, read_text

REQUIRED_KEYS = ("fileFormat", "destinationFolder", "tabsOrder", "monolithFilename")


def _path_value(key: str, value: Any) -> str:
    if not value:
        raise ConfigurationError(f"{key} is required")
    if not isinstance(value, (str, os.PathLike)):
        raise ConfigurationError(f"{key} must be a path string, got {type(value).__name__}")
    return os.fspath(value)


@dataclass
class ManagerConfig:
    """
    Validated configuration record.

    Attributes:
        file_format: Tree file format ('json', 'yaml' or 'yml')
        destination_folder: Folder holding tabs/, subflows/ and config-nodes/
        monolith_filename: Path of the monolith JSON file
        tabs_order: Canonical tab ordering; empty means natural order
    """

    file_format: str
    destination_folder: str
    monolith_filename: str
    tabs_order: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate configuration values."""
        if not self.file_format:
            raise ConfigurationError("fileFormat is required")
        self.file_format = check_format(self.file_format)
        self.destination_folder = _path_value("destinationFolder", self.destination_folder)
        self.monolith_filename = _path_value("monolithFilename", self.monolith_filename)
        if not isinstance(self.tabs_order, list):
            raise ConfigurationError(f"tabsOrder must be a list, got {type(self.tabs_order).__name__}")
        self.tabs_order = [str(tab_id) for tab_id in self.tabs_order]

    @property
    def extension(self) -> str:
        return self.file_format

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerConfig":
        """
        Create configuration from a dictionary.

        Raises:
            ConfigurationError: If a required key is missing or invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")
        missing = [key for key in REQUIRED_KEYS if key not in data]
        if missing:
            raise ConfigurationError(f"Erroneous config, missing key(s): {', '.join(missing)}")

        return cls(
            file_format=data["fileFormat"],
            destination_folder=data["destinationFolder"],
            monolith_filename=data["monolithFilename"],
            tabs_order=data["tabsOrder"] if data["tabsOrder"] is not None else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the on-disk record."""
        return {
            "fileFormat": self.file_format,
            "destinationFolder": self.destination_folder,
            "tabsOrder": list(self.tabs_order),
            "monolithFilename": self.monolith_filename,
        }

    def with_tabs_order(self, tabs_order: List[str]) -> "ManagerConfig":
        return replace(self, tabs_order=list(tabs_order))


def _format_for_path(path: Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    if suffix == JSON_FORMAT or suffix in YAML_FORMATS:
        return suffix
    raise ConfigurationError(f"Config file must be .json, .yaml or .yml: {path}")


def load_config(source: Union[str, Path, Dict[str, Any], ManagerConfig]) -> ManagerConfig:
    """
    Load configuration from various sources.

    Accepts a ManagerConfig (returned as is), a configuration dictionary, or
    the path of a JSON/YAML config file.

    Raises:
        ConfigurationError: If the configuration is invalid
        SourceNotFoundError: If the config file does not exist
        ParseError: If the config file cannot be parsed
    """
    if isinstance(source, ManagerConfig):
        return source
    if isinstance(source, dict):
        return ManagerConfig.from_dict(source)

    path = Path(source)
    fmt = _format_for_path(path)
    data = load_data(read_text(path), fmt, source=path)
    if data is None:
        raise ParseError("Empty or invalid config file", path)
    return ManagerConfig.from_dict(data)


def save_config(config: ManagerConfig, path: Union[str, Path], fmt: Optional[str] = None) -> Path:
    """Write the configuration record to ``path`` (format from its suffix)."""
    path = Path(path)
    atomic_write(path, dump_data(config.to_dict(), fmt or _format_for_path(path)))
    return path

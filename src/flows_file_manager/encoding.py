"""
Serialization of tree files and the monolith.

JSON is written with a 2-space indent and ``\\n`` line endings. YAML goes
through PyYAML's safe dumper with key order preserved; scalars that need
quoting are emitted double-quoted.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from .errors import ConfigurationError, ParseError

JSON_FORMAT = "json"
YAML_FORMATS = ("yaml", "yml")
SUPPORTED_FORMATS = (JSON_FORMAT,) + YAML_FORMATS


class _DoubleQuotedDumper(yaml.SafeDumper):
    """Safe dumper that prefers double quotes over single quotes."""

    def choose_scalar_style(self):
        style = super().choose_scalar_style()
        if style == "'":
            return '"'
        return style


def check_format(fmt: str) -> str:
    """Return the lowercased format, or raise ConfigurationError."""
    if not isinstance(fmt, str) or fmt.lower() not in SUPPORTED_FORMATS:
        raise ConfigurationError(
            f"Unexpected file format: '{fmt}'. Allowed formats are JSON and YAML "
            f"({', '.join(SUPPORTED_FORMATS)})."
        )
    return fmt.lower()


def _normalize_eol(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def dump_data(value: Any, fmt: str) -> str:
    """Render ``value`` as JSON or YAML text."""
    fmt = check_format(fmt)
    if fmt == JSON_FORMAT:
        return _normalize_eol(json.dumps(value, indent=2, ensure_ascii=False)) + "\n"
    return yaml.dump(
        value,
        Dumper=_DoubleQuotedDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def load_data(text: str, fmt: str, source: Any = None) -> Any:
    """Parse JSON or YAML text.

    Raises:
        ConfigurationError: If the format is unknown
        ParseError: If the text is malformed
    """
    fmt = check_format(fmt)
    try:
        if fmt == JSON_FORMAT:
            return json.loads(text)
        return yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", source) from e
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}", source) from e

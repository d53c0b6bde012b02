"""
Error types and the Result container returned by public operations.

Internal helpers raise the exceptions below. The public surface
(FlowsFileManager methods and build_tree) catches them and hands back a
Result instead, so callers always inspect ``result.ok`` rather than relying
on the absence of an exception.

Example:
    result = manager.flow_set_from_tree_files()
    if not result:
        print(result.message)
        for issue in result.issues:
            print(f"  - {issue}")
    else:
        flow_set = result.value
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union


# =============================================================================
# Error Types
# =============================================================================


class FlowsFileError(Exception):
    """Base exception for flows file manager errors."""

    pass


class ConfigurationError(FlowsFileError):
    """Raised when the manager configuration is missing a key or is invalid."""

    pass


class SourceNotFoundError(FlowsFileError):
    """Raised when an expected file or directory does not exist."""

    def __init__(self, path: Union[str, Path], what: str = "file"):
        self.path = Path(path)
        self.what = what
        super().__init__(f"{what} not found: {self.path}")


class ParseError(FlowsFileError):
    """Raised when JSON/YAML content or a flow definition cannot be parsed."""

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None):
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class WriteError(FlowsFileError):
    """Raised when a file or directory cannot be persisted."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class MissingLabelError(FlowsFileError):
    """Raised when an entity has not been through disambiguation."""

    def __init__(self, entity_id: str, category: str):
        self.entity_id = entity_id
        self.category = category
        super().__init__(
            f"{category} entity '{entity_id}' has no normalized label "
            "(run disambiguation before building the tree)"
        )


# =============================================================================
# Result Type
# =============================================================================


@dataclass
class Result:
    """Outcome of a public operation.

    Attributes:
        value: The produced value. May be set alongside an error when a batch
            operation completed partially (e.g. the list of files written).
        error: The failure, or None on success.
        issues: Isolated per-entity failures collected during a batch.
    """

    value: Any = None
    error: Optional[FlowsFileError] = None
    issues: List[FlowsFileError] = field(default_factory=list)

    @classmethod
    def success(cls, value: Any = None, issues: Optional[List[FlowsFileError]] = None) -> "Result":
        return cls(value=value, issues=list(issues or []))

    @classmethod
    def failure(
        cls,
        error: FlowsFileError,
        value: Any = None,
        issues: Optional[List[FlowsFileError]] = None,
    ) -> "Result":
        return cls(value=value, error=error, issues=list(issues or []))

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        """Human-readable summary of the outcome."""
        if self.error is None:
            return "ok"
        return str(self.error)

    def unwrap(self) -> Any:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

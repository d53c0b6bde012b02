"""
File-system helpers: tree folder creation, atomic writes and reads.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from .errors import ParseError, SourceNotFoundError, WriteError
from .tree import TREE_FOLDERS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def tree_root(destination_folder: PathLike, root_path: PathLike = ".") -> Path:
    return Path(root_path or ".") / destination_folder


def create_src_folders(destination_folder: PathLike, root_path: PathLike = ".") -> List[Path]:
    """Ensure the tabs/subflows/config-nodes folders exist.

    Returns:
        The three folder paths

    Raises:
        WriteError: If a folder cannot be created
    """
    directories = [tree_root(destination_folder, root_path) / folder for folder in TREE_FOLDERS]
    for directory in directories:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Creation of source directory {directory} failed: {e}", directory) from e
    return directories


def atomic_write(path: PathLike, content: str) -> None:
    """Atomically write content to a file.

    Uses write-to-temp-then-rename so a reader never sees a half-written file.

    Raises:
        WriteError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(suffix=".tmp", prefix=path.stem + "_", dir=path.parent)
    except OSError as e:
        raise WriteError(f"Could not write {path}: {e}", path) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_path, path)
        logger.debug("Atomic write complete: %s", path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise WriteError(f"Could not write {path}: {e}", path) from e


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file.

    Raises:
        SourceNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read file: {e}", path) from e

"""Discovery of candidate image files under a scan root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from .config import DEFAULT_EXTENSIONS
from .errors import ScanRootError
from .types import PathLike

logger = logging.getLogger(__name__)


def validate_root(root: PathLike) -> Path:
    """Return ``root`` as a Path, raising ScanRootError if it is not a directory."""
    root_path = Path(root)
    if not root_path.exists():
        raise ScanRootError(root_path)
    if not root_path.is_dir():
        raise ScanRootError(root_path, "not a directory")
    return root_path


def find_images(
    root: PathLike,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dir: Optional[PathLike] = None,
) -> List[Path]:
    """
    Recursively collect regular files whose suffix matches ``extensions``.

    Args:
        root: Directory to scan
        extensions: Lower-case suffixes including the dot
        exclude_dir: Directory whose contents are skipped (previous outputs)

    Returns:
        Sorted list of matching file paths
    """
    root_path = validate_root(root)
    suffixes = {ext.lower() for ext in extensions}
    excluded = Path(exclude_dir).resolve() if exclude_dir is not None else None

    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_log_walk_error):
        current = Path(dirpath)
        if excluded is not None:
            dirnames[:] = [d for d in dirnames if (current / d).resolve() != excluded]
        for filename in filenames:
            path = current / filename
            if path.suffix.lower() not in suffixes:
                continue
            if not path.is_file():
                continue
            found.append(path)

    found.sort()
    logger.debug("Found %d candidate file(s) under %s", len(found), root_path)
    return found


def _log_walk_error(error: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", error.filename, error)

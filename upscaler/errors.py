"""
Error taxonomy for the upscaling pipeline.

Per-file errors derive from ``UpscaleError`` and never travel past the
per-file pipeline. Batch-level errors (bad scan root, output directory
that cannot be created) abort the whole run and are raised separately.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class UpscaleError(Exception):
    """Base class for failures scoped to a single source file."""

    stage = "internal"

    def __init__(self, source: Union[str, Path], message: str):
        self.source = Path(source)
        self.message = message
        super().__init__(f"{message} ({self.source})")


class OpenError(UpscaleError):
    """Raised when a source file cannot be opened for reading."""

    stage = "open"


class DecodeError(UpscaleError):
    """Raised when every decode strategy failed for a source file."""

    stage = "decode"


class ResampleError(UpscaleError):
    """Raised when the resized buffer cannot be produced."""

    stage = "resample"


class EncodeError(UpscaleError):
    """Raised when the resized image cannot be serialized or written."""

    stage = "encode"


class FileNameError(UpscaleError):
    """Raised when no output file name can be derived from a source path."""

    stage = "name"


class ScanRootError(Exception):
    """Raised when the scan root is missing or not a directory."""

    def __init__(self, root: Union[str, Path], reason: Optional[str] = None):
        self.root = Path(root)
        detail = reason or "folder does not exist"
        super().__init__(f"{detail}: {self.root}")


class OutputDirectoryError(Exception):
    """Raised when the shared output directory cannot be created."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"creating output dir: {self.path}: {cause}")


__all__ = [
    "UpscaleError",
    "OpenError",
    "DecodeError",
    "ResampleError",
    "EncodeError",
    "FileNameError",
    "ScanRootError",
    "OutputDirectoryError",
]

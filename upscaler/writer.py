"""Serialization of upscaled images to the output directory."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from PIL import Image

from .errors import EncodeError, FileNameError
from .types import ImageBuffer, PathLike

logger = logging.getLogger(__name__)

# os.umask can only be read by setting it, so reads are serialized.
_umask_lock = threading.Lock()


def _current_umask() -> int:
    with _umask_lock:
        mask = os.umask(0)
        os.umask(mask)
    return mask


def _file_mode(target: Path) -> int:
    """Permissions for a written file: the existing target's, else 0666 minus umask."""
    try:
        return target.stat().st_mode & 0o777
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def output_path_for(source: PathLike, output_dir: PathLike) -> Path:
    """
    Map a source file to its output path (same base name).

    Raises:
        FileNameError: If ``source`` has no usable file-name component
    """
    source_path = Path(source)
    name = source_path.name
    if not name or name in {".", ".."}:
        raise FileNameError(source_path, f"invalid filename for {source_path}")
    return Path(output_dir) / name


def format_for_path(target: PathLike) -> str:
    """
    Infer the Pillow format name from the file-name suffix.

    Raises:
        EncodeError: If the suffix is missing or unknown
    """
    target_path = Path(target)
    suffix = target_path.suffix.lower()
    image_format = Image.registered_extensions().get(suffix)
    if not image_format:
        raise EncodeError(
            target_path, f"unsupported output format for suffix {suffix or '<none>'}"
        )
    return image_format


def write_image(
    image: ImageBuffer,
    target: PathLike,
    jpeg_quality: int = 95,
    icc_profile: Optional[bytes] = None,
    source: Optional[Path] = None,
) -> Path:
    """
    Encode ``image`` and write it to ``target``.

    The data is encoded into a temporary file beside the target and then
    moved over it, so the target is either complete or untouched.

    Args:
        image: Image to write
        target: Output path; its suffix selects the encoder
        jpeg_quality: Quality used for JPEG output
        icc_profile: Color profile to embed, when the format supports it
        source: Originating path, used for error context only

    Returns:
        The written path

    Raises:
        EncodeError: If the parent directory is missing or encoding fails
    """
    target_path = Path(target)
    origin = source or target_path
    image_format = format_for_path(target_path)

    if not target_path.parent.is_dir():
        raise EncodeError(origin, f"output directory does not exist: {target_path.parent}")

    save_kwargs: Dict[str, Any] = {}
    if image_format == "JPEG":
        save_kwargs["quality"] = jpeg_quality
    if icc_profile and image_format in {"JPEG", "PNG", "TIFF", "WEBP"}:
        save_kwargs["icc_profile"] = icc_profile

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False,
            dir=str(target_path.parent),
            prefix=f".{target_path.stem}.",
            suffix=target_path.suffix,
        ) as tmp:
            tmp_path = Path(tmp.name)
            image.save(tmp, format=image_format, **save_kwargs)
        os.chmod(tmp_path, _file_mode(target_path))
        os.replace(tmp_path, target_path)
    except Exception as exc:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise EncodeError(origin, f"saving image to {target_path}: {exc}") from exc

    logger.debug("Wrote %s (%s %dx%d)", target_path, image_format, image.width, image.height)
    return target_path

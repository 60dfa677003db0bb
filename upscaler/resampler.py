"""Integer magnification of decoded images."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from .errors import ResampleError
from .types import MAX_DIMENSION, ImageBuffer, ImageSize

logger = logging.getLogger(__name__)

_Resampling = getattr(Image, "Resampling", Image)

RESAMPLE_FILTERS = {
    "lanczos": _Resampling.LANCZOS,
    "bicubic": _Resampling.BICUBIC,
    "hamming": _Resampling.HAMMING,
    "bilinear": _Resampling.BILINEAR,
    "box": _Resampling.BOX,
    "nearest": _Resampling.NEAREST,
}

# Modes the resampling filters cannot interpolate in directly.
_MODE_CONVERSIONS = {"1": "L", "P": "RGBA", "PA": "RGBA"}


def saturating_mul(value: int, factor: int, limit: int = MAX_DIMENSION) -> int:
    """Multiply two non-negative integers, clamping the product at ``limit``."""
    if value <= 0 or factor <= 0:
        return 0
    if value > limit // factor:
        return limit
    return value * factor


def scaled_size(width: int, height: int, factor: int) -> ImageSize:
    """Return ``(width, height)`` multiplied by ``factor``, saturating."""
    if isinstance(factor, bool) or not isinstance(factor, int) or factor <= 0:
        raise ValueError(f"factor must be a positive integer, got {factor!r}")
    return saturating_mul(width, factor), saturating_mul(height, factor)


def upscale(
    image: ImageBuffer,
    factor: int,
    resample: str = "lanczos",
    source: Optional[Path] = None,
) -> ImageBuffer:
    """
    Resize an image by an integer factor on both axes.

    Args:
        image: Decoded source image (left untouched)
        factor: Positive integer magnification
        resample: Name of the filter in ``RESAMPLE_FILTERS``
        source: Originating path, used for error context only

    Returns:
        New image of exactly ``scaled_size(*image.size, factor)``

    Raises:
        ResampleError: If the resized buffer cannot be allocated or computed
    """
    if resample not in RESAMPLE_FILTERS:
        raise ValueError(f"Unsupported resample filter: {resample}")
    target = scaled_size(image.width, image.height, factor)
    origin = source or Path(getattr(image, "filename", "") or "<memory>")

    if target[0] == 0 or target[1] == 0:
        return Image.new(image.mode, target)

    working = image
    if image.mode in _MODE_CONVERSIONS:
        mode = _MODE_CONVERSIONS[image.mode]
        if image.mode == "P" and "transparency" not in image.info:
            mode = "RGB"
        working = image.convert(mode)

    try:
        return working.resize(target, resample=RESAMPLE_FILTERS[resample])
    except (MemoryError, ValueError, OverflowError) as exc:
        raise ResampleError(
            origin, f"resizing {image.width}x{image.height} to {target[0]}x{target[1]}: {exc}"
        ) from exc
    finally:
        if working is not image:
            working.close()

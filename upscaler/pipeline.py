"""
Per-file upscaling pipeline.

Decode, resample and write one source file, turning every failure into a
``Failure`` outcome so a single bad file never reaches the coordinator as
an exception.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import UpscaleConfig
from .decoders import ImageDecoder
from .errors import UpscaleError
from .resampler import upscale
from .types import Failure, ImageBuffer, PathLike, PipelineOutcome, Success
from .writer import output_path_for, write_image

logger = logging.getLogger(__name__)


def upscale_file(
    source: PathLike,
    output_dir: PathLike,
    config: Optional[UpscaleConfig] = None,
    decoder: Optional[ImageDecoder] = None,
) -> PipelineOutcome:
    """
    Run decode, resize and write for a single file.

    Args:
        source: Path of the input image
        output_dir: Existing directory receiving the output file
        config: Pipeline configuration (factor, filter, JPEG quality)
        decoder: Decode strategy chain, defaults to the standard chain

    Returns:
        ``Success`` with the written path or ``Failure`` with the cause
    """
    source_path = Path(source)
    config = config or UpscaleConfig()
    decoder = decoder or ImageDecoder()

    image: Optional[ImageBuffer] = None
    resized: Optional[ImageBuffer] = None
    try:
        target = output_path_for(source_path, output_dir)
        image = decoder.decode(source_path)
        resized = upscale(image, config.factor, config.resample, source=source_path)
        write_image(
            resized,
            target,
            jpeg_quality=config.jpeg_quality,
            icc_profile=image.info.get("icc_profile"),
            source=source_path,
        )
    except UpscaleError as exc:
        logger.warning("Failed to upscale %s at %s stage: %s", source_path, exc.stage, exc)
        return Failure(source=source_path, error=str(exc), stage=exc.stage)
    except Exception as exc:
        logger.exception("Unexpected error while upscaling %s", source_path)
        return Failure(source=source_path, error=f"{type(exc).__name__}: {exc}")
    finally:
        if resized is not None and resized is not image:
            resized.close()
        if image is not None:
            image.close()

    logger.info("Upscaled %s -> %s", source_path, target)
    return Success(source=source_path, output=target)

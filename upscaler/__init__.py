"""
Batch image upscaler.

Decodes every image found under a folder, enlarges it by an integer factor
with a Lanczos filter and writes the result into a sibling output folder,
processing files in parallel and isolating per-file failures.
"""

from .config import UpscaleConfig
from .coordinator import FanOutCoordinator
from .decoders import ImageDecoder, decode_image
from .errors import (
    DecodeError,
    EncodeError,
    FileNameError,
    OpenError,
    OutputDirectoryError,
    ResampleError,
    ScanRootError,
    UpscaleError,
)
from .pipeline import upscale_file
from .resampler import scaled_size, upscale
from .scanner import find_images
from .types import BatchReport, Failure, PipelineOutcome, Success
from .writer import output_path_for, write_image

__all__ = [
    "UpscaleConfig",
    "FanOutCoordinator",
    "ImageDecoder",
    "decode_image",
    "upscale_file",
    "scaled_size",
    "upscale",
    "find_images",
    "output_path_for",
    "write_image",
    "BatchReport",
    "Success",
    "Failure",
    "PipelineOutcome",
    "UpscaleError",
    "OpenError",
    "DecodeError",
    "ResampleError",
    "EncodeError",
    "FileNameError",
    "ScanRootError",
    "OutputDirectoryError",
]

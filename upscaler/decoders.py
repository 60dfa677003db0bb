"""
Format-tolerant image decoding.

File extensions are not trusted: decoding runs an ordered chain of
strategies that inspect the file content, stopping at the first one that
produces a fully loaded image.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Tuple

from PIL import Image

from .errors import DecodeError, OpenError
from .types import ImageBuffer, PathLike

logger = logging.getLogger(__name__)

# Magic numbers probed when a buffer does not start with a known signature.
KNOWN_SIGNATURES: Tuple[Tuple[str, bytes], ...] = (
    ("JPEG", b"\xff\xd8\xff"),
    ("PNG", b"\x89PNG\r\n\x1a\n"),
    ("GIF", b"GIF87a"),
    ("GIF", b"GIF89a"),
    ("WEBP", b"RIFF"),
    ("TIFF", b"II*\x00"),
    ("TIFF", b"MM\x00*"),
    ("BMP", b"BM"),
)

MAX_PROBES_PER_SIGNATURE = 8


class DecodeStrategy(ABC):
    """One attempt at turning an open file into a decoded image."""

    name = "strategy"

    @abstractmethod
    def decode(self, stream: BinaryIO, path: Path) -> ImageBuffer:
        """
        Decode the image held by ``stream``.

        Args:
            stream: Binary file object opened on ``path``
            path: Source path, for context only

        Returns:
            Fully loaded image

        Raises:
            Exception: Any failure means the next strategy is tried
        """


class SignatureDecodeStrategy(DecodeStrategy):
    """Let Pillow identify the format from the content signature."""

    name = "signature"

    def decode(self, stream: BinaryIO, path: Path) -> ImageBuffer:
        stream.seek(0)
        image = Image.open(stream)
        try:
            image.load()
        except Exception:
            image.close()
            raise
        return image


class InMemoryDecodeStrategy(DecodeStrategy):
    """
    Read the whole file and decode from bytes.

    When the buffer itself is not recognised, known signatures are searched
    for further into the data so images wrapped in a foreign header (or
    prefixed with junk bytes) can still be recovered.
    """

    name = "memory"

    def __init__(self, signatures: Sequence[Tuple[str, bytes]] = KNOWN_SIGNATURES):
        self.signatures = tuple(signatures)

    def decode(self, stream: BinaryIO, path: Path) -> ImageBuffer:
        stream.seek(0)
        try:
            data = stream.read()
        except OSError as exc:
            raise OpenError(path, f"reading bytes: {exc}") from exc

        try:
            return _load_from_memory(data)
        except Exception as exc:
            first_error = exc

        for offset in self._candidate_offsets(data):
            try:
                image = _load_from_memory(data[offset:])
            except Exception as exc:
                logger.debug("No image at offset %d of %s: %s", offset, path, exc)
                continue
            logger.info("Recovered %s image at offset %d of %s", image.format, offset, path)
            return image

        raise first_error

    def _candidate_offsets(self, data: bytes) -> List[int]:
        offsets = set()
        for _, magic in self.signatures:
            start = 1
            for _ in range(MAX_PROBES_PER_SIGNATURE):
                found = data.find(magic, start)
                if found < 0:
                    break
                offsets.add(found)
                start = found + 1
        return sorted(offsets)


def _load_from_memory(data: bytes) -> ImageBuffer:
    image = Image.open(io.BytesIO(data))
    try:
        image.load()
    except Exception:
        image.close()
        raise
    return image


def default_strategies() -> List[DecodeStrategy]:
    """Strategies in the order they are attempted."""
    return [SignatureDecodeStrategy(), InMemoryDecodeStrategy()]


class ImageDecoder:
    """Ordered chain of decode strategies, short-circuiting on success."""

    def __init__(self, strategies: Optional[Sequence[DecodeStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        if not self.strategies:
            raise ValueError("At least one decode strategy is required")

    def decode(self, path: PathLike) -> ImageBuffer:
        """
        Decode the image stored at ``path``.

        Raises:
            OpenError: If the file cannot be opened or read; no fallback
            DecodeError: If every strategy failed
        """
        source = Path(path)
        try:
            stream = open(source, "rb")
        except OSError as exc:
            raise OpenError(source, f"opening image: {exc}") from exc

        failures: List[str] = []
        with stream:
            for strategy in self.strategies:
                try:
                    image = strategy.decode(stream, source)
                except OpenError:
                    raise
                except Exception as exc:
                    logger.debug("%s decode of %s failed: %s", strategy.name, source, exc)
                    failures.append(f"{strategy.name}: {exc}")
                    continue
                logger.debug(
                    "Decoded %s as %s %dx%d via %s",
                    source,
                    image.format,
                    image.width,
                    image.height,
                    strategy.name,
                )
                return image

        raise DecodeError(source, "decoding image failed; " + "; ".join(failures))


def decode_image(path: PathLike) -> ImageBuffer:
    """Decode ``path`` with the default strategy chain."""
    return ImageDecoder().decode(path)

"""Shared type aliases and outcome records for the upscaling pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from PIL import Image

PathLike = Union[str, Path]
ImageSize = Tuple[int, int]

# Decoded raster owned by a single pipeline invocation.
ImageBuffer = Image.Image

# Upper bound of a single output dimension (unsigned 32-bit).
MAX_DIMENSION = 2**32 - 1


@dataclass(frozen=True)
class Success:
    """A source file that was upscaled and written."""

    source: Path
    output: Path

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A source file that could not be processed."""

    source: Path
    error: str
    stage: str = "internal"

    @property
    def ok(self) -> bool:
        return False


PipelineOutcome = Union[Success, Failure]


@dataclass
class BatchReport:
    """Outcomes collected for one batch run."""

    output_dir: Path | None = None
    outcomes: List[PipelineOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(
        cls, outcomes: Iterable[PipelineOutcome], output_dir: Path | None = None
    ) -> "BatchReport":
        return cls(output_dir=output_dir, outcomes=list(outcomes))

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> List[Success]:
        return [o for o in self.outcomes if isinstance(o, Success)]

    @property
    def failed(self) -> List[Failure]:
        return [o for o in self.outcomes if isinstance(o, Failure)]


__all__ = [
    "PathLike",
    "ImageSize",
    "ImageBuffer",
    "MAX_DIMENSION",
    "Success",
    "Failure",
    "PipelineOutcome",
    "BatchReport",
]

"""
Fan-out of the per-file pipeline over a bounded thread pool.

This module provides the FanOutCoordinator class that prepares the shared
output directory, dispatches every source path to a worker and collects
exactly one outcome per path.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Sequence

from .config import UpscaleConfig
from .decoders import ImageDecoder
from .errors import OutputDirectoryError
from .pipeline import upscale_file
from .types import BatchReport, Failure, PathLike, PipelineOutcome

logger = logging.getLogger(__name__)

PipelineFn = Callable[[Path, Path], PipelineOutcome]


class FanOutCoordinator:
    """
    Runs the per-file pipeline for a batch of source paths.

    Individual failures come back as ``Failure`` outcomes; the only error
    raised to the caller is an output directory that cannot be created.
    """

    def __init__(
        self,
        config: Optional[UpscaleConfig] = None,
        pipeline: Optional[PipelineFn] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            config: Upscaling configuration; ``config.workers`` bounds concurrency
            pipeline: Callable ``(source, output_dir) -> outcome``, defaults
                to ``upscale_file`` bound to ``config``
        """
        self.config = config or UpscaleConfig()
        self._decoder = ImageDecoder()
        self._pipeline = pipeline or self._default_pipeline

    @property
    def workers(self) -> int:
        return int(self.config.workers)

    def _default_pipeline(self, source: Path, output_dir: Path) -> PipelineOutcome:
        return upscale_file(source, output_dir, self.config, decoder=self._decoder)

    def prepare_output_dir(self, root: PathLike) -> Path:
        """Create ``<root>/<output_dir_name>`` if needed and return it."""
        output_dir = self.config.output_dir(Path(root))
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(output_dir, exc) from exc
        return output_dir

    def iter_outcomes(
        self, paths: Sequence[PathLike], root: PathLike
    ) -> Iterator[PipelineOutcome]:
        """
        Yield one outcome per path as workers finish, in completion order.

        The output directory is created lazily, only when there is at
        least one path to process.

        Raises:
            OutputDirectoryError: If the output directory cannot be created
        """
        sources = [Path(p) for p in paths]
        if not sources:
            return

        output_dir = self.prepare_output_dir(root)
        logger.info(
            "Upscaling %d file(s) x%d into %s with %d worker(s)",
            len(sources),
            self.config.factor,
            output_dir,
            self.workers,
        )

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures: Dict[Future, Path] = {
                pool.submit(self._pipeline, source, output_dir): source
                for source in sources
            }
            for future in as_completed(futures):
                yield self._outcome_of(future, futures[future])

    def run(self, paths: Sequence[PathLike], root: PathLike) -> BatchReport:
        """Process every path and return the collected outcomes."""
        outcomes = list(self.iter_outcomes(paths, root))
        output_dir = self.config.output_dir(Path(root)) if outcomes else None
        report = BatchReport.from_outcomes(outcomes, output_dir=output_dir)
        logger.info(
            "Batch finished: %d succeeded, %d failed",
            len(report.succeeded),
            len(report.failed),
        )
        return report

    @staticmethod
    def _outcome_of(future: Future, source: Path) -> PipelineOutcome:
        exc = future.exception()
        if exc is not None:
            logger.error("Worker for %s raised %s", source, exc)
            return Failure(source=source, error=f"{type(exc).__name__}: {exc}")
        return future.result()

"""CLI runner that upscales every JPG/JPEG image under a folder."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import UpscaleConfig
from .coordinator import FanOutCoordinator
from .errors import OutputDirectoryError, ScanRootError
from .scanner import find_images, validate_root
from .types import BatchReport, Failure, PipelineOutcome, Success

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Upscale all JPG/JPEG images in a folder (recursive)"
    )

    parser.add_argument(
        "folder", type=Path, metavar="FOLDER", help="Folder to scan for images"
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=None,
        help="Number of worker threads (default: number of logical CPUs)",
    )
    parser.add_argument(
        "--factor",
        type=int,
        default=None,
        help="Integer magnification factor (default: 4)",
    )
    parser.add_argument(
        "--output-dir-name",
        default=None,
        help="Name of the output directory created inside FOLDER (default: 4x)",
    )
    parser.add_argument(
        "--quality", type=int, default=None, help="JPEG quality (default: 95)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> UpscaleConfig:
    """Combine environment defaults with command line overrides."""
    return UpscaleConfig.from_env(
        factor=args.factor,
        workers=args.threads,
        output_dir_name=args.output_dir_name,
        jpeg_quality=args.quality,
    )


def report_outcome(outcome: PipelineOutcome) -> None:
    """Print one line for a processed file."""
    if isinstance(outcome, Success):
        print(f"Upscaled: {outcome.source}")
    elif isinstance(outcome, Failure):
        print(f"Failed {outcome.source}: {outcome.error}", file=sys.stderr)


def run(folder: Path, config: UpscaleConfig) -> BatchReport:
    """Scan ``folder`` and upscale everything found, reporting as it goes."""
    root = validate_root(folder)
    print(f"Scanning '{root}' for jpg/jpeg images...")
    images = find_images(
        root, extensions=config.extensions, exclude_dir=config.output_dir(root)
    )
    print(f"Found {len(images)} image(s)")

    if not images:
        print("Nothing to do.")
        return BatchReport()

    coordinator = FanOutCoordinator(config)
    outcomes = []
    for outcome in coordinator.iter_outcomes(images, root):
        report_outcome(outcome)
        outcomes.append(outcome)

    report = BatchReport.from_outcomes(outcomes, output_dir=config.output_dir(root))
    print(f"All done. Upscaled images in: {report.output_dir}")
    print(f"{len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    load_dotenv()

    try:
        config = build_config(args)
        run(args.folder, config)
    except (ValueError, ScanRootError, OutputDirectoryError) as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())

"""
Configuration management for the batch upscaler.

This module provides a structured configuration class for the pipeline
with validation, dictionary round-tripping and environment overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .resampler import RESAMPLE_FILTERS

DEFAULT_FACTOR = 4
DEFAULT_OUTPUT_DIR_NAME = "4x"
DEFAULT_EXTENSIONS: Tuple[str, ...] = (".jpg", ".jpeg")

# Environment variables consulted by UpscaleConfig.from_env
ENV_FACTOR = "UPSCALER_FACTOR"
ENV_WORKERS = "UPSCALER_WORKERS"
ENV_OUTPUT_DIR = "UPSCALER_OUTPUT_DIR"
ENV_JPEG_QUALITY = "UPSCALER_JPEG_QUALITY"


def default_workers() -> int:
    """Number of available processing units, at least one."""
    return os.cpu_count() or 1


@dataclass
class UpscaleConfig:
    """
    Complete configuration for one upscaling run.

    The magnification factor and worker count are plain values threaded
    into the coordinator; nothing here is process-global.
    """

    factor: int = DEFAULT_FACTOR
    workers: Optional[int] = None
    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME
    extensions: Sequence[str] = field(default_factory=lambda: DEFAULT_EXTENSIONS)
    resample: str = "lanczos"
    jpeg_quality: int = 95

    def __post_init__(self) -> None:
        """Validate and normalize configuration."""
        if isinstance(self.factor, bool) or not isinstance(self.factor, int):
            raise ValueError(f"factor must be an integer, got {self.factor!r}")
        if self.factor <= 0:
            raise ValueError(f"factor must be positive, got {self.factor}")

        if self.workers is None:
            self.workers = default_workers()
        elif isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise ValueError(f"workers must be an integer, got {self.workers!r}")
        elif self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

        name = str(self.output_dir_name).strip()
        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            raise ValueError(f"Invalid output directory name: {self.output_dir_name!r}")
        self.output_dir_name = name

        self.extensions = tuple(_normalize_extension(ext) for ext in self.extensions)
        if not self.extensions:
            raise ValueError("At least one file extension is required")

        self.resample = self.resample.lower()
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(
                f"Unsupported resample filter: {self.resample} "
                f"(expected one of {sorted(RESAMPLE_FILTERS)})"
            )

        if not (1 <= self.jpeg_quality <= 95):
            raise ValueError("jpeg_quality must be between 1 and 95")

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, object] | None) -> "UpscaleConfig":
        """
        Create configuration from dictionary.

        Args:
            config_dict: Configuration mapping (can be None)

        Returns:
            UpscaleConfig instance
        """
        if not config_dict:
            return cls()

        allowed = {
            "factor",
            "workers",
            "output_dir_name",
            "extensions",
            "resample",
            "jpeg_quality",
        }
        unexpected = set(config_dict) - allowed
        if unexpected:
            raise ValueError(
                f"Unsupported configuration keys provided: {sorted(unexpected)}"
            )

        return cls(**{key: value for key, value in config_dict.items()})

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "UpscaleConfig":
        """
        Create configuration from environment variables.

        Explicit keyword overrides that are not None take precedence over
        the environment.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        if env.get(ENV_FACTOR):
            values["factor"] = _parse_int(ENV_FACTOR, env[ENV_FACTOR])
        if env.get(ENV_WORKERS):
            values["workers"] = _parse_int(ENV_WORKERS, env[ENV_WORKERS])
        if env.get(ENV_OUTPUT_DIR):
            values["output_dir_name"] = env[ENV_OUTPUT_DIR]
        if env.get(ENV_JPEG_QUALITY):
            values["jpeg_quality"] = _parse_int(ENV_JPEG_QUALITY, env[ENV_JPEG_QUALITY])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return {
            "factor": self.factor,
            "workers": self.workers,
            "output_dir_name": self.output_dir_name,
            "extensions": list(self.extensions),
            "resample": self.resample,
            "jpeg_quality": self.jpeg_quality,
        }

    def output_dir(self, root: Path) -> Path:
        """Get the output directory for a scan root."""
        return Path(root) / self.output_dir_name


def _normalize_extension(ext: str) -> str:
    value = str(ext).strip().lower()
    if not value or value == ".":
        raise ValueError(f"Invalid file extension: {ext!r}")
    return value if value.startswith(".") else f".{value}"


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

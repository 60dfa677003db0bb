"""
Tests for configuration management.

Tests configuration validation, creation from dictionaries and
environment variables, and dictionary round-tripping.
"""

from pathlib import Path

import pytest

from upscaler.config import UpscaleConfig, default_workers


class TestUpscaleConfig:
    """Test cases for UpscaleConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = UpscaleConfig()

        assert config.factor == 4
        assert config.workers == default_workers()
        assert config.workers >= 1
        assert config.output_dir_name == "4x"
        assert config.extensions == (".jpg", ".jpeg")
        assert config.resample == "lanczos"
        assert config.jpeg_quality == 95

    def test_output_dir_is_child_of_root(self):
        """Output directory is a fixed named child of the scan root."""
        config = UpscaleConfig()
        assert config.output_dir(Path("/data/photos")) == Path("/data/photos/4x")

    @pytest.mark.parametrize("factor", [0, -1])
    def test_non_positive_factor(self, factor):
        """Test factor validation."""
        with pytest.raises(ValueError, match="factor must be positive"):
            UpscaleConfig(factor=factor)

    def test_non_integer_factor(self):
        """Fractional factors are rejected."""
        with pytest.raises(ValueError, match="factor must be an integer"):
            UpscaleConfig(factor=2.5)

    def test_non_positive_workers(self):
        """Test worker count validation."""
        with pytest.raises(ValueError, match="workers must be positive"):
            UpscaleConfig(workers=0)

    def test_explicit_workers_kept(self):
        """An explicit worker count overrides the CPU default."""
        assert UpscaleConfig(workers=3).workers == 3

    @pytest.mark.parametrize("name", ["", "..", "a/b", "a\\b"])
    def test_invalid_output_dir_name(self, name):
        """Output directory name must be a single path component."""
        with pytest.raises(ValueError, match="Invalid output directory name"):
            UpscaleConfig(output_dir_name=name)

    def test_extensions_normalized(self):
        """Extensions are lower-cased and dotted."""
        config = UpscaleConfig(extensions=["JPG", ".PNG"])
        assert config.extensions == (".jpg", ".png")

    def test_unknown_resample_filter(self):
        """Test resample filter validation."""
        with pytest.raises(ValueError, match="Unsupported resample filter"):
            UpscaleConfig(resample="sinc")

    @pytest.mark.parametrize("quality", [0, 96, 100])
    def test_jpeg_quality_range(self, quality):
        """Test JPEG quality validation."""
        with pytest.raises(ValueError, match="between 1 and 95"):
            UpscaleConfig(jpeg_quality=quality)

    def test_jpeg_quality_upper_bound_accepted(self):
        assert UpscaleConfig(jpeg_quality=95).jpeg_quality == 95


class TestConfigFromDict:
    """Test cases for dictionary conversion."""

    def test_from_none_returns_defaults(self):
        """Empty input yields the default configuration."""
        assert UpscaleConfig.from_dict(None).factor == 4

    def test_from_dict_values(self):
        """Test creating configuration from a dictionary."""
        config = UpscaleConfig.from_dict(
            {"factor": 2, "workers": 5, "output_dir_name": "2x"}
        )

        assert config.factor == 2
        assert config.workers == 5
        assert config.output_dir_name == "2x"

    def test_from_dict_rejects_unknown_keys(self):
        """Unknown keys are reported instead of silently ignored."""
        with pytest.raises(ValueError, match="Unsupported configuration keys"):
            UpscaleConfig.from_dict({"threads": 4})

    def test_round_trip(self):
        """to_dict output recreates an equal configuration."""
        config = UpscaleConfig(factor=3, workers=2, jpeg_quality=80)
        assert UpscaleConfig.from_dict(config.to_dict()) == config


class TestConfigFromEnv:
    """Test cases for environment overrides."""

    def test_env_values_applied(self):
        """Environment variables populate the configuration."""
        config = UpscaleConfig.from_env(
            {
                "UPSCALER_FACTOR": "2",
                "UPSCALER_WORKERS": "3",
                "UPSCALER_OUTPUT_DIR": "big",
                "UPSCALER_JPEG_QUALITY": "90",
            }
        )

        assert config.factor == 2
        assert config.workers == 3
        assert config.output_dir_name == "big"
        assert config.jpeg_quality == 90

    def test_overrides_win_over_env(self):
        """Explicit overrides take precedence; None overrides are ignored."""
        config = UpscaleConfig.from_env(
            {"UPSCALER_FACTOR": "2", "UPSCALER_WORKERS": "3"},
            factor=8,
            workers=None,
        )

        assert config.factor == 8
        assert config.workers == 3

    def test_invalid_env_integer(self):
        """Non-numeric environment values raise a clear error."""
        with pytest.raises(ValueError, match="UPSCALER_WORKERS must be an integer"):
            UpscaleConfig.from_env({"UPSCALER_WORKERS": "many"})

    def test_empty_env_uses_defaults(self):
        """No variables set means defaults."""
        assert UpscaleConfig.from_env({}) == UpscaleConfig()

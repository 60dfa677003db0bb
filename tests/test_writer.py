"""Tests for output naming and atomic image writes."""

import os
import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from upscaler.errors import EncodeError, FileNameError
from upscaler.writer import format_for_path, output_path_for, write_image


class TestOutputPath:
    """Test cases for output path derivation."""

    def test_same_base_name(self, tmp_path):
        out = output_path_for(tmp_path / "a" / "cat.jpg", tmp_path / "4x")
        assert out == tmp_path / "4x" / "cat.jpg"

    def test_extension_case_preserved(self, tmp_path):
        out = output_path_for(Path("shots/IMG_01.JPEG"), tmp_path)
        assert out.name == "IMG_01.JPEG"

    @pytest.mark.parametrize("source", ["", ".", "..", "/"])
    def test_missing_name_component(self, source, tmp_path):
        with pytest.raises(FileNameError) as excinfo:
            output_path_for(Path(source), tmp_path)

        assert excinfo.value.stage == "name"


class TestFormatForPath:
    """Test cases for format inference from suffixes."""

    @pytest.mark.parametrize(
        "name, expected",
        [("a.jpg", "JPEG"), ("a.JPEG", "JPEG"), ("a.png", "PNG")],
    )
    def test_known_suffixes(self, name, expected):
        assert format_for_path(Path(name)) == expected

    def test_unknown_suffix(self):
        with pytest.raises(EncodeError, match="unsupported output format"):
            format_for_path(Path("a.notanimage"))


class TestWriteImage:
    """Test cases for writing encoded images."""

    def test_writes_jpeg(self, tmp_path):
        target = tmp_path / "out.jpg"

        written = write_image(Image.new("RGB", (8, 8), color=(5, 6, 7)), target)

        assert written == target
        with Image.open(target) as image:
            assert image.format == "JPEG"
            assert image.size == (8, 8)

    def test_no_temporary_files_left(self, tmp_path):
        write_image(Image.new("RGB", (4, 4)), tmp_path / "out.png")
        assert [p.name for p in tmp_path.iterdir()] == ["out.png"]

    def test_missing_parent_directory(self, tmp_path):
        with pytest.raises(EncodeError, match="output directory does not exist"):
            write_image(Image.new("RGB", (4, 4)), tmp_path / "nope" / "out.jpg")

    def test_rejected_mode_leaves_no_file(self, tmp_path):
        """RGBA cannot be stored as JPEG; nothing is left behind."""
        source = tmp_path / "alpha.jpg"

        with pytest.raises(EncodeError) as excinfo:
            write_image(
                Image.new("RGBA", (4, 4)), tmp_path / "alpha_out.jpg", source=source
            )

        assert excinfo.value.source == source
        assert list(tmp_path.iterdir()) == []

    def test_failed_write_keeps_previous_output(self, tmp_path):
        """An encoder failure does not clobber an existing complete file."""
        target = tmp_path / "keep.jpg"
        Image.new("RGB", (3, 3)).save(target)
        before = target.read_bytes()

        with pytest.raises(EncodeError):
            write_image(Image.new("RGBA", (4, 4)), target)

        assert target.read_bytes() == before

    def test_replace_failure_cleans_up(self, tmp_path):
        target = tmp_path / "out.jpg"

        with patch("upscaler.writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(EncodeError, match="disk full"):
                write_image(Image.new("RGB", (4, 4)), target)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
    def test_new_file_follows_umask(self, tmp_path):
        """Written files get 0666 minus the umask, not the temp file's 0600."""
        previous = os.umask(0o022)
        try:
            target = write_image(Image.new("RGB", (4, 4)), tmp_path / "out.jpg")
        finally:
            os.umask(previous)

        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
    def test_overwrite_keeps_existing_mode(self, tmp_path):
        target = tmp_path / "out.jpg"
        Image.new("RGB", (3, 3)).save(target)
        target.chmod(0o640)

        write_image(Image.new("RGB", (4, 4)), target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o640

    def test_jpeg_quality_applied(self, tmp_path):
        """Lower quality gives a smaller file for the same content."""
        image = Image.linear_gradient("L").convert("RGB")

        high = write_image(image, tmp_path / "high.jpg", jpeg_quality=95)
        low = write_image(image, tmp_path / "low.jpg", jpeg_quality=10)

        assert low.stat().st_size < high.stat().st_size

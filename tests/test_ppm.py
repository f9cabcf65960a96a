"""Tests for image output."""

import io

import pytest
import numpy as np
from PIL import Image

from sphereforge.ppm import format_ppm, write_ppm, read_ppm, save_image, PPMFormatError


@pytest.fixture
def pixels():
    """2 rows by 3 columns, every channel distinct."""
    return np.array([
        [[255, 0, 0], [0, 255, 0], [0, 0, 255]],
        [[1, 2, 3], [10, 20, 30], [254, 128, 7]],
    ], dtype=np.uint8)


class TestFormatPPM:
    """Test P3 encoding."""

    def test_header(self, pixels):
        lines = format_ppm(pixels).splitlines()
        assert lines[0] == "P3"
        assert lines[1] == "3 2"
        assert lines[2] == "255"

    def test_one_line_per_pixel_top_row_first(self, pixels):
        lines = format_ppm(pixels).splitlines()
        assert len(lines) == 3 + 6
        assert lines[3:] == [
            "255 0 0", "0 255 0", "0 0 255",
            "1 2 3", "10 20 30", "254 128 7",
        ]

    def test_ends_with_newline(self, pixels):
        assert format_ppm(pixels).endswith("254 128 7\n")

    def test_float_input_is_clipped(self):
        text = format_ppm(np.array([[[300.0, -4.0, 12.0]]]))
        assert text.splitlines()[3] == "255 0 12"

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            format_ppm(np.zeros((2, 2), dtype=np.uint8))
        with pytest.raises(ValueError):
            format_ppm(np.zeros((2, 2, 4), dtype=np.uint8))


class TestWriteReadPPM:
    """Test writing to and reading from files and streams."""

    def test_file(self, pixels, tmp_path):
        path = tmp_path / "image.ppm"
        write_ppm(pixels, path)
        assert path.read_text() == format_ppm(pixels)
        np.testing.assert_array_equal(read_ppm(path), pixels)

    def test_string_path(self, pixels, tmp_path):
        path = str(tmp_path / "image.ppm")
        write_ppm(pixels, path)
        assert read_ppm(path).shape == (2, 3, 3)

    def test_stream(self, pixels):
        buffer = io.StringIO()
        write_ppm(pixels, buffer)
        buffer.seek(0)
        np.testing.assert_array_equal(read_ppm(buffer), pixels)

    def test_comments_and_free_whitespace(self):
        text = "P3\n# made by hand\n2 1\n255\n1 2 3   4 5 6 # trailing\n"
        image = read_ppm(io.StringIO(text))
        np.testing.assert_array_equal(image, [[[1, 2, 3], [4, 5, 6]]])


class TestReadPPMErrors:
    """Test malformed input."""

    @pytest.mark.parametrize('text', [
        "",
        "P6\n1 1\n255\n0 0 0\n",
        "P3\n1 1\n255\n0 0\n",
        "P3\n1 1\n255\n0 0 0 0\n",
        "P3\n1 1\n255\n0 x 0\n",
        "P3\n1 1\n65535\n0 0 0\n",
        "P3\n1 1\n255\n0 0 256\n",
    ])
    def test_rejects(self, text):
        with pytest.raises(PPMFormatError):
            read_ppm(io.StringIO(text))

    def test_is_value_error(self):
        assert issubclass(PPMFormatError, ValueError)


class TestSaveImage:
    """Test extension based saving."""

    def test_ppm_extension_is_text(self, pixels, tmp_path):
        path = tmp_path / "out.PPM"
        save_image(pixels, path)
        assert path.read_text().startswith("P3\n3 2\n255\n")

    def test_png(self, pixels, tmp_path):
        path = tmp_path / "out.png"
        save_image(pixels, path)
        with Image.open(path) as img:
            assert img.size == (3, 2)
            np.testing.assert_array_equal(np.asarray(img.convert('RGB')), pixels)

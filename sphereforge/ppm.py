"""
Image output.

Plain-text PPM (P3) encoding of 8-bit RGB pixel grids, plus a Pillow
backed writer for everything else (PNG, JPEG, ...).

Pixel arrays are (height, width, 3) uint8 with row 0 at the top of the
image; that row is written first.
"""

from __future__ import annotations
import io
import logging
from pathlib import Path
from typing import IO, Union

import numpy as np

logger = logging.getLogger(__name__)

MAX_VALUE = 255


class PPMFormatError(ValueError):
    """Error while reading a PPM file."""
    pass


def _check_pixels(pixels: np.ndarray) -> np.ndarray:
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected pixel array of shape (height, width, 3), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, MAX_VALUE).astype(np.uint8)
    return pixels


def format_ppm(pixels: np.ndarray) -> str:
    """Encode pixels as a P3 document.

    Args:
        pixels: uint8 array of shape (height, width, 3)

    Returns:
        Header "P3", "width height", "255" followed by one "r g b" line per
        pixel, rows top to bottom and pixels left to right
    """
    buffer = io.StringIO()
    _write_ppm_stream(_check_pixels(pixels), buffer)
    return buffer.getvalue()


def _write_ppm_stream(pixels: np.ndarray, stream: IO[str]) -> None:
    height, width = pixels.shape[:2]
    stream.write(f"P3\n{width} {height}\n{MAX_VALUE}\n")
    for row in pixels:
        stream.write(''.join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def write_ppm(pixels: np.ndarray, target: Union[str, Path, IO[str]]) -> None:
    """Write pixels as P3 to a path or an open text stream."""
    pixels = _check_pixels(pixels)
    if isinstance(target, (str, Path)):
        with open(target, 'w') as f:
            _write_ppm_stream(pixels, f)
        logger.info("Wrote %dx%d PPM to %s", pixels.shape[1], pixels.shape[0], target)
    else:
        _write_ppm_stream(pixels, target)


def read_ppm(source: Union[str, Path, IO[str]]) -> np.ndarray:
    """Read a P3 document back into a (height, width, 3) uint8 array.

    Raises:
        PPMFormatError: on a malformed header or pixel data
    """
    if isinstance(source, (str, Path)):
        text = Path(source).read_text()
    else:
        text = source.read()

    tokens = []
    for line in text.splitlines():
        tokens.extend(line.split('#', 1)[0].split())

    if len(tokens) < 4 or tokens[0] != 'P3':
        raise PPMFormatError("Not a plain-text PPM (missing P3 header)")

    try:
        width, height, max_value = (int(tok) for tok in tokens[1:4])
        values = [int(tok) for tok in tokens[4:]]
    except ValueError as e:
        raise PPMFormatError(f"Non-integer value in PPM: {e}") from e

    if max_value != MAX_VALUE:
        raise PPMFormatError(f"Unsupported max value {max_value}, expected {MAX_VALUE}")
    if len(values) != width * height * 3:
        raise PPMFormatError(
            f"Expected {width * height * 3} channel values for {width}x{height}, got {len(values)}"
        )
    if any(v < 0 or v > max_value for v in values):
        raise PPMFormatError("Channel value out of range")

    return np.array(values, dtype=np.uint8).reshape(height, width, 3)


def save_image(pixels: np.ndarray, filename: Union[str, Path]) -> None:
    """Save pixels to file; the extension picks the format.

    Args:
        pixels: uint8 array of shape (height, width, 3)
        filename: Output filename (.ppm is written as plain text P3)
    """
    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        write_ppm(pixels, path)
        return

    from PIL import Image as PILImage

    pil_image = PILImage.fromarray(_check_pixels(pixels))
    pil_image.save(path)
    logger.info("Wrote %s image to %s", path.suffix.lstrip('.').upper(), path)

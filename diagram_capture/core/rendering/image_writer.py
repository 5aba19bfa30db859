"""
Image Writer
============

PNG validation, optional optimization and atomic file output.
A file only appears at its final path once it is complete.
"""

import io
import math
import os
import tempfile
from pathlib import Path

from PIL import Image  # type: ignore

from diagram_capture.config.logging import get_logger

logger = get_logger(__name__)


class ImageValidationError(Exception):
    """Raised when captured bytes are not the expected PNG."""

    pass


def validate_png(data: bytes, width: int, height: int, scale: float = 1.0) -> None:
    """
    Check that ``data`` is a PNG of the captured viewport size.

    Raises:
        ImageValidationError: If the bytes do not decode as a PNG of
            ``width * scale`` by ``height * scale`` pixels, to the enclosing pixel
    """
    if not data:
        raise ImageValidationError("Screenshot is empty")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            size = image.size
            image.verify()
    except Exception as e:
        raise ImageValidationError(f"Screenshot is not a readable image: {e}") from e

    if image_format != "PNG":
        raise ImageValidationError(f"Screenshot is {image_format}, expected PNG")

    # Chromium sizes a clip to the device-pixel rectangle enclosing it
    expected = (math.ceil(width * scale), math.ceil(height * scale))
    lowest = (math.floor(width * scale), math.floor(height * scale))
    if not (lowest[0] <= size[0] <= expected[0] and lowest[1] <= size[1] <= expected[1]):
        raise ImageValidationError(
            f"Screenshot is {size[0]}x{size[1]}, expected {expected[0]}x{expected[1]}"
        )


def optimize_png(data: bytes) -> bytes:
    """Re-encode PNG bytes with maximum compression, keeping the original on failure."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            output = io.BytesIO()
            image.save(output, format="PNG", optimize=True, compress_level=9)
        optimized = output.getvalue()
    except Exception as e:
        logger.warning("PNG optimization failed, using original", error=str(e))
        return data

    if len(optimized) >= len(data):
        return data

    logger.debug(
        "PNG optimization completed",
        original_size=len(data),
        optimized_size=len(optimized),
        reduction_percent=round((1 - len(optimized) / len(data)) * 100, 2),
    )
    return optimized


def write_png(data: bytes, path: Path) -> Path:
    """
    Atomically write ``data`` to ``path``, replacing any existing file.

    The bytes go to a temporary file in the target directory first, which is
    then renamed over ``path``. On failure the temporary file is removed.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    return path

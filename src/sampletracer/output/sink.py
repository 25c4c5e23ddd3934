"""Receivers for finished pixels.

The camera emits pixels in scanline-major order through the PixelSink
protocol. Sinks run on the orchestrating thread after a pixel's samples
have been reduced, so they never block the worker threads.
"""

from typing import Protocol

import numpy as np
import numpy.typing as npt


class PixelSink(Protocol):
    """Anything that accepts a stream of linear RGB pixels."""

    def begin(self, width: int, height: int) -> None:
        """Called once before the first pixel with the image size."""

    def write_pixel(self, color: npt.ArrayLike) -> None:
        """Called once per pixel, top-to-bottom, left-to-right."""

    def finish(self) -> None:
        """Called once after the last pixel."""


class ImageBuffer:
    """Sink that collects pixels into a float32 array of shape (H, W, 3).

    Raises:
        RuntimeError: If more pixels are written than the image holds, or a
            pixel arrives before ``begin``.
    """

    def __init__(self) -> None:
        self.image: npt.NDArray[np.float32] | None = None
        self._cursor = 0

    @property
    def pixels_written(self) -> int:
        return self._cursor

    def begin(self, width: int, height: int) -> None:
        self.image = np.zeros((height, width, 3), dtype=np.float32)
        self._cursor = 0

    def write_pixel(self, color: npt.ArrayLike) -> None:
        if self.image is None:
            raise RuntimeError("write_pixel() called before begin()")
        height, width, _ = self.image.shape
        if self._cursor >= width * height:
            raise RuntimeError(f"Image is full ({width}x{height} pixels)")
        row, col = divmod(self._cursor, width)
        self.image[row, col] = np.asarray(color, dtype=np.float32)
        self._cursor += 1

    def finish(self) -> None:
        pass

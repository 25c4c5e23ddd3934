"""Netpbm (PPM) image writer.

Writes either the plain-text ``P3`` variant, one "r g b" line per pixel, or
the binary ``P6`` variant. The writer is a PixelSink, so the camera can
stream pixels into it while rendering.

Example:
    >>> import sys
    >>> from sampletracer.output.ppm import PPMWriter
    >>> camera.render(world, sink=PPMWriter(sys.stdout))
"""

from typing import IO

import numpy.typing as npt

from sampletracer.output.color import color_to_bytes

MAX_COLOR_VALUE = 255


class PPMWriter:
    """PixelSink that serializes pixels to a PPM stream.

    Args:
        stream: Text stream for P3 output, binary stream for P6 output.
        binary: Write P6 instead of P3.
    """

    def __init__(self, stream: IO, *, binary: bool = False) -> None:
        self._stream = stream
        self._binary = binary
        self._expected = 0
        self._written = 0

    @property
    def pixels_written(self) -> int:
        return self._written

    def begin(self, width: int, height: int) -> None:
        self._expected = width * height
        self._written = 0
        magic = "P6" if self._binary else "P3"
        self._write(f"{magic}\n{width} {height}\n{MAX_COLOR_VALUE}\n")

    def write_pixel(self, color: npt.ArrayLike) -> None:
        r, g, b = color_to_bytes(color)
        if self._binary:
            self._stream.write(bytes((r, g, b)))
        else:
            self._stream.write(f"{r} {g} {b}\n")
        self._written += 1

    def finish(self) -> None:
        if self._written != self._expected:
            raise RuntimeError(
                f"PPM stream truncated: wrote {self._written} of {self._expected} pixels"
            )
        self._stream.flush()

    def _write(self, text: str) -> None:
        if self._binary:
            self._stream.write(text.encode("ascii"))
        else:
            self._stream.write(text)

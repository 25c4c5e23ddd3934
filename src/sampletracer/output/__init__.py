"""Output module for rendered pixels and images.

Components:
    sink: PixelSink protocol and an in-memory ImageBuffer
    color: gamma correction and 8-bit conversion
    ppm: streaming PPM (P3/P6) writer
    export: PNG/PPM file export via Pillow
"""

from .color import color_to_bytes, image_to_uint8, linear_to_gamma
from .export import save_image, save_png, save_ppm
from .ppm import PPMWriter
from .sink import ImageBuffer, PixelSink

__all__ = [
    "PixelSink",
    "ImageBuffer",
    "PPMWriter",
    "linear_to_gamma",
    "color_to_bytes",
    "image_to_uint8",
    "save_png",
    "save_ppm",
    "save_image",
]

"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit via Pillow)
    - PPM (P3 text or P6 binary, see sampletracer.output.ppm)

Example:
    >>> from sampletracer.output.export import save_image
    >>> image = camera.render(world)
    >>> save_image(image, "output.png")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from sampletracer.output.color import image_to_uint8
from sampletracer.output.ppm import PPMWriter


def save_png(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a linear image of shape (H, W, 3) as a PNG file.

    Applies gamma-2 correction and clamping before conversion to 8 bits.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def save_ppm(image: npt.NDArray[np.floating], filepath: str | Path, *, binary: bool = False) -> None:
    """Save a linear image of shape (H, W, 3) as a PPM file."""
    height, width, _ = image.shape
    mode = "wb" if binary else "w"
    with open(filepath, mode) as stream:
        writer = PPMWriter(stream, binary=binary)
        writer.begin(width, height)
        for row in image:
            for color in row:
                writer.write_pixel(color)
        writer.finish()


def save_image(
    image: npt.NDArray[np.floating], filepath: str | Path, *, binary: bool = False
) -> Path:
    """Save an image, choosing the format from the file extension.

    Args:
        image: Linear image of shape (H, W, 3).
        filepath: Destination ending in .png or .ppm.
        binary: Write P6 instead of P3 for .ppm files. Ignored for PNG.

    Returns:
        The destination path.

    Raises:
        ValueError: If the extension is not supported.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".png":
        save_png(image, path)
    elif suffix == ".ppm":
        save_ppm(image, path, binary=binary)
    else:
        raise ValueError(f"Unsupported image format '{suffix}' (expected .png or .ppm)")
    return path

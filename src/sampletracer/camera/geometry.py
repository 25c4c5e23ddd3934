"""Derived camera geometry.

``compute_geometry`` turns a CameraConfig into the per-render state used
for ray generation: the orthonormal camera basis, the pixel grid on the
focus plane and the defocus disk. It runs once per render on the host in
float64 NumPy; the camera then uploads the vectors to Taichi fields.

Coordinate conventions (right-handed):
    w: points from lookat toward lookfrom (opposite the view direction)
    u: points right in the image plane
    v: points up in the image plane
Image rows increase downward, so the vertical viewport edge runs along -v.
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from sampletracer.camera.config import CameraConfig

Vector = npt.NDArray[np.float64]


@dataclass(frozen=True, eq=False)
class CameraGeometry:
    """Per-render camera state derived from a CameraConfig.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        center: Camera center (lookfrom).
        u: Unit right vector.
        v: Unit up vector.
        w: Unit backward vector.
        viewport_u: Vector across the full viewport width, left to right.
        viewport_v: Vector down the full viewport height, top to bottom.
        pixel_delta_u: Offset from a pixel to its right neighbour.
        pixel_delta_v: Offset from a pixel to the one below.
        viewport_upper_left: Upper-left corner of the viewport.
        pixel00_loc: Center of pixel (0, 0).
        defocus_radius: Radius of the lens disk.
        defocus_disk_u: Horizontal lens disk radius vector.
        defocus_disk_v: Vertical lens disk radius vector.
        sample_scale: 1 / samples_per_pixel.
    """

    image_width: int
    image_height: int
    center: Vector
    u: Vector
    v: Vector
    w: Vector
    viewport_u: Vector
    viewport_v: Vector
    pixel_delta_u: Vector
    pixel_delta_v: Vector
    viewport_upper_left: Vector
    pixel00_loc: Vector
    defocus_radius: float
    defocus_disk_u: Vector
    defocus_disk_v: Vector
    sample_scale: float

    def pixel_center(self, i: float, j: float) -> Vector:
        """World-space position of pixel (i, j) on the focus plane.

        Fractional coordinates address points inside the pixel footprint;
        (i - 0.5, j - 0.5) is the pixel's upper-left corner.
        """
        return self.pixel00_loc + i * self.pixel_delta_u + j * self.pixel_delta_v

    def viewport_corners(self) -> dict[str, Vector]:
        """World-space corners of the viewport rectangle."""
        upper_left = self.viewport_upper_left
        return {
            "upper_left": upper_left,
            "upper_right": upper_left + self.viewport_u,
            "lower_left": upper_left + self.viewport_v,
            "lower_right": upper_left + self.viewport_u + self.viewport_v,
        }


def _unit(v: Vector) -> Vector:
    return v / np.linalg.norm(v)


def compute_geometry(config: CameraConfig) -> CameraGeometry:
    """Derive the camera geometry from a configuration.

    The config is not validated here; callers go through
    :meth:`Camera.initialize`, which validates first.

    Args:
        config: The camera configuration.

    Returns:
        The derived CameraGeometry.
    """
    image_width = config.image_width
    image_height = config.image_height

    center = np.asarray(config.lookfrom, dtype=np.float64)
    lookat = np.asarray(config.lookat, dtype=np.float64)
    vup = np.asarray(config.vup, dtype=np.float64)

    # Viewport dimensions on the focus plane
    theta = math.radians(config.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * config.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    # Orthonormal basis
    w = _unit(center - lookat)
    u = _unit(np.cross(vup, w))
    v = np.cross(w, u)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = center - config.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = config.focus_dist * math.tan(math.radians(config.defocus_angle / 2.0))
    if config.defocus_angle <= 0.0:
        defocus_radius = 0.0

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        center=center,
        u=u,
        v=v,
        w=w,
        viewport_u=viewport_u,
        viewport_v=viewport_v,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        viewport_upper_left=viewport_upper_left,
        pixel00_loc=pixel00_loc,
        defocus_radius=defocus_radius,
        defocus_disk_u=defocus_radius * u,
        defocus_disk_v=defocus_radius * v,
        sample_scale=config.sample_scale,
    )

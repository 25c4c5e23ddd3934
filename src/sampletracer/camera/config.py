"""Camera configuration.

CameraConfig is the whole tuning surface of the renderer: image size,
sampling, bounce budget, view and lens parameters. It is immutable so a
render can never observe a configuration change halfway through.

Example:
    >>> from sampletracer.camera.config import CameraConfig
    >>> config = CameraConfig(aspect_ratio=16.0 / 9.0, image_width=400, vfov=20.0)
    >>> config.image_height
    225
"""

import dataclasses
from dataclasses import dataclass

import numpy as np

Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for a thin-lens camera.

    Attributes:
        aspect_ratio: Ratio of image width over height.
        image_width: Rendered image width in pixels.
        samples_per_pixel: Number of random samples averaged per pixel.
        max_depth: Maximum number of scatter events per sample path.
        vfov: Vertical field of view in degrees.
        lookfrom: Camera position in world space.
        lookat: Point the camera looks at.
        vup: Camera-relative up direction.
        defocus_angle: Aperture cone angle in degrees, measured at the
            focus plane. 0 disables depth of field (pinhole camera).
        focus_dist: Distance from lookfrom to the plane of perfect focus.
            The viewport is placed on this plane.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: Vec3 = (0.0, 0.0, 0.0)
    lookat: Vec3 = (0.0, 0.0, -1.0)
    vup: Vec3 = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    @property
    def image_height(self) -> int:
        """Image height in pixels, never less than 1.

        Uses Python's round(), which rounds exact halves to the nearest even
        integer: width 5 at aspect 2.0 gives 2, width 7 gives 4.
        """
        return max(1, round(self.image_width / self.aspect_ratio))

    @property
    def sample_scale(self) -> float:
        """Color scale factor for a sum of pixel samples."""
        return 1.0 / self.samples_per_pixel

    def validate(self) -> None:
        """Check the configuration preconditions.

        Raises:
            ValueError: If any parameter is out of range or the view
                orientation is degenerate (lookfrom == lookat, or vup
                parallel to the view direction).
        """
        if self.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {self.image_width}")
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if not self.focus_dist > 0.0:
            raise ValueError(f"focus_dist must be positive, got {self.focus_dist}")
        if self.defocus_angle >= 180.0:
            raise ValueError(f"defocus_angle must be below 180 degrees, got {self.defocus_angle}")

        lookfrom = np.asarray(self.lookfrom, dtype=np.float64)
        view = lookfrom - np.asarray(self.lookat, dtype=np.float64)
        vup = np.asarray(self.vup, dtype=np.float64)
        view_length = np.linalg.norm(view)
        if view_length < 1e-12:
            raise ValueError("lookfrom and lookat must be distinct points")
        if np.linalg.norm(np.cross(vup, view)) <= 1e-9 * view_length * np.linalg.norm(vup):
            raise ValueError("vup must not be parallel to the view direction")

    def with_overrides(self, **changes) -> "CameraConfig":
        """Return a validated copy with some fields replaced."""
        config = dataclasses.replace(self, **changes)
        config.validate()
        return config

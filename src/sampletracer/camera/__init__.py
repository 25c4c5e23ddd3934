"""Camera module for view configuration, ray generation and rendering.

Components:
    config: CameraConfig, the immutable tuning surface
    geometry: CameraGeometry derived from a config (basis, pixel grid, lens)
    camera: Camera with ray generation and the scanline render loop

Camera responsibilities:
    - Build the orthonormal basis from lookfrom, lookat and vup
    - Place the pixel grid on the focus plane
    - Jitter rays within the pixel footprint for anti-aliasing
    - Sample ray origins on the lens disk for depth of field
"""

from .camera import Camera
from .config import CameraConfig
from .geometry import CameraGeometry, compute_geometry

__all__ = [
    "Camera",
    "CameraConfig",
    "CameraGeometry",
    "compute_geometry",
]
